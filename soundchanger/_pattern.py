'''Rule field parsing

Classes:
    Element   -- Base class for field elements
    PhonemeRef -- Element referring to a phoneme, possibly a representative one
    GroupRef  -- Element referring to a group of phonemes
    Boundary  -- Element marking a word boundary
    Any       -- Element matching any one of a list of elements

Functions:
    scan           -- matches groups and phonemes of a language at a position in a string
    matchBrackets  -- finds the bracket closing the one at a position in a string
    compileField   -- parses the text of one rule field into a list of elements
    hasBoundaryOf  -- checks whether a field's elements carry a boundary at the edge
    unparsePattern -- renders a list of elements as rule text
'''
import regex
from dataclasses import dataclass, field as _field
from .core import (NestedBrackets, MultipleBoundaries, BoundaryNotAtStart, BoundaryNotAtEnd,
                   BoundaryNotAllowed)

## Constants
GRAPHEME_REGEX = regex.compile(r'\X')
LBRACKET = '['
RBRACKET = ']'
BOUNDARY = '#'

## Classes
@dataclass
class Element:
    @property
    def type(self):
        return self.__class__.__name__

    def unparse(self, language, pool):
        return ''

@dataclass
class PhonemeRef(Element):
    key: object
    rep: bool = False

    def resolve(self, language, pool):
        return pool[self.key] if self.rep else language.phoneme(self.key)

    def unparse(self, language, pool):
        return self.resolve(language, pool).display

@dataclass
class GroupRef(Element):
    key: object

    def unparse(self, language, pool):
        return language.group(self.key).name.abbrev

@dataclass
class Boundary(Element):
    def __str__(self):
        return BOUNDARY

    def unparse(self, language, pool):
        return BOUNDARY

@dataclass
class Any(Element):
    elements: list = _field(default_factory=list)

    def __len__(self):
        return len(self.elements)

    def __iter__(self):
        yield from self.elements

    def __contains__(self, item):
        return item in self.elements

    def unparse(self, language, pool):
        return f'{LBRACKET}{unparsePattern(self.elements, language, pool)}{RBRACKET}'

## Functions
def scan(string, pos, language):
    '''Match the groups and phonemes of a language at a position in a string.

    Groups are tried in inventory order. For each group, its full name is tried,
    then its abbreviation, and if neither matched, each of its phonemes. The
    position advances after every individual match, so several elements may be
    returned, and the first match in inventory order wins over a longer one.
    Phonemes outside any group are tried only if nothing else matched.

    Arguments:
        string   -- the field text (str)
        pos      -- the position to start matching at (int)
        language -- the inventory to match against (Language)

    Returns a tuple of the matched elements and the new position.
    '''
    elements = []
    for groupkey, group in language.iterGroups():
        name = group.name
        if name.full and string.startswith(name.name, pos):
            elements.append(GroupRef(groupkey))
            pos += len(name.name)
        elif string.startswith(name.abbrev, pos):
            elements.append(GroupRef(groupkey))
            pos += 1
        else:
            for key, phoneme in language.iterPhonemes(groupkey):
                if string.startswith(phoneme.phoneme, pos):
                    elements.append(PhonemeRef(key))
                    pos += len(phoneme.phoneme)
    if not elements:
        for key in language.ungrouped():
            phoneme = language.phoneme(key)
            if string.startswith(phoneme.phoneme, pos):
                elements.append(PhonemeRef(key))
                pos += len(phoneme.phoneme)
    return elements, pos

def matchBrackets(string, start=0):
    '''Find the bracket closing the one at string[start].

    Returns the index of the closing bracket, or -1 if it is unmatched.
    '''
    depth = 0
    for i in range(start, len(string)):
        if string[i] == LBRACKET:
            depth += 1
        elif string[i] == RBRACKET:
            depth -= 1
            if depth == 0:
                return i
    return -1

def isKnown(string, language):
    '''Check whether a string is a phoneme of, or starts with a group name of, a language.'''
    if language.findPhoneme(string) is not None:
        return True
    return any(group.name.matches(string) for group in language.groups.values())

def unmatchedToken(string, pos, language, rewriteRules=None):
    '''Find the text at a position that matched nothing in the language.

    A rewrite rule source is taken whole, provided it is not itself known to the
    language; otherwise a single extended grapheme cluster is taken.
    '''
    for source in (rewriteRules or ()):
        if source and string.startswith(source, pos) and not isKnown(source, language):
            return source
    return GRAPHEME_REGEX.match(string, pos).group()

def compileField(string, field, language, pool, rewriteRules=None, head=True, tail=True, nested=False):
    '''Parse the text of one rule field.

    Arguments:
        string       -- the field text (str)
        field        -- the field being compiled; its boundary flag is updated (Field)
        language     -- the inventory to match against (Language)
        pool         -- where unmatched text is allocated (RepresentativePool)
        rewriteRules -- rewrite rules as source -> target strings (dict)
        head, tail   -- whether the text sits at the start/end of the field (bool)
        nested       -- whether the text is inside brackets (bool)

    Errors do not stop compilation; every error found is returned.

    Returns a tuple of the elements and a list of FieldParseErrors.
    '''
    kind = field.kind
    elements = []
    errors = []
    pos = 0
    while pos < len(string):
        _elements, _pos = scan(string, pos, language)
        end = matchBrackets(string, pos) if string[pos] == LBRACKET else -1
        if _pos > pos:
            elements.extend(_elements)
            pos = _pos
        elif end != -1:
            if nested:
                errors.append(NestedBrackets(kind, pos))
            else:
                _elements, _errors = compileField(
                    string[pos+1:end], field, language, pool, rewriteRules,
                    head=head, tail=(end == len(string)-1), nested=True)
                elements.append(Any(_elements))
                errors.extend(_errors)
            pos = end + 1
        elif string[pos] == BOUNDARY:
            attail = tail and pos == len(string)-1
            if field.hasBoundary:
                errors.append(MultipleBoundaries(kind, pos))
            elif kind == 'ENVSTART' and not head:
                errors.append(BoundaryNotAtStart(kind, pos))
            elif kind == 'ENVEND' and not attail:
                errors.append(BoundaryNotAtEnd(kind, pos))
            elif kind not in ('ENVSTART', 'ENVEND'):
                errors.append(BoundaryNotAllowed(kind, pos))
            else:
                elements.append(Boundary())
            field.hasBoundary = True
            pos += 1
        else:
            token = unmatchedToken(string, pos, language, rewriteRules)
            elements.append(PhonemeRef(pool.allocate(token), rep=True))
            pos += len(token)
        if not nested:
            head = False
    return elements, errors

def hasBoundaryOf(kind, elements):
    '''Check whether a field's elements carry a boundary at the edge for that field.'''
    if not elements:
        return False
    if kind == 'ENVSTART':
        element = elements[0]
    elif kind == 'ENVEND':
        element = elements[-1]
    else:
        return False
    return isinstance(element, Boundary) or (isinstance(element, Any) and Boundary() in element)

def unparsePattern(pattern, language, pool):
    return ''.join(element.unparse(language, pool) for element in pattern)
