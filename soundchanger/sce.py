'''Compile sound change rules

Exceptions:
    SoundChangeParseError  -- base class for rules that failed to compile
    SoundChangeFormatError -- the rule does not have the shape of a sound change
    SoundChangeFieldError  -- one or more fields of the rule are invalid

Classes:
    Field       -- metadata for one position of a sound change
    SoundChange -- represents a compiled sound change rule

Functions:
    compileSoundChange -- compiles a sound change rule
    compileRuleset     -- compiles a set of sound change rules
''''''
==================================== To-do ====================================
=== Implementation ===
Representative phonemes are never deduplicated, so RepresentativePool.increment
is never reached; look up existing entries before allocating if usage counts are needed

=== Features ===
Applying compiled rules to the lexicon
'''

import logging
import logging.config
import os.path
import re
from dataclasses import dataclass, field as _field
from .core import (LangException, NestedBrackets, MultipleBoundaries, BoundaryNotAtStart,
                   BoundaryNotAtEnd, BoundaryNotAllowed)
from ._pattern import Any, Boundary, compileField, hasBoundaryOf, unparsePattern

# == Constants == #
__location__ = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'logging.conf')
ARROW = '→'
RULE_REGEX = re.compile(
    r'^(?P<TARGET>[^\s/→_]*)[/→](?P<REPLACEMENT>[^\s/→_]*)'
    r'/(?P<ENVSTART>[^\s/→_]*)_(?P<ENVEND>[^\s/→_]*)$')
FIELDS = ('TARGET', 'REPLACEMENT', 'ENVSTART', 'ENVEND')
FIELD_ATTRS = {
    'TARGET': 'target',
    'REPLACEMENT': 'replacement',
    'ENVSTART': 'envStart',
    'ENVEND': 'envEnd',
}

# == Globals == #
logger = None

# == Exceptions == #
class SoundChangeParseError(LangException):
    '''Base class for sound changes that failed to compile.'''

class SoundChangeFormatError(SoundChangeParseError):
    '''Exception raised when a rule is not of the form tar/rep/envstart_envend.'''
    def __init__(self, text):
        super().__init__(f'invalid sound change: {text!r}')
        self.text = text

class SoundChangeFieldError(SoundChangeParseError):
    '''Exception raised when one or more fields of a rule failed to compile.'''
    def __init__(self, errors, text):
        super().__init__(f'invalid sound change: {text!r}; {"; ".join(str(error) for error in errors)}')
        self.errors = errors
        self.text = text

# == Classes == #
@dataclass
class Field:
    kind: str
    hasBoundary: bool = False

    def __post_init__(self):
        if self.kind not in FIELDS:
            raise ValueError(f'invalid field: {self.kind!r}')

    def __str__(self):
        return self.kind

@dataclass
class SoundChange:
    '''Class for representing a compiled sound change.

    Instance variables:
        target      -- elements to be changed (list)
        replacement -- elements to change them to (list)
        envStart    -- elements that must precede the target (list)
        envEnd      -- elements that must follow the target (list)
        fields      -- metadata for each field, keyed by field kind (dict)

    Methods:
        field   -- get the metadata and elements of a field
        insert  -- add an element to a field
        remove  -- remove an element from a field
        unparse -- render the sound change as rule text
    '''
    target: list = _field(default_factory=list)
    replacement: list = _field(default_factory=list)
    envStart: list = _field(default_factory=list)
    envEnd: list = _field(default_factory=list)
    fields: dict = _field(init=False, repr=False)

    def __post_init__(self):
        self.fields = {kind: Field(kind, hasBoundaryOf(kind, self.elements(kind))) for kind in FIELDS}

    def __iter__(self):
        for kind in FIELDS:
            yield self.elements(kind)

    def elements(self, kind):
        return getattr(self, FIELD_ATTRS[kind])

    def field(self, kind):
        return self.fields[kind], self.elements(kind)

    def insert(self, kind, element, head=False, into=None):
        '''Add an element to a field.

        Arguments:
            kind    -- the field to change (str)
            element -- the element to add (Element)
            head    -- add at the start of the field rather than the end (bool)
            into    -- index of an Any element in the field to add into (int)

        Raises a FieldParseError if the element may not go there.
        '''
        field, elements = self.field(kind)
        nested = into is not None
        if nested and not isinstance(elements[into], Any):
            raise TypeError(f'element at {into} is not Any')
        if isinstance(element, Any) and nested:
            raise NestedBrackets(kind)
        target = elements[into].elements if nested else elements
        if nested:
            athead = into == 0
            attail = into == len(elements)-1 and (not head or not target)
        else:
            athead, attail = head or not elements, not head or not elements
        if isinstance(element, Boundary) or (isinstance(element, Any) and Boundary() in element):
            if field.hasBoundary:
                raise MultipleBoundaries(kind)
            elif kind == 'ENVSTART' and not athead:
                raise BoundaryNotAtStart(kind)
            elif kind == 'ENVEND' and not attail:
                raise BoundaryNotAtEnd(kind)
            elif kind not in ('ENVSTART', 'ENVEND'):
                raise BoundaryNotAllowed(kind)
        elif field.hasBoundary:
            # Nothing may be added outside an existing boundary
            if kind == 'ENVSTART' and head and not nested:
                raise BoundaryNotAtStart(kind)
            elif kind == 'ENVEND' and attail:
                raise BoundaryNotAtEnd(kind)
        if head:
            target.insert(0, element)
        else:
            target.append(element)
        field.hasBoundary = hasBoundaryOf(kind, elements)

    def remove(self, kind, index, within=None):
        '''Remove an element from a field.

        Arguments:
            kind   -- the field to change (str)
            index  -- the index of the element to remove (int)
            within -- index of an Any element in the field to remove from (int)

        Returns the removed Element
        '''
        field, elements = self.field(kind)
        if within is None:
            element = elements.pop(index)
        else:
            element = elements[within].elements.pop(index)
        field.hasBoundary = hasBoundaryOf(kind, elements)
        return element

    def unparse(self, language, pool):
        tar, rep, envstart, envend = (unparsePattern(elements, language, pool) for elements in self)
        return f'{tar}{ARROW}{rep}/{envstart}_{envend}'

# == Functions == #
def compileSoundChange(line, language, pool, rewriteRules=None):
    '''Compile a sound change rule.

    Arguments:
        line         -- the rule, e.g. 't→d/V_#' (str)
        language     -- the inventory to match against (Language)
        pool         -- where unmatched text is allocated (RepresentativePool)
        rewriteRules -- rewrite rules as source -> target strings (dict)

    Raises SoundChangeFormatError if the rule is malformed, or
    SoundChangeFieldError listing the errors in every failed field.

    Returns a SoundChange
    '''
    logger.debug(f'Compiling `{line}`')
    match = RULE_REGEX.match(line.strip())
    if match is None:
        logger.debug('> Rule is not of the form tar/rep/envstart_envend')
        raise SoundChangeFormatError(line)
    fields = {}
    errors = []
    for kind in FIELDS:
        elements, _errors = compileField(match[kind], Field(kind), language, pool, rewriteRules)
        if _errors:
            logger.debug(f'> {kind.lower()} `{match[kind]}` failed: {"; ".join(map(str, _errors))}')
        else:
            logger.debug(f'> {kind.lower()} `{match[kind]}` compiled to {elements}')
        fields[FIELD_ATTRS[kind]] = elements
        errors.extend(_errors)
    if errors:
        raise SoundChangeFieldError(errors, line)
    return SoundChange(**fields)

def compileRuleset(ruleset, language, pool, rewriteRules=None):
    '''Compile a set of sound change rules.

    Rules which fail to compile are logged and set aside, and do not stop the
    remaining rules from being compiled.

    Arguments:
        ruleset      -- the rules, one per line (str or list)
        language     -- the inventory to match against (Language)
        pool         -- where unmatched text is allocated (RepresentativePool)
        rewriteRules -- rewrite rules as source -> target strings (dict)

    Returns a tuple of the compiled SoundChanges and the error text of each broken rule.
    '''
    if isinstance(ruleset, str):
        ruleset = ruleset.splitlines()
    soundChanges = []
    broken = []
    for line in ruleset:
        line = line.strip()
        if not line:
            continue
        try:
            soundChange = compileSoundChange(line, language, pool, rewriteRules)
        except SoundChangeParseError as e:
            logger.warning(f'{line!r} failed to compile: {e}')
            broken.append(str(e))
        else:
            soundChanges.append(soundChange)
    return soundChanges, broken

def setupLogging(filename=__location__, loggername='sce'):
    global logger
    if filename is not None:
        logging.config.fileConfig(filename, disable_existing_loggers=False)
    logger = logging.getLogger(loggername)

# Setup logging
setupLogging()
