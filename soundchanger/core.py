'''Base classes and functions

Exceptions:
    LangException   -- Base exception
    FormatError     -- Error for incorrect formatting
    NotFoundError   -- Error for stale or unknown keys
    FieldParseError -- Base class for errors found while compiling a field

Classes:
    Key        -- generation-tagged handle into a SlotMap
    PhonemeKey -- handle to a phoneme
    GroupKey   -- handle to a group
    SlotMap    -- arena storage handing out keys
    Phoneme    -- represents a sound unit with an optional display spelling
    GroupName  -- name of a group of phonemes
    Group      -- represents a named class of phonemes
'''

import re
from dataclasses import dataclass, field

# == Exceptions == #
class LangException(Exception):
    '''Base class for exceptions in this package'''

class FormatError(LangException):
    '''Exception raised for errors in formatting objects.'''

class NotFoundError(LangException):
    '''Exception raised when a key no longer refers to anything.'''
    def __init__(self, key):
        super().__init__(f'no such item: {key!r}')
        self.key = key

class FieldParseError(LangException):
    '''Base class for errors found while compiling a single rule field.'''
    message = 'invalid field'

    def __init__(self, field, column=None):
        if column is None:
            super().__init__(f'{self.message} in {field.lower()}')
        else:
            super().__init__(f'{self.message} in {field.lower()} @ {column}')
        self.field = field
        self.column = column

    @property
    def kind(self):
        return self.__class__.__name__

class NestedBrackets(FieldParseError):
    message = 'brackets may not be nested'

class MultipleBoundaries(FieldParseError):
    message = 'only one boundary is allowed'

class BoundaryNotAtStart(FieldParseError):
    message = 'boundary must be at the start'

class BoundaryNotAtEnd(FieldParseError):
    message = 'boundary must be at the end'

class BoundaryNotAllowed(FieldParseError):
    message = 'boundary not allowed'

# == Classes == #
@dataclass(frozen=True, order=True)
class Key:
    index: int
    version: int

    def __repr__(self):
        return f'{self.__class__.__name__}({self.index}v{self.version})'

class PhonemeKey(Key):
    pass

class GroupKey(Key):
    pass

class SlotMap:
    '''Arena of values addressed by generation-tagged keys.

    Removing a value frees its slot for reuse, but bumps the slot's version
    first, so keys to the removed value never resolve again.
    '''
    def __init__(self, keytype=Key):
        self.keytype = keytype
        self._slots = []  # [version, value, occupied]
        self._free = []

    def __len__(self):
        return sum(1 for slot in self._slots if slot[2])

    def __contains__(self, key):
        return self._slot(key) is not None

    def __getitem__(self, key):
        slot = self._slot(key)
        if slot is None:
            raise KeyError(key)
        return slot[1]

    def __iter__(self):
        yield from self.keys()

    def _slot(self, key):
        if not isinstance(key, self.keytype) or not 0 <= key.index < len(self._slots):
            return None
        slot = self._slots[key.index]
        if slot[2] and slot[0] == key.version:
            return slot
        return None

    def insert(self, value):
        if self._free:
            index = self._free.pop()
            slot = self._slots[index]
            slot[1], slot[2] = value, True
        else:
            index = len(self._slots)
            slot = [0, value, True]
            self._slots.append(slot)
        return self.keytype(index, slot[0])

    def remove(self, key):
        slot = self._slot(key)
        if slot is None:
            raise KeyError(key)
        value = slot[1]
        slot[0] += 1
        slot[1], slot[2] = None, False
        self._free.append(key.index)
        return value

    def get(self, key, default=None):
        slot = self._slot(key)
        return default if slot is None else slot[1]

    def keys(self):
        return [self.keytype(index, slot[0]) for index, slot in enumerate(self._slots) if slot[2]]

    def values(self):
        return [slot[1] for slot in self._slots if slot[2]]

    def items(self):
        return [(self.keytype(index, slot[0]), slot[1]) for index, slot in enumerate(self._slots) if slot[2]]

PHONEME_REGEX = re.compile(r'^(?P<phoneme>[^\s\[\]]+)(?: ?\[(?P<grapheme>[^\s\[\]]+)\])?$')
GROUP_NAME_REGEX = re.compile(r'^(?:(?P<name>\S(?:.*\S)?) \((?P<abbrev>\S)\)|(?P<short>\S))$')

@dataclass
class Phoneme:
    '''Represents a single sound unit.

    Instance variables:
        phoneme  -- the canonical symbol (str)
        grapheme -- the spelling used for display, if any (str)
    '''
    phoneme: str
    grapheme: str = None

    def __str__(self):
        if self.grapheme is None:
            return self.phoneme
        return f'{self.phoneme} [{self.grapheme}]'

    @property
    def display(self):
        return self.phoneme if self.grapheme is None else self.grapheme

    @staticmethod
    def make(string):
        match = PHONEME_REGEX.match(string.strip())
        if match is None:
            raise FormatError(f'invalid phoneme: {string!r}')
        return Phoneme(match['phoneme'], match['grapheme'])

@dataclass
class GroupName:
    '''Name of a group, either a bare abbreviation or a full name with one.'''
    abbrev: str
    name: str = None

    def __post_init__(self):
        if len(self.abbrev) != 1 or self.abbrev.isspace():
            raise FormatError(f'invalid group abbreviation: {self.abbrev!r}')
        if self.name is not None and not self.name:
            raise FormatError('group name cannot be empty')

    def __str__(self):
        if self.name is None:
            return self.abbrev
        return f'{self.name} ({self.abbrev})'

    @property
    def full(self):
        return self.name is not None

    def matches(self, string, pos=0):
        if self.name is not None and string.startswith(self.name, pos):
            return True
        return string.startswith(self.abbrev, pos)

    @staticmethod
    def make(string):
        match = GROUP_NAME_REGEX.match(string.strip())
        if match is None:
            raise FormatError(f'invalid group name: {string!r}')
        if match['short'] is not None:
            return GroupName(match['short'])
        return GroupName(match['abbrev'], match['name'])

@dataclass
class Group:
    '''Represents a named class of phonemes.'''
    name: GroupName
    keys: set = field(default_factory=set)

    def __str__(self):
        return str(self.name)

    def __len__(self):
        return len(self.keys)

    def __contains__(self, key):
        return key in self.keys

    def __iter__(self):
        yield from sorted(self.keys)
