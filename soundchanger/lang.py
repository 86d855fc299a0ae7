'''Create and manipulate phoneme inventories

Classes:
    Language           -- the phonemes and groups of a single language
    RepresentativePool -- stand-in phonemes for rule text not found in a language
'''

from dataclasses import dataclass, field
from .core import FormatError, NotFoundError, PhonemeKey, GroupKey, SlotMap, Phoneme, GroupName, Group

## Classes

@dataclass
class Language:
    '''Class for representing the phoneme inventory of a single language.

    Instance variables:
        phonemes     -- every phoneme in the language (SlotMap)
        groups       -- every group in the language (SlotMap)
        phonemeTable -- the key for each imported phoneme symbol (dict)

    Methods:
        addPhoneme    -- add a phoneme, optionally to some groups
        removePhoneme -- remove a phoneme from the language and all groups
        addGroup      -- add a group
        removeGroup   -- remove a group, leaving its phonemes in place
        iterGroups    -- iterate over every group
        iterPhonemes  -- iterate over the phonemes of a group, or of the language
    '''
    phonemes: SlotMap = field(default_factory=lambda: SlotMap(PhonemeKey))
    groups: SlotMap = field(default_factory=lambda: SlotMap(GroupKey))
    phonemeTable: dict = field(default_factory=dict)

    def __getitem__(self, key):
        if isinstance(key, PhonemeKey):
            return self.phoneme(key)
        elif isinstance(key, GroupKey):
            return self.group(key)
        raise TypeError(f'invalid key: {key!r}')

    def __contains__(self, key):
        return key in self.phonemes or key in self.groups

    def phoneme(self, key):
        phoneme = self.phonemes.get(key)
        if phoneme is None:
            raise NotFoundError(key)
        return phoneme

    def group(self, key):
        group = self.groups.get(key)
        if group is None:
            raise NotFoundError(key)
        return group

    def addPhoneme(self, phoneme, groups=()):
        if isinstance(phoneme, str):
            phoneme = Phoneme.make(phoneme)
        if not phoneme.phoneme:
            raise FormatError('phoneme symbol cannot be empty')
        groups = [self.group(groupkey) for groupkey in groups]
        key = self.phonemes.insert(phoneme)
        for group in groups:
            group.keys.add(key)
        return key

    def removePhoneme(self, key):
        if key not in self.phonemes:
            raise NotFoundError(key)
        for group in self.groups.values():
            group.keys.discard(key)
        for symbol, _key in list(self.phonemeTable.items()):
            if _key == key:
                del self.phonemeTable[symbol]
        return self.phonemes.remove(key)

    def addGroup(self, name, keys=()):
        if isinstance(name, str):
            name = GroupName.make(name)
        keys = set(keys)
        for key in keys:
            if key not in self.phonemes:
                raise NotFoundError(key)
        return self.groups.insert(Group(name, keys))

    def removeGroup(self, key):
        if key not in self.groups:
            raise NotFoundError(key)
        return self.groups.remove(key)

    def addToGroup(self, groupkey, phonemekey):
        group = self.group(groupkey)
        if phonemekey not in self.phonemes:
            raise NotFoundError(phonemekey)
        group.keys.add(phonemekey)

    def removeFromGroup(self, groupkey, phonemekey):
        self.group(groupkey).keys.discard(phonemekey)

    def iterGroups(self):
        '''Iterate over (key, group) pairs in a stable order.

        Keys are collected before iterating, so groups may be removed
        mid-iteration; removed groups are skipped.
        '''
        for key in self.groups.keys():
            group = self.groups.get(key)
            if group is not None:
                yield key, group

    def iterPhonemes(self, groupkey=None):
        '''Iterate over (key, phoneme) pairs.

        Arguments:
            groupkey -- the group whose members to iterate; all phonemes if None (GroupKey)

        Keys are collected before iterating, so phonemes may be removed
        mid-iteration; removed phonemes are skipped.
        '''
        if groupkey is None:
            keys = self.phonemes.keys()
        else:
            keys = list(self.group(groupkey))
        for key in keys:
            phoneme = self.phonemes.get(key)
            if phoneme is not None:
                yield key, phoneme

    def ungrouped(self):
        grouped = set().union(*(group.keys for group in self.groups.values()))
        return [key for key in self.phonemes.keys() if key not in grouped]

    def findPhoneme(self, symbol):
        for key, phoneme in self.phonemes.items():
            if phoneme.phoneme == symbol:
                return key
        return None

    @staticmethod
    def fromCategories(categories, romanization=None, rewriteRules=None):
        '''Build a language from category definitions.

        Arguments:
            categories   -- (abbreviation, phonemes) pairs, e.g. ('V', 'aeiou') (list)
            romanization -- graphemes for phoneme symbols (dict)
            rewriteRules -- rewrite rules as source -> target strings (dict)

        Rewrite rule sources found in a category's phonemes are taken as single
        multi-character phonemes. A rewrite rule whose target is a category's
        abbreviation supplies that category's full name.

        Returns a Language
        '''
        if isinstance(categories, dict):
            categories = categories.items()
        romanization = romanization or {}
        rewriteRules = rewriteRules or {}
        fullnames = {target: source for source, target in rewriteRules.items()}
        language = Language()
        for abbrev, raw in categories:
            if not abbrev:
                raise FormatError('category abbreviation cannot be empty')
            abbrev = abbrev[0]
            name = fullnames.get(abbrev)
            symbols = splitPhonemes(raw, rewriteRules)
            keys = set()
            for symbol in symbols:
                key = language.phonemeTable.get(symbol)
                if key is None:
                    key = language.phonemes.insert(Phoneme(symbol, romanization.get(symbol)))
                    language.phonemeTable[symbol] = key
                keys.add(key)
            language.groups.insert(Group(GroupName(abbrev, name), keys))
        return language

@dataclass
class RepresentativePool:
    '''Stand-in phonemes allocated for rule text not found in a language.

    Every allocation creates a new entry, even for text seen before.
    '''
    phonemes: SlotMap = field(default_factory=lambda: SlotMap(PhonemeKey))
    usages: dict = field(default_factory=dict)

    def __len__(self):
        return len(self.phonemes)

    def __getitem__(self, key):
        phoneme = self.phonemes.get(key)
        if phoneme is None:
            raise NotFoundError(key)
        return phoneme

    def __contains__(self, key):
        return key in self.phonemes

    def __iter__(self):
        yield from self.phonemes.items()

    def allocate(self, text):
        key = self.phonemes.insert(Phoneme(text))
        self.usages[key] = 1
        return key

    def increment(self, key):
        if key not in self.phonemes:
            raise NotFoundError(key)
        self.usages[key] += 1
        return self.usages[key]

    def usage(self, key):
        if key not in self.phonemes:
            raise NotFoundError(key)
        return self.usages[key]

## Functions

def splitPhonemes(raw, rewriteRules=()):
    '''Split a category's phoneme string into phoneme symbols.

    Arguments:
        raw          -- the phonemes written together, e.g. 'ptkth' (str)
        rewriteRules -- strings to keep together as single phonemes (iterable)

    Returns a list
    '''
    spans = {}
    for source in rewriteRules:
        if not source:
            continue
        ix = raw.find(source)
        if ix != -1 and ix not in spans:
            spans[ix] = source
    symbols = []
    pos = 0
    while pos < len(raw):
        if pos in spans:
            symbol = spans[pos]
        else:
            symbol = raw[pos]
        if not symbol.isspace() and symbol not in symbols:
            symbols.append(symbol)
        pos += len(symbol)
    return symbols
