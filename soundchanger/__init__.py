'''Compile phonological sound change rules against a phoneme inventory

Modules:
    core     -- exceptions, arena storage, phonemes and groups
    lang     -- phoneme inventories and representative phonemes
    _pattern -- rule field parsing
    sce      -- sound change compilation
'''

from .core import (LangException, FormatError, NotFoundError, FieldParseError, NestedBrackets,
                   MultipleBoundaries, BoundaryNotAtStart, BoundaryNotAtEnd, BoundaryNotAllowed,
                   PhonemeKey, GroupKey, Phoneme, GroupName, Group)
from .lang import Language, RepresentativePool
from ._pattern import PhonemeRef, GroupRef, Boundary, Any
from .sce import (SoundChangeParseError, SoundChangeFormatError, SoundChangeFieldError, Field,
                  SoundChange, compileSoundChange, compileRuleset)
