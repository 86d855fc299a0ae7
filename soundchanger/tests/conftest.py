import pytest
from ..core import GroupName
from ..lang import Language, RepresentativePool

## Fixtures
@pytest.fixture
def language():
    language = Language()
    a = language.addPhoneme('a')
    e = language.addPhoneme('e')
    n = language.addPhoneme('n')
    t = language.addPhoneme('t')
    language.addGroup(GroupName('V', 'Vowel'), [a, e])
    language.addGroup(GroupName('C'), [n, t])
    return language

@pytest.fixture
def pool():
    return RepresentativePool()

@pytest.fixture
def keys(language):
    keys = {phoneme.phoneme: key for key, phoneme in language.iterPhonemes()}
    keys.update({group.name.abbrev: key for key, group in language.iterGroups()})
    return keys
