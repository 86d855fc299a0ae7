import pytest
from .._pattern import (PhonemeRef, GroupRef, Boundary, Any, scan, matchBrackets, isKnown, unmatchedToken,
                        compileField, hasBoundaryOf, unparsePattern)
from ..sce import Field

def compileText(string, kind, language, pool, rewriteRules=None):
    field = Field(kind)
    elements, errors = compileField(string, field, language, pool, rewriteRules)
    return elements, [error.kind for error in errors], field

class TestElements:
    def test_Element_type(self, keys):
        assert PhonemeRef(keys['a']).type == 'PhonemeRef'
        assert GroupRef(keys['V']).type == 'GroupRef'
        assert Boundary().type == 'Boundary'
        assert Any().type == 'Any'

    def test_Element_eq(self, keys):
        assert PhonemeRef(keys['a']) == PhonemeRef(keys['a'], rep=False)
        assert PhonemeRef(keys['a']) != PhonemeRef(keys['a'], rep=True)
        assert Boundary() == Boundary()
        assert Any([Boundary()]) == Any([Boundary()])
        assert Boundary() in Any([GroupRef(keys['V']), Boundary()])

    def test_Element_unparse(self, language, pool, keys):
        d = pool.allocate('d')
        assert PhonemeRef(keys['t']).unparse(language, pool) == 't'
        assert PhonemeRef(d, rep=True).unparse(language, pool) == 'd'
        assert GroupRef(keys['V']).unparse(language, pool) == 'V'
        assert Boundary().unparse(language, pool) == '#'
        assert str(Boundary()) == '#'
        assert Any([GroupRef(keys['C']), Boundary()]).unparse(language, pool) == '[C#]'
        assert Any().unparse(language, pool) == '[]'

    def test_PhonemeRef_grapheme(self, language, pool):
        th = language.addPhoneme('θ [th]')
        assert PhonemeRef(th).unparse(language, pool) == 'th'

class TestScan:
    def test_scan(self, language, keys):
        assert scan('t', 0, language) == ([PhonemeRef(keys['t'])], 1)
        assert scan('V', 0, language) == ([GroupRef(keys['V'])], 1)
        assert scan('Vowel', 0, language) == ([GroupRef(keys['V'])], 5)
        assert scan('aVowel', 1, language) == ([GroupRef(keys['V'])], 6)
        assert scan('x', 0, language) == ([], 0)
        assert scan('#', 0, language) == ([], 0)
        assert scan('t', 1, language) == ([], 1)

    def test_scan_advances_per_match(self, language, keys):
        # Each group's phonemes are tried at the advanced position
        assert scan('at', 0, language) == ([PhonemeRef(keys['a']), PhonemeRef(keys['t'])], 2)
        # Later groups do not go back to earlier ones
        assert scan('ta', 0, language) == ([PhonemeRef(keys['t'])], 1)

    def test_scan_inventory_order(self, language, keys):
        th = language.addPhoneme('th', groups=[keys['C']])
        # 't' comes first in the group, so 'th' can never match
        assert scan('th', 0, language) == ([PhonemeRef(keys['t'])], 1)
        language.removePhoneme(keys['t'])
        assert scan('th', 0, language) == ([PhonemeRef(th)], 2)

    def test_scan_ungrouped(self, language, keys):
        s = language.addPhoneme('s')
        assert scan('s', 0, language) == ([PhonemeRef(s)], 1)
        # Only tried when no group matched
        assert scan('as', 0, language) == ([PhonemeRef(keys['a'])], 1)

def test_matchBrackets():
    assert matchBrackets('[ab]') == 3
    assert matchBrackets('x[ab]c', 1) == 4
    assert matchBrackets('[[a]b]') == 5
    assert matchBrackets('[ab') == -1
    assert matchBrackets('[[a]') == -1

def test_isKnown(language):
    assert isKnown('t', language)
    assert isKnown('Vx', language)
    assert isKnown('Cx', language)
    assert not isKnown('x', language)
    assert not isKnown('ta', language)
    # Phonemes are found by symbol, whether grouped or not
    sh = language.addPhoneme('sh')
    assert isKnown('sh', language)
    language.removePhoneme(sh)
    assert not isKnown('sh', language)

def test_unmatchedToken(language):
    assert unmatchedToken('x', 0, language) == 'x'
    assert unmatchedToken('ax', 1, language) == 'x'
    assert unmatchedToken('q̃a', 0, language) == 'q̃'
    assert unmatchedToken('sha', 0, language, {'sh': 'ʃ'}) == 'sh'
    assert unmatchedToken('sha', 0, language, {'ch': 'ʧ', 'sh': 'ʃ'}) == 'sh'
    assert unmatchedToken('sha', 0, language, {'': 'x'}) == 's'
    # Rewrite sources known to the language are not taken whole
    assert unmatchedToken('Vx', 0, language, {'Vx': 'y'}) == 'V'

class TestCompileField:
    def test_compileField(self, language, pool, keys):
        elements, errors, field = compileText('tVowel', 'TARGET', language, pool)
        assert elements == [PhonemeRef(keys['t']), GroupRef(keys['V'])]
        assert errors == []
        assert not field.hasBoundary
        assert compileText('', 'TARGET', language, pool)[:2] == ([], [])

    def test_compileField_unknown(self, language, pool):
        elements, errors, field = compileText('x', 'TARGET', language, pool)
        assert errors == []
        assert len(elements) == 1
        assert elements[0].rep
        assert pool[elements[0].key].phoneme == 'x'
        assert unparsePattern(elements, language, pool) == 'x'

    def test_compileField_unknown_never_shared(self, language, pool):
        elements = compileText('xax', 'REPLACEMENT', language, pool)[0]
        assert [element.rep for element in elements] == [True, False, True]
        assert elements[0].key != elements[2].key
        assert len(pool) == 2

    def test_compileField_grapheme_clusters(self, language, pool):
        elements = compileText('q̃a', 'REPLACEMENT', language, pool)[0]
        assert len(elements) == 2
        assert pool[elements[0].key].phoneme == 'q̃'

    def test_compileField_rewriteRules(self, language, pool):
        elements = compileText('shat', 'REPLACEMENT', language, pool, {'sh': 'ʃ'})[0]
        assert len(elements) == 3
        assert pool[elements[0].key].phoneme == 'sh'

    def test_compileField_boundary_envstart(self, language, pool, keys):
        elements, errors, field = compileText('#V', 'ENVSTART', language, pool)
        assert elements == [Boundary(), GroupRef(keys['V'])]
        assert errors == []
        assert field.hasBoundary
        assert compileText('V#', 'ENVSTART', language, pool)[1] == ['BoundaryNotAtStart']

    def test_compileField_boundary_envend(self, language, pool, keys):
        elements, errors, field = compileText('V#', 'ENVEND', language, pool)
        assert elements == [GroupRef(keys['V']), Boundary()]
        assert errors == []
        assert field.hasBoundary
        assert compileText('#V', 'ENVEND', language, pool)[1] == ['BoundaryNotAtEnd']

    @pytest.mark.parametrize('kind', ['TARGET', 'REPLACEMENT', 'ENVSTART', 'ENVEND'])
    def test_compileField_multiple_boundaries(self, language, pool, kind):
        assert 'MultipleBoundaries' in compileText('##', kind, language, pool)[1]

    def test_compileField_multiple_boundaries_in_brackets(self, language, pool):
        assert compileText('[#]#', 'ENVSTART', language, pool)[1] == ['MultipleBoundaries']

    @pytest.mark.parametrize('kind', ['TARGET', 'REPLACEMENT'])
    def test_compileField_boundary_not_allowed(self, language, pool, kind):
        elements, errors, field = compileText('#', kind, language, pool)
        assert errors == ['BoundaryNotAllowed']
        assert elements == []

    def test_compileField_brackets(self, language, pool, keys):
        elements, errors, field = compileText('[Vn]', 'TARGET', language, pool)
        assert elements == [Any([GroupRef(keys['V']), PhonemeRef(keys['n'])])]
        assert errors == []
        elements = compileText('t[]', 'TARGET', language, pool)[0]
        assert elements == [PhonemeRef(keys['t']), Any([])]

    def test_compileField_nested_brackets(self, language, pool):
        elements, errors, field = compileText('[[V]]', 'TARGET', language, pool)
        assert errors == ['NestedBrackets']
        assert elements == [Any([])]

    def test_compileField_unmatched_brackets(self, language, pool, keys):
        elements, errors, field = compileText('[V', 'TARGET', language, pool)
        assert errors == []
        assert elements[0].rep and pool[elements[0].key].phoneme == '['
        assert elements[1] == GroupRef(keys['V'])

    def test_compileField_brackets_at_edges(self, language, pool, keys):
        elements, errors, field = compileText('[#a]V', 'ENVSTART', language, pool)
        assert errors == []
        assert elements == [Any([Boundary(), PhonemeRef(keys['a'])]), GroupRef(keys['V'])]
        assert field.hasBoundary
        elements, errors, field = compileText('V[a#]', 'ENVEND', language, pool)
        assert errors == []
        assert field.hasBoundary
        assert compileText('V[#a]', 'ENVSTART', language, pool)[1] == ['BoundaryNotAtStart']
        assert compileText('[a#]V', 'ENVEND', language, pool)[1] == ['BoundaryNotAtEnd']
        # Inside the last bracket, the boundary must still be its last character
        assert compileText('V[#a]', 'ENVEND', language, pool)[1] == ['BoundaryNotAtEnd']
        assert compileText('[#a]', 'ENVEND', language, pool)[1] == ['BoundaryNotAtEnd']
        # Head is kept through a bracket at the start
        assert compileText('[a#]V', 'ENVSTART', language, pool)[1] == []

    def test_compileField_collects_errors(self, language, pool):
        errors = compileText('#[[a]]#', 'TARGET', language, pool)[1]
        assert errors == ['BoundaryNotAllowed', 'NestedBrackets', 'MultipleBoundaries']

def test_hasBoundaryOf(keys):
    v = GroupRef(keys['V'])
    assert hasBoundaryOf('ENVSTART', [Boundary(), v])
    assert not hasBoundaryOf('ENVSTART', [v, Boundary()])
    assert hasBoundaryOf('ENVSTART', [Any([v, Boundary()]), v])
    assert hasBoundaryOf('ENVEND', [v, Boundary()])
    assert hasBoundaryOf('ENVEND', [v, Any([Boundary()])])
    assert not hasBoundaryOf('ENVEND', [Boundary(), v])
    assert not hasBoundaryOf('ENVEND', [])
    assert not hasBoundaryOf('TARGET', [Boundary()])

def test_unparsePattern(language, pool, keys):
    d = pool.allocate('d')
    pattern = [Any([GroupRef(keys['V']), PhonemeRef(keys['n'])]), PhonemeRef(d, rep=True), Boundary()]
    assert unparsePattern(pattern, language, pool) == '[Vn]d#'
    assert unparsePattern([], language, pool) == ''
