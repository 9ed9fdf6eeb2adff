"""Permutation: cycle parsing, lookups in both directions, wrap, derangement."""
import pytest

from alphabet_and_permutation import Alphabet, Permutation
from errors import SignalRangeError, UnknownSymbolError, ValidationError

UPPER_STRING = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"
NAVAL_I = "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)"


def check_perm(perm, from_alpha, to_alpha):
    """PERM maps each character of FROM_ALPHA to the matching one of
    TO_ALPHA, by character and by index, and back again."""
    alpha = perm.alphabet
    assert perm.size() == len(from_alpha)
    for c, e in zip(from_alpha, to_alpha):
        assert perm.permute(c) == e, f"wrong translation of {c!r}"
        assert perm.invert(e) == c, f"wrong inverse of {e!r}"
        ci, ei = alpha.to_int(c), alpha.to_int(e)
        assert perm.permute(ci) == ei
        assert perm.invert(ei) == ci


def test_identity_transform():
    perm = Permutation("", Alphabet())
    check_perm(perm, UPPER_STRING, UPPER_STRING)
    assert not perm.derangement()


def test_naval_rotor_one():
    perm = Permutation(NAVAL_I, Alphabet())
    check_perm(perm, UPPER_STRING, "EKMFLGDQVZNTOWYHXUSPAIBRCJ")
    assert perm.size() == 26
    assert perm.permute("S") == "S"
    assert not perm.derangement()


def test_permute_indices():
    p = Permutation("(BACD)", Alphabet("ABCD"))
    assert [p.permute(i) for i in range(4)] == [2, 0, 3, 1]


def test_invert_indices():
    p = Permutation("(BACD)", Alphabet("ABCD"))
    assert p.invert(0) == 1
    assert p.invert(2) == 0
    assert p.invert(3) == 2
    assert p.invert(1) == 3


def test_permute_and_invert_characters():
    p = Permutation("(BACD)", Alphabet("ABCD"))
    assert [p.permute(c) for c in "ABCD"] == ["C", "A", "D", "B"]
    assert [p.invert(c) for c in "ACDB"] == ["B", "A", "C", "D"]


def test_derangement():
    assert Permutation("(BACD)", Alphabet("ABCD")).derangement()
    assert Permutation("(AB) (CD)", Alphabet("ABCD")).derangement()
    assert not Permutation("(AB)", Alphabet("ABCD")).derangement()


def test_character_and_index_overloads_agree():
    alpha = Alphabet()
    perm = Permutation(NAVAL_I, alpha)
    for i in range(alpha.size()):
        assert alpha.to_int(perm.permute(alpha.to_char(i))) == perm.permute(i)
        assert alpha.to_int(perm.invert(alpha.to_char(i))) == perm.invert(i)


@pytest.mark.parametrize("cycles", ["", "(AB)", NAVAL_I, "(AZ) (BX) (QWERTY)"])
def test_bijection_round_trip(cycles):
    perm = Permutation(cycles, Alphabet())
    for i in range(perm.size()):
        assert perm.invert(perm.permute(i)) == i
        assert perm.permute(perm.invert(i)) == i


def test_wrap_is_true_modulo():
    perm = Permutation("", Alphabet("ABCD"))
    assert perm.wrap(-1) == 3
    assert perm.wrap(4) == 0
    assert perm.wrap(-9) == 3
    for p in range(-20, 20):
        assert 0 <= perm.wrap(p) < 4


def test_whitespace_inside_cycles_is_ignored():
    alpha = Alphabet("ABCD")
    spaced = Permutation("( B A C D )", alpha)
    packed = Permutation("(BACD)", alpha)
    assert [spaced.permute(i) for i in range(4)] == [packed.permute(i) for i in range(4)]


def test_singleton_cycle_is_a_fixed_point():
    perm = Permutation("(A) (BC)", Alphabet("ABCD"))
    assert perm.permute("A") == "A"
    assert perm.invert("A") == "A"
    assert perm.permute("D") == "D"
    assert perm.permute("B") == "C"


@pytest.mark.parametrize(
    "cycles",
    ["(AB", "AB)", "AB", "((AB))", "(AB) C", "()", "(AB) (A)", "(AAB)", "(AE)"],
)
def test_malformed_cycles_are_rejected(cycles):
    with pytest.raises(ValidationError):
        Permutation(cycles, Alphabet("ABCD"))


def test_lookups_outside_the_alphabet():
    perm = Permutation("(BACD)", Alphabet("ABCD"))
    with pytest.raises(SignalRangeError):
        perm.permute(4)
    with pytest.raises(SignalRangeError):
        perm.invert(-1)
    with pytest.raises(UnknownSymbolError):
        perm.permute("Z")


def test_from_wiring_matches_cycle_notation():
    alpha = Alphabet()
    wired = Permutation.from_wiring("EKMFLGDQVZNTOWYHXUSPAIBRCJ", alpha)
    assert wired.cycles() == "(AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ)"
    check_perm(wired, UPPER_STRING, "EKMFLGDQVZNTOWYHXUSPAIBRCJ")


def test_from_wiring_rejects_non_permutations():
    with pytest.raises(ValidationError):
        Permutation.from_wiring("AABC", Alphabet("ABCD"))
    with pytest.raises(ValidationError):
        Permutation.from_wiring("ABC", Alphabet("ABCD"))
