# alphabet_and_permutation.py
from __future__ import annotations

import re

from debug import debug
from errors import SignalRangeError, UnknownSymbolError, ValidationError

# one or more "(...)" groups separated by optional whitespace, no nesting
_cycles_re = re.compile(r"(?:\s*\([^()]*\))*\s*")


# ── Alphabet ──────────────────────────────────────────────────────
class Alphabet:
    """Ordered set of symbols; the K-th character has index K."""

    def __init__(self, chars: str = "ABCDEFGHIJKLMNOPQRSTUVWXYZ") -> None:
        if not chars:
            raise ValidationError("Alphabet must not be empty")
        for ch in chars:
            if ch.isspace():
                raise ValidationError(f"Alphabet may not contain whitespace: {chars!r}")
            if ch in "()":
                raise ValidationError(f"Alphabet may not contain parentheses: {chars!r}")

        self.chars: str = chars
        self.alpha_to_index: dict[str, int] = {}
        for i, ch in enumerate(chars):
            if ch in self.alpha_to_index:
                raise ValidationError(f"Character {ch!r} repeated in alphabet")
            self.alpha_to_index[ch] = i
        debug.log("alphabet", f"{len(chars)} symbols: {chars}")

    def size(self) -> int:
        return len(self.chars)

    def contains(self, ch: str) -> bool:
        return ch in self.alpha_to_index

    # integer signal → letter
    def to_char(self, index: int) -> str:
        if not (0 <= index < len(self.chars)):
            hi = len(self.chars) - 1
            raise SignalRangeError(f"Signal {index} out of range 0–{hi}")
        return self.chars[index]

    # letter → integer signal
    def to_int(self, ch: str) -> int:
        try:
            return self.alpha_to_index[ch]
        except KeyError:
            raise UnknownSymbolError(
                f"Invalid character {ch!r} for current alphabet."
            ) from None

    def find(self, ch: str) -> int:
        """Like ``str.find``: the index of *ch*, or -1 when absent."""
        return self.alpha_to_index.get(ch, -1)

    # niceties
    def __len__(self) -> int:
        return len(self.chars)

    def __contains__(self, ch: object) -> bool:
        return ch in self.alpha_to_index

    def __iter__(self):
        return iter(self.chars)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Alphabet):
            return NotImplemented
        return self.chars == other.chars

    def __hash__(self) -> int:
        return hash(self.chars)

    def __repr__(self) -> str:
        return f"<Alphabet {self.chars}>"


# ── Permutation ───────────────────────────────────────────────────
class Permutation:
    """
    A bijection on the indices of an alphabet, written in cycle notation:
    "(ABC) (DE)" sends A→B, B→C, C→A, D→E, E→D. Characters missing from
    every cycle map to themselves. Whitespace inside a cycle is ignored.
    """

    def __init__(self, cycles: str, alphabet: Alphabet) -> None:
        if not _cycles_re.fullmatch(cycles):
            raise ValidationError(f"Malformed cycle string {cycles!r}")

        self.alphabet = alphabet
        n = alphabet.size()
        self._fwd: list[int | None] = [None] * n
        self._rev: list[int | None] = [None] * n

        # "(AB) (CD)" → "AB) CD)" → ["AB", " CD", ""]; the last token is
        # whatever trails the final ")"
        for token in cycles.replace("(", "").split(")")[:-1]:
            self._add_cycle("".join(token.split()), cycles)

        # close over the untouched characters
        for i in range(n):
            if self._fwd[i] is None:
                self._fwd[i] = i
                self._rev[i] = i
        if debug.active("permutation"):
            debug.log("permutation", f"{cycles!r} -> {self.cycles()!r}")

    @classmethod
    def from_wiring(cls, wiring: str, alphabet: Alphabet) -> "Permutation":
        """Build from a wiring string: the image of each alphabet symbol, in order."""
        if sorted(wiring) != sorted(alphabet.chars):
            raise ValidationError("wiring must be a permutation of alphabet")
        images = dict(zip(alphabet, wiring))
        seen: set[str] = set()
        groups: list[str] = []
        for start in alphabet:
            if start in seen:
                continue
            group = []
            ch = start
            while ch not in seen:
                seen.add(ch)
                group.append(ch)
                ch = images[ch]
            groups.append("(" + "".join(group) + ")")
        return cls(" ".join(groups), alphabet)

    def _add_cycle(self, cycle: str, source: str) -> None:
        if not cycle:
            raise ValidationError(f"Empty cycle in {source!r}")
        idx = []
        for ch in cycle:
            if ch not in self.alphabet:
                raise ValidationError(f"Symbol {ch!r} in {source!r} not in alphabet")
            i = self.alphabet.to_int(ch)
            if self._fwd[i] is not None or i in idx:
                raise ValidationError(f"Character {ch!r} used twice in {source!r}")
            idx.append(i)

        for k, i in enumerate(idx):
            j = idx[(k + 1) % len(idx)]
            self._fwd[i] = j
            self._rev[j] = i

    # ── arithmetic helpers ──────────────────────────────────────
    def size(self) -> int:
        return self.alphabet.size()

    def wrap(self, p: int) -> int:
        """Return P modulo the size of this permutation, always in [0, size)."""
        return p % self.size()

    def _check(self, p: int) -> None:
        if not (0 <= p < self.size()):
            raise SignalRangeError(f"Signal {p} out of range 0–{self.size() - 1}")

    # ── lookups ─────────────────────────────────────────────────
    def permute(self, p: int | str) -> int | str:
        """Apply the permutation to an index, or to a character of the alphabet."""
        if isinstance(p, str):
            return self.alphabet.to_char(self._fwd[self.alphabet.to_int(p)])
        self._check(p)
        return self._fwd[p]

    def invert(self, c: int | str) -> int | str:
        """Apply the inverse permutation to an index, or to a character."""
        if isinstance(c, str):
            return self.alphabet.to_char(self._rev[self.alphabet.to_int(c)])
        self._check(c)
        return self._rev[c]

    def derangement(self) -> bool:
        """True iff no symbol maps to itself."""
        return all(j != i for i, j in enumerate(self._fwd))

    def cycles(self) -> str:
        """Canonical cycle notation, fixed points left out."""
        seen: set[int] = set()
        out = []
        for start in range(self.size()):
            if start in seen or self._fwd[start] == start:
                continue
            group = []
            i = start
            while i not in seen:
                seen.add(i)
                group.append(self.alphabet.chars[i])
                i = self._fwd[i]
            out.append("(" + "".join(group) + ")")
        return " ".join(out)

    def __repr__(self) -> str:
        return f"<Permutation {self.cycles() or 'identity'}>"
