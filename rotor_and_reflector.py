# rotor_and_reflector.py
from __future__ import annotations

from alphabet_and_permutation import Alphabet, Permutation
from debug import debug
from errors import ValidationError


class Rotor:
    """
    A wheel named NAME whose wiring in its 0 setting is PERM.

    The base class neither rotates nor reflects; the machine asks
    `rotates()` / `reflecting()` before advancing or placing a wheel.
    A rotor starts at setting 0 with ring setting 0.
    """

    def __init__(self, name: str, perm: Permutation) -> None:
        self.name = name
        self.permutation = perm
        self.alphabet: Alphabet = perm.alphabet
        self.size = perm.size()
        self.setting = 0
        self.ring_setting = 0

    # ── capabilities ──────────────────────────────────────────────
    def rotates(self) -> bool:
        return False

    def reflecting(self) -> bool:
        return False

    def at_notch(self) -> bool:
        return False

    def notches(self) -> str:
        return ""

    def advance(self) -> None:
        """Non-rotating wheels ignore the pawls."""

    # ── setting & ring helpers ────────────────────────────────────
    def _index(self, posn: int | str) -> int:
        if isinstance(posn, str):
            if posn not in self.alphabet:
                raise ValidationError(
                    f"Rotor {self.name} cannot be set to {posn!r}: not in alphabet"
                )
            return self.alphabet.to_int(posn)
        return self.permutation.wrap(posn)

    def set(self, posn: int | str) -> "Rotor":
        """Set the window to POSN, a character of the alphabet or an index."""
        self.setting = self._index(posn)
        return self

    def set_ring(self, posn: int | str) -> "Rotor":
        """Shift the wiring against the lettered ring (Ringstellung)."""
        self.ring_setting = self._index(posn)
        return self

    def position(self) -> str:
        """The character currently showing in the window."""
        return self.alphabet.to_char(self.setting)

    # ── signal paths ---------------------------------------------
    def convert_forward(self, p: int) -> int:
        """Translate P (right-to-left) through the wheel at its current offset."""
        offset = self.setting - self.ring_setting
        wrap = self.permutation.wrap
        return wrap(self.permutation.permute(wrap(p + offset)) - offset)

    def convert_backward(self, e: int) -> int:
        """Translate E (left-to-right) through the inverse wiring."""
        offset = self.setting - self.ring_setting
        wrap = self.permutation.wrap
        return wrap(self.permutation.invert(wrap(e + offset)) - offset)

    # ── niceties --------------------------------------------------
    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} pos={self.position()}>"


class FixedRotor(Rotor):
    """A wheel that can sit in any non-pawl slot but never turns (e.g. Beta)."""


class MovingRotor(Rotor):
    """A wheel driven by a pawl. NOTCHES lists the window letters at which
    it lets its left neighbour step."""

    def __init__(self, name: str, perm: Permutation, notches: str) -> None:
        super().__init__(name, perm)
        self._notches = notches

    def rotates(self) -> bool:
        return True

    def notches(self) -> str:
        return self._notches

    def advance(self) -> None:
        self.setting = self.permutation.wrap(self.setting + 1)
        debug.log("rotor", f"{self.name} -> {self.position()}")

    def at_notch(self) -> bool:
        ch = self.alphabet.to_char(self.permutation.wrap(self.setting))
        return ch in self._notches


class Reflector(FixedRotor):
    """The leftmost wheel. Its wiring pairs every symbol with a different one."""

    def __init__(self, name: str, perm: Permutation) -> None:
        if not perm.derangement():
            raise ValidationError(
                f"Reflector {name} wiring must have no fixed points"
            )
        super().__init__(name, perm)

    def reflecting(self) -> bool:
        return True

    def set(self, posn: int | str) -> "Rotor":
        if self._index(posn) != 0:
            raise ValidationError(f"Reflector {self.name} has only one position")
        return super().set(posn)
