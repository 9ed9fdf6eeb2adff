# machine.py  ─────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Callable, Iterable
from copy import copy

from alphabet_and_permutation import Alphabet, Permutation
from debug import debug
from errors import ValidationError
from rotor_and_reflector import Rotor

Trace = Callable[[str], None]


class Machine:
    """
    A rotor machine with NUM_ROTORS slots and PAWLS pawls.

    Slot 0 holds the reflector and slot NUM_ROTORS-1 the fast rotor; the
    PAWLS rightmost slots hold moving rotors. ALL_ROTORS is the inventory
    of wheel templates, looked up by name without regard to case.
    """

    def __init__(
        self,
        alphabet: Alphabet,
        num_rotors: int,
        pawls: int,
        all_rotors: Iterable[Rotor],
    ) -> None:
        if num_rotors <= 1:
            raise ValidationError(f"Need at least 2 rotor slots, got {num_rotors}")
        if not (0 <= pawls < num_rotors):
            raise ValidationError(
                f"Pawl count must be in 0–{num_rotors - 1}, got {pawls}"
            )

        self.alphabet = alphabet
        self.num_rotors = num_rotors
        self.num_pawls = pawls
        self.available: dict[str, Rotor] = {}

        for rotor in all_rotors:
            key = rotor.name.upper()
            if key in self.available:
                raise ValidationError(f"Rotor name {rotor.name!r} defined twice")
            if rotor.alphabet != alphabet:
                raise ValidationError(
                    f"Rotor {rotor.name} is not wired over the machine alphabet"
                )
            bad = [ch for ch in rotor.notches() if ch not in alphabet]
            if bad:
                raise ValidationError(
                    f"Notch {bad[0]!r} of rotor {rotor.name} not in alphabet"
                )
            self.available[key] = rotor

        self.rotors: list[Rotor] = []
        self.plugboard = Permutation("", alphabet)

    def get_rotor(self, k: int) -> Rotor:
        """Rotor #K; #0 is the reflector, #(num_rotors-1) the fast rotor."""
        return self.rotors[k]

    # ── configuration ───────────────────────────────────────────

    def insert_rotors(self, names: Iterable[str]) -> None:
        """Fill the slots with fresh copies of the rotors NAMES (NAMES[0]
        is the reflector). Every rotor starts at setting 0."""
        names = list(names)
        if len(names) > len(self.available):
            raise ValidationError(
                f"Too many rotors: {len(names)} named, {len(self.available)} available"
            )
        if len(names) > self.num_rotors:
            raise ValidationError(
                f"Not enough slots: {len(names)} rotors for {self.num_rotors} slots"
            )
        if len(names) < self.num_rotors:
            raise ValidationError(
                f"Too few rotors: {len(names)} rotors for {self.num_rotors} slots"
            )

        chosen: list[Rotor] = []
        seen: set[str] = set()
        for name in names:
            key = name.upper()
            if key not in self.available:
                raise ValidationError(f"Unknown rotor {name!r}")
            if key in seen:
                raise ValidationError(f"Rotor {name!r} used twice")
            seen.add(key)

            rotor = copy(self.available[key])        # shares the wiring
            rotor.setting = 0
            rotor.ring_setting = 0
            chosen.append(rotor)

        if not chosen[0].reflecting():
            raise ValidationError(f"No reflector: {chosen[0].name} in slot 0")

        first_pawl = self.num_rotors - self.num_pawls
        for slot, rotor in enumerate(chosen[1:], 1):
            if rotor.reflecting():
                raise ValidationError(f"Reflector {rotor.name} must sit in slot 0")
            if slot >= first_pawl and not rotor.rotates():
                raise ValidationError(
                    f"Slot {slot} has a pawl; {rotor.name} does not rotate"
                )
            if slot < first_pawl and rotor.rotates():
                raise ValidationError(
                    f"Slot {slot} has no pawl; {rotor.name} would never turn"
                )

        self.rotors = chosen
        debug.log("machine", f"Inserted {[r.name for r in chosen]}")

    def _check_setting(self, setting: str, what: str) -> None:
        self._require_rotors()
        if any(ch.isdigit() for ch in setting):
            raise ValidationError(f"No numbers allowed in {what} {setting!r}")
        if len(setting) != self.num_rotors - 1:
            raise ValidationError(
                f"{what.capitalize()} {setting!r} must be {self.num_rotors - 1} characters"
            )
        for ch in setting:
            if ch not in self.alphabet:
                raise ValidationError(
                    f"{what.capitalize()} character {ch!r} not in alphabet"
                )

    def set_rotors(self, setting: str) -> None:
        """Set the windows of slots 1.. from SETTING, leftmost first."""
        self._check_setting(setting, "setting")
        for rotor, ch in zip(self.rotors[1:], setting):
            rotor.set(ch)
        debug.log("machine", f"Setting {setting}")

    def set_rings(self, rings: str) -> None:
        """Apply ring settings to slots 1.., given as alphabet characters."""
        self._check_setting(rings, "ring setting")
        for rotor, ch in zip(self.rotors[1:], rings):
            rotor.set_ring(ch)
        debug.log("machine", f"Rings {rings}")

    def set_plugboard(self, plugboard: Permutation) -> None:
        if plugboard.alphabet != self.alphabet:
            raise ValidationError("Plugboard is not wired over the machine alphabet")
        self.plugboard = plugboard

    def positions(self) -> str:
        """Snapshot of the window letters of slots 1.."""
        return "".join(rotor.position() for rotor in self.rotors[1:])

    def clear(self) -> None:
        """Empty every slot and restore the identity plugboard."""
        self.rotors = []
        self.plugboard = Permutation("", self.alphabet)

    def _require_rotors(self) -> None:
        if not self.rotors:
            raise ValidationError("No rotors inserted")

    # ── stepping logic  ─────────────────────────────────────────

    def _advance_rotors(self) -> None:
        """Advance rotors one key-press.

        A slot steps when it is the fast rotor, when its right neighbour
        sits at a notch, or when it sits at its own notch and its left
        neighbour is driven (the double step). Every decision reads the
        positions from before the key-press.
        """
        rotors = self.rotors
        last = self.num_rotors - 1
        marks = []
        for i, rotor in enumerate(rotors):
            if i == last:
                marks.append(True)
            elif rotor.rotates() and rotors[i + 1].at_notch():
                marks.append(True)
            else:
                marks.append(
                    i > 0 and rotor.at_notch() and rotors[i - 1].rotates()
                )

        for rotor, step in zip(rotors, marks):
            if step:
                rotor.advance()
        debug.log("stepping", f"Rotor pos {self.positions()}")

    def _apply_rotors(self, c: int) -> int:
        for rotor in reversed(self.rotors):
            c = rotor.convert_forward(c)
        # the reflector is only crossed once
        for rotor in self.rotors[1:]:
            c = rotor.convert_backward(c)
        return c

    # ── encipher  ───────────────────────────────────────────────

    def convert(self, c: int | str, trace: Trace | None = None) -> int | str:
        """Encode index C after first advancing the machine. A string is
        handed to `convert_message`.

        TRACE, when given, receives one line per character:
        ``[AXLE] F -> F -> Q -> Q``.
        """
        if isinstance(c, str):
            return self.convert_message(c, trace)
        self._require_rotors()
        to_char = self.alphabet.to_char
        to_char(c)                                  # range check

        self._advance_rotors()
        plugged = self.plugboard.permute(c)
        rotated = self._apply_rotors(plugged)
        out = self.plugboard.permute(rotated)

        if trace is not None or debug.active("machine"):
            line = (f"[{self.positions()}] {to_char(c)} -> {to_char(plugged)}"
                    f" -> {to_char(rotated)} -> {to_char(out)}")
            debug.log("machine", line)
            if trace is not None:
                trace(line)
        return out

    def convert_message(self, msg: str, trace: Trace | None = None) -> str:
        """Encode MSG, dropping whitespace; the rotors keep turning across
        the whole message."""
        self._require_rotors()
        signals = [self.alphabet.to_int(ch) for ch in msg if not ch.isspace()]
        return "".join(self.alphabet.to_char(self.convert(s, trace)) for s in signals)

    def __repr__(self) -> str:
        names = " ".join(r.name for r in self.rotors) or "empty"
        return f"<Machine {names} pos={self.positions()}>"
