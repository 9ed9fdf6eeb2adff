# suites.py
"""Historical wheels and the ready-made machines built from them.

Every wheel is described the same way a JSON config describes one:
``kind`` (``moving``, ``fixed`` or ``reflector``), either ``wiring`` (the
image of each alphabet letter) or ``cycles`` (cycle notation), and
``notches`` for moving rotors.
"""
from typing import Dict

from errors import ValidationError

Alpha26 = "ABCDEFGHIJKLMNOPQRSTUVWXYZ"

WHEELS: Dict[str, Dict[str, str]] = {
    # Legacy rotors ----------------------------------------------------------
    "I":   {"kind": "moving", "wiring": "EKMFLGDQVZNTOWYHXUSPAIBRCJ", "notches": "Q"},
    "II":  {"kind": "moving", "wiring": "AJDKSIRUXBLHWTMCQGZNPYFVOE", "notches": "E"},
    "III": {"kind": "moving", "wiring": "BDFHJLCPRTXVZNYEIWGAKMUSQO", "notches": "V"},
    "IV":  {"kind": "moving", "wiring": "ESOVPZJAYQUIRHXLNFTGKDCMWB", "notches": "J"},
    "V":   {"kind": "moving", "wiring": "VZBRGITYUPSDNHLXAWMJQOFECK", "notches": "Z"},
    "VI":  {"kind": "moving", "wiring": "JPGVOUMFYQBENHZRDKASXLICTW", "notches": "ZM"},
    "VII": {"kind": "moving", "wiring": "NZJHGRCXMYSWBOUFAIVLPEKQDT", "notches": "ZM"},

    # Naval fourth wheel (never turns) ---------------------------------------
    "Beta": {"kind": "fixed", "cycles": "(ALBEVFCYODJWUGNMQTZSKPR) (HIX)"},

    # Legacy reflectors ------------------------------------------------------
    "A": {"kind": "reflector", "wiring": "EJMZALYXVBWFCRQUONTSPIKHGD"},
    "B": {"kind": "reflector", "wiring": "YRUHQSLDPXNGOKMIEBFZCWVJAT"},
    "C": {"kind": "reflector", "wiring": "FVPJIAOYEDRZXWGCTKUQSBNMHL"},

    # Thin reflectors for the four-wheel machine -----------------------------
    "B-Thin": {"kind": "reflector",
               "cycles": "(AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP) (RX) (SZ) (TV)"},
    "C-Thin": {"kind": "reflector",
               "cycles": "(AR) (BD) (CO) (EJ) (FN) (GT) (HK) (IV) (LM) (PW) (QZ) (SX) (UY)"},
}

SUITES: Dict[str, Dict] = {
    "ENIGMA-I": {
        "name": "Enigma I",
        "alphabet": Alpha26,
        "slots": 4,
        "pawls": 3,
        "rotors": ["I", "II", "III", "IV", "V", "A", "B", "C"],
    },
    "M3": {
        "name": "Enigma M3",
        "alphabet": Alpha26,
        "slots": 4,
        "pawls": 3,
        "rotors": ["I", "II", "III", "IV", "V", "VI", "VII", "B", "C"],
    },
    "M4": {
        "name": "Enigma M4",
        "alphabet": Alpha26,
        "slots": 5,
        "pawls": 3,
        "rotors": ["I", "II", "III", "IV", "V", "VI", "VII",
                   "Beta", "B-Thin", "C-Thin"],
    },
}

DEFAULT_SUITE = "M4"


def suite_config(key: str) -> dict:
    """Return the suite KEY as a machine config (wheel descriptors inlined)."""
    try:
        suite = SUITES[key.upper()]
    except KeyError:
        raise ValidationError(
            f"Unknown suite {key!r}. Expected one of {list(SUITES)}"
        ) from None
    return {
        "name": suite["name"],
        "alphabet": suite["alphabet"],
        "slots": suite["slots"],
        "pawls": suite["pawls"],
        "rotors": {name: dict(WHEELS[name]) for name in suite["rotors"]},
    }
