# utilities.py
from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List

from alphabet_and_permutation import Alphabet, Permutation
from debug import debug
from errors import EnigmaError, ValidationError
from machine import Machine
from rotor_and_reflector import FixedRotor, MovingRotor, Reflector, Rotor
from suites import suite_config

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_num_re = re.compile(r"^([A-Za-z]+)(\d+)$")
REQUIRED_KEYS = {"alphabet", "slots", "pawls", "rotors"}


def _nat_key(name: str):
    """Natural‑sort rotor names so R2 comes before R10."""
    m = _num_re.match(name)
    if m:
        prefix, num = m.groups()
        return (0, prefix, int(num))
    return (1, name, 0)


def sorted_names(names: Iterable[str]) -> List[str]:
    return sorted(names, key=_nat_key)


def format_groups(text: str, block: int = 5) -> str:
    """Split TEXT into space-separated groups of BLOCK characters."""
    return " ".join(text[i : i + block] for i in range(0, len(text), block))


# ────────────────────────────────────────────────────────────────────────
#  1. JSON config → Machine
# ────────────────────────────────────────────────────────────────────────


def load_config(path: str | Path) -> dict:
    """Read a machine config. A ``suite`` key pulls in a built-in suite,
    which the other keys of the file may override."""
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(f"{path}: not valid JSON ({e})") from e
    if not isinstance(data, dict):
        raise ValidationError(f"{path}: config must be a JSON object")

    if "suite" in data:
        merged = suite_config(data["suite"])
        merged.update({k: v for k, v in data.items() if k != "suite"})
        data = merged

    missing = REQUIRED_KEYS - data.keys()
    if missing:
        raise ValidationError(f"Missing keys in config: {', '.join(sorted(missing))}")
    debug.log("config", f"Loaded {path}")
    return data


def _text(value, what: str) -> str:
    """VALUE when it is a string, else a ValidationError naming WHAT."""
    if not isinstance(value, str):
        raise ValidationError(f"{what} must be a string, got {type(value).__name__}")
    return value


def build_rotor(name: str, desc: Dict[str, str], alphabet: Alphabet) -> Rotor:
    """Turn one wheel descriptor into a rotor template."""
    if not isinstance(desc, dict):
        raise ValidationError(f"Rotor {name}: descriptor must be an object")
    if "wiring" in desc and "cycles" in desc:
        raise ValidationError(f"Rotor {name}: give either wiring or cycles, not both")

    if "wiring" in desc:
        perm = Permutation.from_wiring(_text(desc["wiring"], f"Rotor {name}: 'wiring'"), alphabet)
    else:
        perm = Permutation(_text(desc.get("cycles", ""), f"Rotor {name}: 'cycles'"), alphabet)

    kind = _text(desc.get("kind", "moving"), f"Rotor {name}: 'kind'")
    notches = _text(desc.get("notches", ""), f"Rotor {name}: 'notches'")
    if kind == "moving":
        return MovingRotor(name, perm, notches)
    if notches:
        raise ValidationError(f"Rotor {name}: only moving rotors have notches")
    if kind == "fixed":
        return FixedRotor(name, perm)
    if kind == "reflector":
        return Reflector(name, perm)
    raise ValidationError(f"Rotor {name}: unknown kind {kind!r}")


def build_machine(cfg: dict) -> Machine:
    """Assemble a Machine from a loaded config (and apply its session, if any)."""
    for key in ("slots", "pawls"):
        if not isinstance(cfg[key], int) or isinstance(cfg[key], bool):
            raise ValidationError(f"Config key {key!r} must be an integer")
    if not isinstance(cfg["rotors"], dict):
        raise ValidationError("Config key 'rotors' must map names to descriptors")

    alphabet = Alphabet(_text(cfg["alphabet"], "Config key 'alphabet'"))
    rotors = [build_rotor(name, desc, alphabet) for name, desc in cfg["rotors"].items()]
    machine = Machine(alphabet, cfg["slots"], cfg["pawls"], rotors)

    if cfg.get("session"):
        apply_settings(machine, Settings.from_dict(cfg["session"]))
    return machine


# ────────────────────────────────────────────────────────────────────────
#  2. Session settings
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class Settings:
    """One message key: rotor order, window letters, rings, plugboard."""

    rotors: List[str]
    setting: str
    rings: str | None = None
    plugboard: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Settings":
        if not isinstance(data, dict):
            raise ValidationError("Session block must be an object")
        missing = {"rotors", "setting"} - data.keys()
        if missing:
            raise ValidationError(f"Missing keys in session: {', '.join(sorted(missing))}")
        if not isinstance(data["rotors"], list):
            raise ValidationError("Session key 'rotors' must be a list of names")

        rings = data.get("rings")
        return cls(
            rotors=[_text(name, "Session rotor name") for name in data["rotors"]],
            setting=_text(data["setting"], "Session key 'setting'"),
            rings=None if rings is None else _text(rings, "Session key 'rings'"),
            plugboard=_text(data.get("plugboard", ""), "Session key 'plugboard'"),
        )


def parse_settings_line(line: str, num_rotors: int) -> Settings:
    """Parse ``* B Beta III IV I AXLE [RINGS] (YF) (ZH)``."""
    text = line.strip()
    if not text.startswith("*"):
        raise ValidationError(f"Settings line must start with '*': {line!r}")

    body = text[1:]
    cut = body.find("(")
    head, plugs = (body, "") if cut == -1 else (body[:cut], body[cut:])
    tokens = head.split()

    if len(tokens) < num_rotors + 1:
        raise ValidationError(
            f"Settings line needs {num_rotors} rotor names and a setting: {line!r}"
        )
    if len(tokens) > num_rotors + 2:
        raise ValidationError(f"Unexpected tokens in settings line: {line!r}")

    rings = tokens[num_rotors + 1] if len(tokens) == num_rotors + 2 else None
    return Settings(tokens[:num_rotors], tokens[num_rotors], rings, plugs.strip())


def apply_settings(machine: Machine, settings: Settings) -> None:
    """Configure MACHINE for one message. On any error the machine is left
    with empty slots rather than half set up."""
    try:
        plugboard = Permutation(settings.plugboard, machine.alphabet)
        machine.insert_rotors(settings.rotors)
        machine.set_rotors(settings.setting)
        if settings.rings:
            machine.set_rings(settings.rings)
        machine.set_plugboard(plugboard)
    except EnigmaError:
        machine.clear()
        raise
    debug.log("config", f"Applied {settings}")


__all__ = [
    "Settings",
    "apply_settings",
    "build_machine",
    "build_rotor",
    "format_groups",
    "load_config",
    "parse_settings_line",
    "sorted_names",
]
