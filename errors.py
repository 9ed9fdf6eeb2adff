# errors.py
from __future__ import annotations


class EnigmaError(Exception):
    """Base class for every failure raised by the machine and its loaders."""


class ValidationError(EnigmaError, ValueError):
    """Malformed alphabet, cycle string, rotor selection or setting."""


class UnknownSymbolError(EnigmaError, LookupError):
    """A character that is not part of the alphabet."""


class SignalRangeError(EnigmaError, IndexError):
    """An index outside 0..size-1."""
