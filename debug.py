# debug.py
from __future__ import annotations
import logging
from typing import Dict

COMPONENTS = ("alphabet", "permutation", "rotor", "stepping", "machine", "config")


class Debug:
    _root_configured: bool = False          # class-level guard

    def __init__(self, name: str = "ENIGMA") -> None:
        self.logger = logging.getLogger(name)
        self.enabled = True        # global switch

        # default component map
        self.components: Dict[str, bool] = {c: False for c in COMPONENTS}

    @classmethod
    def configure(cls, *, log_to: str | None = None, level: int = logging.DEBUG) -> None:
        """
        Install the root handlers once. If `log_to` is given, messages
        also stream to that file.
        """
        if cls._root_configured:
            return
        handlers: list[logging.Handler] = [logging.StreamHandler()]
        if log_to:
            handlers.append(logging.FileHandler(log_to, encoding="utf-8"))

        logging.basicConfig(
            level=level,
            format="[%(asctime)s] [%(levelname)s] [%(name)s]: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
            handlers=handlers,
        )
        cls._root_configured = True

    # ── logging API ──────────────────────────────────────────────
    def log(self, component: str, message: str) -> None:
        if self.enabled and self.components.get(component, False):
            self.logger.debug("[%s] %s", component.upper(), message)

    def active(self, component: str) -> bool:
        return self.enabled and self.components.get(component, False)

    # ── component toggles ────────────────────────────────────────
    def enable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = True

    def disable(self, *components: str) -> None:
        for c in components:
            self._require(c)
            self.components[c] = False

    def toggle_global(self, state: bool) -> None:
        """Switch every component on/off at once."""
        self.enabled = state

    # ── helpers ──────────────────────────────────────────────────
    def _require(self, component: str) -> None:
        if component not in self.components:
            raise ValueError(f"No such component: {component!r}")

    # nicety for `print(dbg)`
    def __repr__(self) -> str:
        active = [k for k, v in self.components.items() if v]
        return f"<Debug enabled={self.enabled} active={active}>"


# shared by every module of the machine
debug = Debug()
