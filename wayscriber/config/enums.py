"""Enumerations and value types used by the configuration file."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class StatusPosition(str, Enum):
    """Screen corner where the status bar is drawn."""

    TOP_LEFT = "top-left"
    TOP_RIGHT = "top-right"
    BOTTOM_LEFT = "bottom-left"
    BOTTOM_RIGHT = "bottom-right"


@dataclass(frozen=True)
class ColorSpec:
    """A colour given either by name or as 0-255 RGB components."""

    name: str | None = None
    rgb: tuple[int, int, int] | None = None

    def __post_init__(self) -> None:
        if (self.name is None) == (self.rgb is None):
            raise ValueError("a colour is either a name or an RGB triple")
        if self.rgb is not None:
            if len(self.rgb) != 3 or not all(_is_byte(c) for c in self.rgb):
                raise ValueError(f"invalid RGB colour {self.rgb!r}")

    @classmethod
    def from_value(cls, value: Any) -> ColorSpec:
        """Build from a config value: a string or a list of three 0-255 integers."""
        if isinstance(value, str):
            return cls(name=value)
        if isinstance(value, (list, tuple)):
            return cls(rgb=tuple(value))
        raise ValueError(f"invalid colour specification {value!r}")

    def to_value(self) -> str | list[int]:
        """Return the form written to the config file."""
        if self.name is not None:
            return self.name
        return list(self.rgb)


def _is_byte(component: Any) -> bool:
    return isinstance(component, int) and not isinstance(component, bool) and 0 <= component <= 255