"""Configurable keyboard shortcuts: actions, key bindings and their parsing."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class Action(Enum):
    """Everything a key can be bound to; values are the config file keys."""

    EXIT = "exit"
    ENTER_TEXT_MODE = "enter_text_mode"
    CLEAR_CANVAS = "clear_canvas"
    UNDO = "undo"
    INCREASE_THICKNESS = "increase_thickness"
    DECREASE_THICKNESS = "decrease_thickness"
    INCREASE_FONT_SIZE = "increase_font_size"
    DECREASE_FONT_SIZE = "decrease_font_size"
    TOGGLE_WHITEBOARD = "toggle_whiteboard"
    TOGGLE_BLACKBOARD = "toggle_blackboard"
    RETURN_TO_TRANSPARENT = "return_to_transparent"
    TOGGLE_HELP = "toggle_help"
    OPEN_CONFIGURATOR = "open_configurator"
    SET_COLOR_RED = "set_color_red"
    SET_COLOR_GREEN = "set_color_green"
    SET_COLOR_BLUE = "set_color_blue"
    SET_COLOR_YELLOW = "set_color_yellow"
    SET_COLOR_ORANGE = "set_color_orange"
    SET_COLOR_PINK = "set_color_pink"
    SET_COLOR_WHITE = "set_color_white"
    SET_COLOR_BLACK = "set_color_black"
    CAPTURE_FULL_SCREEN = "capture_full_screen"
    CAPTURE_ACTIVE_WINDOW = "capture_active_window"
    CAPTURE_SELECTION = "capture_selection"
    CAPTURE_CLIPBOARD_FULL = "capture_clipboard_full"
    CAPTURE_FILE_FULL = "capture_file_full"
    CAPTURE_CLIPBOARD_SELECTION = "capture_clipboard_selection"
    CAPTURE_FILE_SELECTION = "capture_file_selection"
    CAPTURE_CLIPBOARD_REGION = "capture_clipboard_region"
    CAPTURE_FILE_REGION = "capture_file_region"


_MODIFIERS = {"ctrl": "ctrl", "control": "ctrl", "shift": "shift", "alt": "alt"}


def _ascii_lower(text: str) -> str:
    return "".join(c.lower() if c.isascii() else c for c in text)


@dataclass(frozen=True)
class KeyBinding:
    """A key name together with the modifiers that must be held."""

    key: str
    ctrl: bool = False
    shift: bool = False
    alt: bool = False

    @classmethod
    def parse(cls, s: str) -> KeyBinding:
        """Parse strings such as ``"Ctrl+Shift+W"`` or ``"Escape"``.

        Modifiers may appear in any order and spaces around ``+`` are allowed.
        Raises ValueError for an empty string or one holding only modifiers.
        """
        s = s.strip()
        if not s:
            raise ValueError("Empty keybinding string")

        normalized = s.replace(" + ", "+").replace("+ ", "+").replace(" +", "+")
        held = {"ctrl": False, "shift": False, "alt": False}
        key_parts = []
        for part in normalized.split("+"):
            modifier = _MODIFIERS.get(part.lower())
            if modifier is None:
                key_parts.append(part)
            else:
                held[modifier] = True

        if not key_parts:
            raise ValueError(f"No key specified in: {s}")

        # Empty pieces come from a '+' used as the key itself, e.g. "Ctrl+Shift++".
        key = "+".join(key_parts) or "+"
        return cls(key=key, **held)

    def matches(self, key: str, ctrl: bool, shift: bool, alt: bool) -> bool:
        """Whether this binding fires for the given key and modifier state."""
        return (
            _ascii_lower(self.key) == _ascii_lower(key)
            and self.ctrl == ctrl
            and self.shift == shift
            and self.alt == alt
        )


def _bindings(*keys: str) -> Any:
    return field(default_factory=lambda: list(keys))


@dataclass
class KeybindingsConfig:
    """Binding strings for every action, as written in the config file."""

    exit: list[str] = _bindings("Escape", "Ctrl+Q")
    enter_text_mode: list[str] = _bindings("T")
    clear_canvas: list[str] = _bindings("E")
    undo: list[str] = _bindings("Ctrl+Z")
    increase_thickness: list[str] = _bindings("+", "=")
    decrease_thickness: list[str] = _bindings("-", "_")
    increase_font_size: list[str] = _bindings("Ctrl+Shift++", "Ctrl+Shift+=")
    decrease_font_size: list[str] = _bindings("Ctrl+Shift+-", "Ctrl+Shift+_")
    toggle_whiteboard: list[str] = _bindings("Ctrl+W")
    toggle_blackboard: list[str] = _bindings("Ctrl+B")
    return_to_transparent: list[str] = _bindings("Ctrl+Shift+T")
    toggle_help: list[str] = _bindings("F10")
    open_configurator: list[str] = _bindings("F11")
    set_color_red: list[str] = _bindings("R")
    set_color_green: list[str] = _bindings("G")
    set_color_blue: list[str] = _bindings("B")
    set_color_yellow: list[str] = _bindings("Y")
    set_color_orange: list[str] = _bindings("O")
    set_color_pink: list[str] = _bindings("P")
    set_color_white: list[str] = _bindings("W")
    set_color_black: list[str] = _bindings("K")
    capture_full_screen: list[str] = _bindings("Ctrl+Shift+P")
    capture_active_window: list[str] = _bindings("Ctrl+Shift+O")
    capture_selection: list[str] = _bindings("Ctrl+Shift+I")
    capture_clipboard_full: list[str] = _bindings("Ctrl+C")
    capture_file_full: list[str] = _bindings("Ctrl+S")
    capture_clipboard_selection: list[str] = _bindings("Ctrl+Shift+C")
    capture_file_selection: list[str] = _bindings("Ctrl+Shift+S")
    capture_clipboard_region: list[str] = _bindings("Ctrl+6")
    capture_file_region: list[str] = _bindings("Ctrl+Shift+6")

    def build_action_map(self) -> dict[KeyBinding, Action]:
        """Map each parsed binding to its action.

        Raises ValueError for an unparsable binding or one bound twice.
        """
        action_map: dict[KeyBinding, Action] = {}
        for action in Action:
            for binding_str in getattr(self, action.value):
                binding = KeyBinding.parse(binding_str)
                existing = action_map.get(binding)
                if existing is not None:
                    raise ValueError(
                        f"Duplicate keybinding '{binding_str}' assigned to both "
                        f"{existing.name} and {action.name}"
                    )
                action_map[binding] = action
        return action_map

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> KeybindingsConfig:
        """Build from a ``[keybindings]`` table; missing actions keep their defaults."""
        known = {f.name for f in fields(cls)}
        values: dict[str, list[str]] = {}
        for name, value in data.items():
            if name not in known:
                continue
            if not isinstance(value, (list, tuple)) or not all(
                isinstance(item, str) for item in value
            ):
                raise ValueError(f"keybinding '{name}' must be a list of strings")
            values[name] = list(value)
        return cls(**values)

    def to_dict(self) -> dict[str, list[str]]:
        """Return the table written to the config file."""
        return {f.name: list(getattr(self, f.name)) for f in fields(self)}