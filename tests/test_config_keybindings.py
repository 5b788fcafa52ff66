import pytest

from wayscriber.config.keybindings import Action, KeyBinding, KeybindingsConfig


def test_parse_simple_key():
    binding = KeyBinding.parse("Escape")
    assert binding.key == "Escape"
    assert not binding.ctrl
    assert not binding.shift
    assert not binding.alt


def test_parse_ctrl_key():
    binding = KeyBinding.parse("Ctrl+Z")
    assert binding.key == "Z"
    assert binding.ctrl
    assert not binding.shift
    assert not binding.alt


def test_parse_ctrl_shift_key():
    binding = KeyBinding.parse("Ctrl+Shift+W")
    assert binding.key == "W"
    assert binding.ctrl
    assert binding.shift
    assert not binding.alt


def test_parse_all_modifiers():
    binding = KeyBinding.parse("Ctrl+Shift+Alt+A")
    assert binding.key == "A"
    assert binding.ctrl and binding.shift and binding.alt


def test_parse_case_insensitive():
    binding = KeyBinding.parse("ctrl+shift+w")
    assert binding.key == "w"
    assert binding.ctrl
    assert binding.shift


def test_parse_with_spaces():
    binding = KeyBinding.parse("Ctrl + Shift + W")
    assert binding.key == "W"
    assert binding.ctrl
    assert binding.shift


def test_parse_control_alias():
    assert KeyBinding.parse("Control+X") == KeyBinding("X", ctrl=True)


def test_matches():
    binding = KeyBinding.parse("Ctrl+Shift+W")
    assert binding.matches("W", True, True, False)
    assert binding.matches("w", True, True, False)
    assert not binding.matches("W", False, True, False)
    assert not binding.matches("W", True, False, False)
    assert not binding.matches("A", True, True, False)


def test_parse_modifier_order_independence():
    binding1 = KeyBinding.parse("Ctrl+Shift+W")
    binding2 = KeyBinding.parse("Shift+Ctrl+W")
    assert binding1.key == "W"
    assert binding2.key == "W"
    assert binding1 == binding2
    assert binding1.ctrl and binding1.shift

    for text in ("Ctrl+Alt+Shift+W", "Shift+Alt+Ctrl+W", "Alt+Shift+Ctrl+W"):
        binding = KeyBinding.parse(text)
        assert binding.key == "W"
        assert binding.ctrl and binding.shift and binding.alt


@pytest.mark.parametrize(
    "text, expected",
    [
        ("+", KeyBinding("+")),
        ("Ctrl+Shift++", KeyBinding("+", ctrl=True, shift=True)),
        ("Ctrl+Shift+=", KeyBinding("=", ctrl=True, shift=True)),
        ("Ctrl+6", KeyBinding("6", ctrl=True)),
    ],
)
def test_parse_plus_and_symbol_keys(text, expected):
    assert KeyBinding.parse(text) == expected


@pytest.mark.parametrize("text", ["", "   "])
def test_parse_empty_raises(text):
    with pytest.raises(ValueError, match="Empty keybinding"):
        KeyBinding.parse(text)


def test_parse_only_modifiers_raises():
    with pytest.raises(ValueError, match="No key specified"):
        KeyBinding.parse("Ctrl+Shift")


def test_build_action_map():
    action_map = KeybindingsConfig().build_action_map()
    assert action_map[KeyBinding.parse("Escape")] is Action.EXIT
    assert action_map[KeyBinding.parse("Ctrl+Z")] is Action.UNDO
    assert action_map[KeyBinding.parse("Ctrl+Shift++")] is Action.INCREASE_FONT_SIZE
    assert action_map[KeyBinding.parse("+")] is Action.INCREASE_THICKNESS


def test_default_map_covers_every_action():
    action_map = KeybindingsConfig().build_action_map()
    assert set(action_map.values()) == set(Action)


def test_duplicate_keybinding_detection():
    config = KeybindingsConfig(exit=["Ctrl+Z"], undo=["Ctrl+Z"])
    with pytest.raises(ValueError) as info:
        config.build_action_map()
    assert "Duplicate keybinding" in str(info.value)
    assert "Ctrl+Z" in str(info.value)


def test_duplicate_with_different_modifier_order():
    config = KeybindingsConfig(exit=["Ctrl+Shift+W"], toggle_whiteboard=["Shift+Ctrl+W"])
    with pytest.raises(ValueError, match="Duplicate keybinding"):
        config.build_action_map()


def test_invalid_binding_in_config_raises():
    config = KeybindingsConfig(undo=["Ctrl+Alt"])
    with pytest.raises(ValueError, match="No key specified"):
        config.build_action_map()


def test_from_dict_keeps_defaults_for_missing_entries():
    config = KeybindingsConfig.from_dict({"undo": ["Ctrl+U"], "unknown": ["X"]})
    assert config.undo == ["Ctrl+U"]
    assert config.exit == ["Escape", "Ctrl+Q"]
    assert config.capture_file_region == ["Ctrl+Shift+6"]


def test_from_dict_rejects_non_list():
    with pytest.raises(ValueError):
        KeybindingsConfig.from_dict({"undo": "Ctrl+Z"})


def test_to_dict_round_trip():
    original = KeybindingsConfig(exit=["Ctrl+Q"], toggle_help=["F1", "H"])
    data = original.to_dict()
    assert data["toggle_help"] == ["F1", "H"]
    assert set(data) == {action.value for action in Action}
    assert KeybindingsConfig.from_dict(data) == original