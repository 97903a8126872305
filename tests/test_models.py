import logging

import pytest

from passmenu.settings import Config, Deserializer, HotkeyAction, HotkeyConfig, HotkeyOptions
from passmenu.settings.models import filter_hotkeys, hyphenate


HOTKEYS_YAML = """\
interface:
  hotkeys:
    - hotkey: "tab"
      action: "select-next"
    - hotkey: "ctrl u"
      action: "set-text   some/dir/ "
    - hotkey: "ctrl x"
      action: null
    - hotkey: "ctrl y"
      action: "teleport"
    - hotkey: ""
      action: "select-first"
    - action: "select-last"
    -
    - hotkey: "ctrl q"
      action: ""
"""


def test_hyphenate_maps_attribute_names() -> None:
    assert hyphenate("follow_cursor") == "follow-cursor"
    assert hyphenate("style") == "style"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("select-next", HotkeyOptions(HotkeyAction.SELECT_NEXT)),
        ("SELECT-PREVIOUS", HotkeyOptions(HotkeyAction.SELECT_PREVIOUS)),
        ("set-text foo/", HotkeyOptions(HotkeyAction.SET_TEXT, "foo/")),
        ("decrypt-password", HotkeyOptions(HotkeyAction.DECRYPT_PASSWORD)),
        ("  close  ", HotkeyOptions(HotkeyAction.CLOSE)),
    ],
)
def test_action_string_parses(raw: str, expected: HotkeyOptions) -> None:
    assert HotkeyOptions.parse(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "   ", "teleport", "select_next"])
def test_unparseable_action_string_has_no_options(raw: str | None) -> None:
    assert HotkeyOptions.parse(raw) is None
    assert HotkeyConfig(hotkey="tab", action_string=raw).options is None


def test_filtered_view_keeps_only_complete_parsed_entries() -> None:
    config = Deserializer().deserialize(HOTKEYS_YAML, Config)

    assert len(config.interface.unfiltered_hotkeys or []) == 8
    effective = config.interface.hotkeys
    assert [h.hotkey for h in effective] == ["tab", "ctrl u"]
    assert effective[1].options == HotkeyOptions(HotkeyAction.SET_TEXT, "some/dir/")


def test_dropped_hotkeys_are_logged_not_raised(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="passmenu.settings.models"):
        Deserializer().deserialize(HOTKEYS_YAML, Config)
    assert "Ignoring 6 invalid hotkey entries" in caplog.text


def test_invalid_entries_never_surface_regardless_of_valid_count() -> None:
    valid = [HotkeyConfig(hotkey=f"ctrl {i}", action_string="select-next") for i in range(50)]
    invalid = [
        None,
        HotkeyConfig(hotkey="ctrl a", action_string=None),
        HotkeyConfig(hotkey="ctrl b", action_string="nonsense"),
        HotkeyConfig(hotkey=None, action_string="select-next"),
    ]
    result = filter_hotkeys(invalid + valid + invalid)

    assert result == valid
    assert all(h.options is not None for h in result)


def test_null_hotkey_list_is_empty_view() -> None:
    config = Deserializer().deserialize("interface:\n  hotkeys:\nhotkeys:\n", Config)
    assert config.interface.hotkeys == []
    assert config.global_hotkeys == []


def test_default_hotkeys() -> None:
    config = Config()
    assert [h.options for h in config.interface.hotkeys] == [
        HotkeyOptions(HotkeyAction.SELECT_NEXT),
        HotkeyOptions(HotkeyAction.SELECT_PREVIOUS),
    ]
    assert config.global_hotkeys[0].options == HotkeyOptions(HotkeyAction.DECRYPT_PASSWORD)


def test_empty_section_uses_defaults() -> None:
    config = Deserializer().deserialize("interface:\nnotifications:\n", Config)
    assert config.interface == Config().interface
    assert config.notifications.enabled is True


def test_empty_nested_section_uses_defaults() -> None:
    config = Deserializer().deserialize("interface:\n  style:\n  password-editor:\n", Config)
    assert config.interface.style == Config().interface.style
    assert config.interface.password_editor.use_default_template is False


def test_config_is_immutable() -> None:
    config = Config()
    with pytest.raises(ValueError):
        config.interface.follow_cursor = False  # type: ignore[misc]


def test_unknown_keys_are_ignored() -> None:
    config = Deserializer().deserialize("config-version: '1.0'\nfuture-section:\n  a: 1\n", Config)
    assert config == Config()


def test_numeric_hotkey_is_read_as_key_name() -> None:
    config = Deserializer().deserialize(
        "hotkeys:\n  - hotkey: 1\n    action: decrypt-password\n", Config
    )
    assert [h.hotkey for h in config.global_hotkeys] == ["1"]


def test_non_text_action_drops_entry_without_failing_file() -> None:
    text = """\
hotkeys:
  - hotkey: "ctrl 1"
    action: 5
  - hotkey: "ctrl 2"
    action: true
  - hotkey: "ctrl 3"
    action: [select-next]
  - hotkey: "ctrl alt p"
    action: "decrypt-password"
"""
    config = Deserializer().deserialize(text, Config)

    assert [h.hotkey for h in config.global_hotkeys] == ["ctrl alt p"]
    assert [h.action_string for h in config.unfiltered_hotkeys or ()] == [
        "5",
        "true",
        None,
        "decrypt-password",
    ]


def test_hotkey_sequences_cannot_be_mutated_in_place() -> None:
    config = Deserializer().deserialize(
        "hotkeys:\n  - hotkey: tab\n    action: select-next\n", Config
    )
    assert isinstance(config.unfiltered_hotkeys, tuple)
    assert isinstance(config.interface.unfiltered_hotkeys, tuple)
    with pytest.raises(AttributeError):
        config.unfiltered_hotkeys.append(None)  # type: ignore[union-attr]
