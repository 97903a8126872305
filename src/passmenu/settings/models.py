"""Settings schema for passmenu.yaml.

The whole file decodes into a ``Config`` tree. Keys in the file are
hyphenated (``follow-cursor``) while attributes stay snake_case. Models
are frozen: a configuration is replaced as a whole, never edited in place.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Final

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from passmenu.settings.types import (
    Brush,
    BrushValue,
    Thickness,
    ThicknessValue,
    Width,
    WidthValue,
)

logger: Final = logging.getLogger(__name__)


def hyphenate(name: str) -> str:
    """Map a Python attribute name onto its config file key."""
    return name.replace("_", "-")


class SettingsModel(BaseModel):
    """Base class for every section of the config file."""

    model_config = ConfigDict(
        alias_generator=hyphenate,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )


class HotkeyAction(Enum):
    """Actions a hotkey can be bound to."""

    # Global hotkeys
    DECRYPT_PASSWORD = "decrypt-password"
    DECRYPT_METADATA = "decrypt-metadata"
    GENERATE_PASSWORD = "generate-password"
    EDIT_PASSWORD = "edit-password"
    GIT_PULL = "git-pull"
    GIT_PUSH = "git-push"
    OPEN_SHELL = "open-shell"
    SHOW_DEBUG_INFO = "show-debug-info"
    CHECK_GIT_STATUS = "check-git-status"
    VIEW_LOG = "view-log"

    # Selection window hotkeys
    SELECT_NEXT = "select-next"
    SELECT_PREVIOUS = "select-previous"
    SELECT_FIRST = "select-first"
    SELECT_LAST = "select-last"
    SELECT_NEXT_PAGE = "select-next-page"
    SELECT_PREVIOUS_PAGE = "select-previous-page"
    SELECT_CURRENT = "select-current"
    SET_TEXT = "set-text"
    REMOVE_CHAR = "remove-char"
    REMOVE_WORD = "remove-word"
    REMOVE_LINE = "remove-line"
    CLOSE = "close"


@dataclass(frozen=True)
class HotkeyOptions:
    """Structured form of a hotkey action string.

    An action string is the action name, optionally followed by
    whitespace and a free-form argument (``set-text foo/``).
    """

    action: HotkeyAction
    argument: str | None = None

    @classmethod
    def parse(cls, action_string: str | None) -> HotkeyOptions | None:
        """Parse an action string.

        Args:
            action_string: Raw ``action`` value from the config file

        Returns:
            Parsed options, or None if the string is empty or names an
            unknown action
        """
        if not action_string or not action_string.strip():
            return None
        name, _, argument = action_string.strip().partition(" ")
        try:
            action = HotkeyAction(name.lower())
        except ValueError:
            return None
        return cls(action=action, argument=argument.strip() or None)


class HotkeyConfig(SettingsModel):
    """A single key-combination to action binding."""

    hotkey: str | None = None
    action_string: str | None = Field(None, alias="action")

    @field_validator("hotkey", "action_string", mode="before")
    @classmethod
    def scalar_as_text(cls, v: object) -> str | None:
        """Read YAML scalars as written (``hotkey: 1`` binds the "1" key).

        Non-scalar values leave the entry incomplete so it gets filtered
        out instead of failing the whole file.
        """
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return str(v)
        return None

    @property
    def options(self) -> HotkeyOptions | None:
        return HotkeyOptions.parse(self.action_string)

    @property
    def is_valid(self) -> bool:
        return bool(self.hotkey) and self.options is not None


def filter_hotkeys(entries: Iterable[HotkeyConfig | None] | None) -> list[HotkeyConfig]:
    """Return only entries that have a key combination and a parseable action."""
    if entries is None:
        return []
    return [h for h in entries if h is not None and h.is_valid]


def _log_dropped_hotkeys(section: str, entries: Sequence[HotkeyConfig | None] | None) -> None:
    if not entries:
        return
    dropped = len(entries) - len(filter_hotkeys(entries))
    if dropped:
        logger.warning("Ignoring %d invalid hotkey entries in '%s'", dropped, section)


class PasswordStoreConfig(SettingsModel):
    """Where the password store lives and which files it contains."""

    location: str = "~/.password-store"
    password_file_match: str = r"\.gpg$"


class NotificationConfig(SettingsModel):
    """Desktop notification settings."""

    enabled: bool = True
    timeout: float = Field(5.0, ge=0, description="Seconds a notification stays visible")


class PasswordEditorConfig(SettingsModel):
    """Options for the password file editor."""

    use_default_template: bool = False
    default_template: str = "\nusername: "


class StyleConfig(SettingsModel):
    """Look of the selection window."""

    font_family: str = "Consolas, Menlo, Monaco, monospace"
    font_size: float = Field(14, gt=0)
    width: WidthValue = Width(600.0)
    height: WidthValue = Width(None)
    margin: ThicknessValue = Thickness.uniform(0)
    border_width: ThicknessValue = Thickness.uniform(1)
    border_colour: BrushValue = Brush(0x30, 0x38, 0x44)
    background_colour: BrushValue = Brush(0x1E, 0x1E, 0x1E)
    text_colour: BrushValue = Brush(0xDD, 0xDD, 0xDD)
    selection_colour: BrushValue = Brush(0xFF, 0xFF, 0xFF)
    selection_background_colour: BrushValue = Brush(0x34, 0x5E, 0x8A)
    caret_colour: BrushValue = Brush(0xDD, 0xDD, 0xDD)


class InterfaceConfig(SettingsModel):
    """Behaviour of the selection window."""

    follow_cursor: bool = True
    directory_separator: str = Field("/", min_length=1)
    clipboard_timeout: float = Field(30, ge=0, description="Seconds before the clipboard is cleared")
    restore_clipboard: bool = True

    unfiltered_hotkeys: tuple[HotkeyConfig | None, ...] | None = Field(
        default_factory=lambda: (
            HotkeyConfig(hotkey="tab", action_string="select-next"),
            HotkeyConfig(hotkey="shift tab", action_string="select-previous"),
        ),
        alias="hotkeys",
    )

    password_editor: PasswordEditorConfig = Field(default_factory=PasswordEditorConfig)
    style: StyleConfig = Field(default_factory=StyleConfig)

    @property
    def hotkeys(self) -> list[HotkeyConfig]:
        """Hotkeys that can actually be registered."""
        return filter_hotkeys(self.unfiltered_hotkeys)

    @field_validator("password_editor", "style", mode="before")
    @classmethod
    def empty_section_uses_defaults(cls, v: object) -> object:
        return {} if v is None else v

    @model_validator(mode="after")
    def report_dropped_hotkeys(self) -> InterfaceConfig:
        _log_dropped_hotkeys("interface.hotkeys", self.unfiltered_hotkeys)
        return self


class Config(SettingsModel):
    """Complete passmenu configuration."""

    password_store: PasswordStoreConfig = Field(default_factory=PasswordStoreConfig)
    interface: InterfaceConfig = Field(default_factory=InterfaceConfig)
    notifications: NotificationConfig = Field(default_factory=NotificationConfig)

    unfiltered_hotkeys: tuple[HotkeyConfig | None, ...] | None = Field(
        default_factory=lambda: (
            HotkeyConfig(hotkey="ctrl alt p", action_string="decrypt-password"),
            HotkeyConfig(hotkey="ctrl alt shift p", action_string="generate-password"),
        ),
        alias="hotkeys",
    )

    # ---- validators ----
    @field_validator("password_store", "interface", "notifications", mode="before")
    @classmethod
    def empty_section_uses_defaults(cls, v: object) -> object:
        """A section written as a bare key (``interface:``) decodes to None."""
        return {} if v is None else v

    @model_validator(mode="after")
    def report_dropped_hotkeys(self) -> Config:
        _log_dropped_hotkeys("hotkeys", self.unfiltered_hotkeys)
        return self

    # ---- convenience methods ----
    @property
    def global_hotkeys(self) -> list[HotkeyConfig]:
        """Global hotkeys that can actually be registered."""
        return filter_hotkeys(self.unfiltered_hotkeys)
