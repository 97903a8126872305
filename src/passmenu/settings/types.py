"""Custom scalar types used by the settings models.

Widths, colours (brushes) and thicknesses are written in the config file
as short string tokens. Each type has a converter that turns such a token
into a structured value. Converters are looked up through the pydantic
validation context, so a ``Deserializer`` can plug in its own converter
for any of these types; the built-in converter is used otherwise.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Final, Protocol, runtime_checkable

from PIL import ImageColor
from pydantic import PlainSerializer, PlainValidator, ValidationInfo

# Key under which the deserializer passes its converter registry to pydantic
CONVERTERS_CONTEXT_KEY: Final = "converters"

WIDTH_KEYWORDS: Final[dict[str, float]] = {
    "narrow": 400.0,
    "normal": 800.0,
    "wide": 1200.0,
}


@dataclass(frozen=True)
class Width:
    """A window dimension in pixels, or ``None`` for automatic sizing."""

    pixels: float | None = None

    @property
    def is_auto(self) -> bool:
        return self.pixels is None

    def to_token(self) -> float | str:
        return "auto" if self.pixels is None else self.pixels


@dataclass(frozen=True)
class Brush:
    """An RGBA colour."""

    red: int
    green: int
    blue: int
    alpha: int = 255

    def to_token(self) -> str:
        if self.alpha == 255:
            return f"#{self.red:02x}{self.green:02x}{self.blue:02x}"
        return f"#{self.alpha:02x}{self.red:02x}{self.green:02x}{self.blue:02x}"


@dataclass(frozen=True)
class Thickness:
    """Edge sizes of a border or margin."""

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def uniform(cls, size: float) -> Thickness:
        return cls(size, size, size, size)

    def to_token(self) -> float | str:
        if self.left == self.top == self.right == self.bottom:
            return self.left
        return f"{self.left:g},{self.top:g},{self.right:g},{self.bottom:g}"


@runtime_checkable
class TypeConverter(Protocol):
    """Protocol for scalar converters pluggable into the deserializer.

    A converter declares the type it produces and turns a raw YAML
    scalar into an instance of that type, raising ``ValueError`` when
    the token cannot be parsed.
    """

    target_type: type

    def convert(self, value: Any) -> Any:
        """Convert a raw scalar into ``target_type``.

        Args:
            value: Scalar as produced by the YAML parser

        Returns:
            Instance of ``target_type``
        """
        ...


def _parse_number(token: str, what: str) -> float:
    try:
        return float(token)
    except ValueError:
        raise ValueError(f"Invalid {what}: {token!r}") from None


class WidthConverter:
    """Parse a width from a bare number, ``<n>px`` or a size keyword."""

    target_type = Width

    def convert(self, value: Any) -> Width:
        if isinstance(value, bool):
            raise ValueError(f"Invalid width: {value!r}")
        if isinstance(value, (int, float)):
            pixels = float(value)
        elif isinstance(value, str):
            token = value.strip().lower()
            if token == "auto":
                return Width(None)
            if token in WIDTH_KEYWORDS:
                return Width(WIDTH_KEYWORDS[token])
            if token.endswith("px"):
                token = token[:-2].strip()
            pixels = _parse_number(token, "width")
        else:
            raise ValueError(f"Invalid width: {value!r}")

        if pixels < 0:
            raise ValueError(f"Width cannot be negative: {value!r}")
        return Width(pixels)


class BrushConverter:
    """Parse a colour from a hex token or a colour name.

    Eight-digit hex tokens are read as ``#AARRGGBB``. Everything else
    (``#rgb``, ``#rrggbb``, names such as ``white``) goes through
    Pillow's colour table.
    """

    target_type = Brush

    def convert(self, value: Any) -> Brush:
        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"Invalid colour: {value!r}")
        token = value.strip()

        if token.lower() == "transparent":
            return Brush(0, 0, 0, 0)

        if token.startswith("#") and len(token) == 9:
            try:
                argb = int(token[1:], 16)
            except ValueError:
                raise ValueError(f"Invalid colour: {token!r}") from None
            return Brush(
                red=(argb >> 16) & 0xFF,
                green=(argb >> 8) & 0xFF,
                blue=argb & 0xFF,
                alpha=(argb >> 24) & 0xFF,
            )

        try:
            rgb = ImageColor.getrgb(token)
        except ValueError:
            raise ValueError(f"Invalid colour: {token!r}") from None
        return Brush(*rgb)


class ThicknessConverter:
    """Parse a thickness from one, two or four comma separated numbers."""

    target_type = Thickness

    def convert(self, value: Any) -> Thickness:
        if isinstance(value, bool):
            raise ValueError(f"Invalid thickness: {value!r}")
        if isinstance(value, (int, float)):
            return Thickness.uniform(float(value))
        if not isinstance(value, str):
            raise ValueError(f"Invalid thickness: {value!r}")

        parts = [_parse_number(p.strip(), "thickness") for p in value.split(",")]
        if len(parts) == 1:
            return Thickness.uniform(parts[0])
        if len(parts) == 2:
            # horizontal, vertical
            return Thickness(parts[0], parts[1], parts[0], parts[1])
        if len(parts) == 4:
            return Thickness(*parts)
        raise ValueError(f"Thickness needs 1, 2 or 4 values, got {len(parts)}: {value!r}")


BUILTIN_CONVERTERS: Final[dict[type, TypeConverter]] = {
    Width: WidthConverter(),
    Brush: BrushConverter(),
    Thickness: ThicknessConverter(),
}


def _context_converter(target_type: type) -> Callable[[Any, ValidationInfo], Any]:
    """Build a validator that delegates to the converter registered for a type."""

    def validate(value: Any, info: ValidationInfo) -> Any:
        if isinstance(value, target_type):
            return value
        registry: Mapping[type, TypeConverter] = (info.context or {}).get(
            CONVERTERS_CONTEXT_KEY, {}
        )
        converter = registry.get(target_type) or BUILTIN_CONVERTERS[target_type]
        return converter.convert(value)

    return validate


WidthValue = Annotated[
    Width,
    PlainValidator(_context_converter(Width)),
    PlainSerializer(lambda w: w.to_token()),
]
BrushValue = Annotated[
    Brush,
    PlainValidator(_context_converter(Brush)),
    PlainSerializer(lambda b: b.to_token()),
]
ThicknessValue = Annotated[
    Thickness,
    PlainValidator(_context_converter(Thickness)),
    PlainSerializer(lambda t: t.to_token()),
]
