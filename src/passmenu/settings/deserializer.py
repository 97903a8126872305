"""YAML deserializer for configuration documents.

Wraps PyYAML and pydantic behind a single ``deserialize`` call. The same
adapter serves a cheap probe into a plain mapping (used for version
checks) and a full decode into the typed settings model.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import IO, Any, TypeVar, overload

import yaml
from pydantic import BaseModel, ValidationError

from passmenu.errors import DecodeError
from passmenu.settings.types import BUILTIN_CONVERTERS, CONVERTERS_CONTEXT_KEY, TypeConverter

M = TypeVar("M", bound=BaseModel)


class Deserializer:
    """Decode YAML text into mappings or settings models.

    Scalar converters registered here take precedence over the built-in
    ones for the type they declare.

    Examples:
        deserializer = Deserializer()
        with open("passmenu.yaml", encoding="utf-8") as f:
            config = deserializer.deserialize(f, Config)
    """

    def __init__(self, converters: Iterable[TypeConverter] | None = None) -> None:
        """Initialize with optional custom converters.

        Args:
            converters: Converters that replace or extend the built-in ones
        """
        self._converters: dict[type, TypeConverter] = dict(BUILTIN_CONVERTERS)
        for converter in converters or ():
            self.register(converter)

    def register(self, converter: TypeConverter) -> None:
        """Plug in a converter for the type it declares."""
        self._converters[converter.target_type] = converter

    @property
    def converters(self) -> dict[type, TypeConverter]:
        return dict(self._converters)

    @overload
    def deserialize(self, stream: IO[str] | str, target: type[dict]) -> dict[str, Any] | None: ...

    @overload
    def deserialize(self, stream: IO[str] | str, target: type[M]) -> M: ...

    def deserialize(self, stream: IO[str] | str, target: type[Any]) -> Any:
        """Decode a YAML stream into ``target``.

        Args:
            stream: Text stream or string holding a YAML document
            target: ``dict`` for a plain mapping, or a pydantic model class

        Returns:
            The mapping (None for an empty document) or a validated model

        Raises:
            DecodeError: If the text is not valid YAML, cannot be read as
                text, or does not fit the shape of ``target``
        """
        try:
            data = yaml.safe_load(stream)
        except yaml.YAMLError as exc:
            raise DecodeError(f"Malformed YAML document: {exc}", exc) from exc
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Config file is not valid UTF-8: {exc}", exc) from exc

        if data is not None and not isinstance(data, dict):
            raise DecodeError(
                f"Expected a mapping at the top of the document, got {type(data).__name__}"
            )

        if target is dict:
            return data

        try:
            return target.model_validate(
                data or {}, context={CONVERTERS_CONTEXT_KEY: self._converters}
            )
        except ValidationError as err:
            raise DecodeError(f"Invalid configuration:\n{err}", err) from err


def default_deserializer() -> Deserializer:
    """New deserializer with only the built-in width, colour and thickness converters.

    Each call returns its own instance.
    """
    return Deserializer()
