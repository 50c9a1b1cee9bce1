"""Settings of the streaming consumer and provider, read from YAML files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

import yaml

STREAMING_CONSUMER_CONFIG_FILENAME = "streaming_consumer_settings"
STREAMING_PROVIDER_CONFIG_FILENAME = "streaming_provider_settings"

_YAML_EXTENSIONS = ("yaml", "yml")
_MAX_U16 = 0xFFFF

PathLike = Union[str, "os.PathLike[str]"]


@dataclass(frozen=True)
class StreamingConsumerSettings:
    number_of_images: int
    chariott_uri: Optional[str] = None
    invehicle_digital_twin_uri: Optional[str] = None


@dataclass(frozen=True)
class StreamingProviderSettings:
    provider_authority: str
    image_directory: str
    chariott_uri: Optional[str] = None
    invehicle_digital_twin_uri: Optional[str] = None


def _resolve(path: PathLike) -> Path:
    """Find the file itself, or the file with a YAML extension added."""
    candidate = Path(path)
    if candidate.is_file():
        return candidate
    for extension in _YAML_EXTENSIONS:
        with_extension = candidate.with_name(f"{candidate.name}.{extension}")
        if with_extension.is_file():
            return with_extension
    raise FileNotFoundError(f'configuration file "{path}" not found')


def _read_mapping(path: PathLike) -> dict[str, Any]:
    with _resolve(path).open(encoding="utf-8") as stream:
        document = yaml.safe_load(stream)
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError("the configuration must be a mapping")
    return document


def _as_str(document: dict[str, Any], key: str) -> Optional[str]:
    value = document.get(key)
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise ValueError(f"invalid type for field `{key}`: expected a string")


def _required_str(document: dict[str, Any], key: str) -> str:
    value = _as_str(document, key)
    if value is None:
        raise ValueError(f"missing field `{key}`")
    return value


def _required_u16(document: dict[str, Any], key: str) -> int:
    if document.get(key) is None:
        raise ValueError(f"missing field `{key}`")
    value = document[key]
    if isinstance(value, bool):
        raise ValueError(f"invalid type for field `{key}`: expected an integer")
    if isinstance(value, str):
        try:
            value = int(value.strip())
        except ValueError as err:
            raise ValueError(f"invalid value for field `{key}`: {value!r}") from err
    if not isinstance(value, int):
        raise ValueError(f"invalid type for field `{key}`: expected an integer")
    if not 0 <= value <= _MAX_U16:
        raise ValueError(f"invalid value for field `{key}`: {value} is out of range")
    return value


def load_streaming_consumer_settings(
    path: PathLike = STREAMING_CONSUMER_CONFIG_FILENAME,
) -> StreamingConsumerSettings:
    """Load the streaming consumer's settings."""
    document = _read_mapping(path)
    return StreamingConsumerSettings(
        number_of_images=_required_u16(document, "number_of_images"),
        chariott_uri=_as_str(document, "chariott_uri"),
        invehicle_digital_twin_uri=_as_str(document, "invehicle_digital_twin_uri"),
    )


def load_streaming_provider_settings(
    path: PathLike = STREAMING_PROVIDER_CONFIG_FILENAME,
) -> StreamingProviderSettings:
    """Load the streaming provider's settings."""
    document = _read_mapping(path)
    return StreamingProviderSettings(
        provider_authority=_required_str(document, "provider_authority"),
        image_directory=_required_str(document, "image_directory"),
        chariott_uri=_as_str(document, "chariott_uri"),
        invehicle_digital_twin_uri=_as_str(document, "invehicle_digital_twin_uri"),
    )