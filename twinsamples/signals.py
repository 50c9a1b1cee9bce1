"""Value sequences, topic names and property payloads used by the samples."""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from typing import Any

MIN_TEMPERATURE = 65
MAX_TEMPERATURE = 85

AIRBAG_COUNT = 18
AIRBAGS_PER_ROW = 3
MAX_ROW = 5

_DTMI_SEPARATORS = re.compile(r"[:;]")


def convert_dtmi_to_topic(dtmi: str) -> str:
    """Turn a DTMI into an MQTT topic: drop the scheme, separators become slashes."""
    scheme, *rest = _DTMI_SEPARATORS.split(dtmi)
    if scheme != "dtmi":
        raise ValueError("Invalid dtmi")
    return "/".join(rest)


def temperature_values(start: int = 75) -> Iterator[int]:
    """Yield temperatures that bounce back and forth between 65 and 85 degrees."""
    temperature = start
    increasing = True
    while True:
        yield temperature
        if increasing:
            if temperature == MAX_TEMPERATURE:
                increasing = False
                temperature -= 1
            else:
                temperature += 1
        elif temperature == MIN_TEMPERATURE:
            increasing = True
            temperature += 1
        else:
            temperature -= 1


def massage_airbag_levels(crest_row: int) -> list[int]:
    """Inflation levels for a seat of six rows of three airbags, peaking at crest_row."""
    return [
        max(100 - abs(crest_row - airbag // AIRBAGS_PER_ROW) * 20, 0)
        for airbag in range(AIRBAG_COUNT)
    ]


def crest_rows() -> Iterator[int]:
    """Yield crest rows of a wave that moves forwards and backwards across the seat."""
    crest_row = 0
    moving_forwards = True
    while True:
        yield crest_row
        if crest_row == 0:
            moving_forwards = True
        elif crest_row == MAX_ROW:
            moving_forwards = False
        crest_row += 1 if moving_forwards else -1


def property_json(name: str, value: Any, model: str) -> str:
    """Compact JSON for a property value together with its metadata."""
    return json.dumps(
        {name: value, "$metadata": {"model": model}},
        separators=(",", ":"),
    )