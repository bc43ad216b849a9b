"""Classify raw key identifiers into the commands the session understands."""

from dataclasses import dataclass
from typing import Union

CONFIRM_KEY = "Enter"


@dataclass(frozen=True)
class Confirm:
    pass


@dataclass(frozen=True)
class CharacterKey:
    character: str


@dataclass(frozen=True)
class OtherKey:
    name: str


KeyCommand = Union[Confirm, CharacterKey, OtherKey]


def map_key(raw_key: str) -> KeyCommand:
    if raw_key == CONFIRM_KEY:
        return Confirm()
    if len(raw_key) == 1:
        return CharacterKey(raw_key.lower())
    # Arrow keys and other named keys are not bound yet.
    return OtherKey(raw_key)
