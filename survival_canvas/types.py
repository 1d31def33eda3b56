"""Common type aliases and enumerations.

``SpriteKey`` is the central lookup key of the renderer: every sprite table is
keyed on the ``(EntityType, HealthBucket)`` pair so that adding an entity type
means extending each table before the package imports again.
"""

from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Tuple


class EntityType(StrEnum):
    """Entity variants produced by the survival simulator."""

    BOX = auto()
    PLAYER = auto()
    ROCK = auto()
    ZOMBIE = auto()


class HealthBucket(StrEnum):
    """Two-valued health classification used for sprite selection."""

    HIT = auto()
    ALIVE = auto()


class AssetKind(StrEnum):
    """Named image resources held by the asset store."""

    BACKGROUND = auto()
    BOX = auto()
    PLAYER = auto()
    ROCK = auto()
    ZOMBIE = auto()
    ZOMBIE_HIT = auto()


SpriteKey = Tuple[EntityType, HealthBucket]


@dataclass(frozen=True)
class Position:
    """Grid coordinate in cell units; fractional values are allowed.

    Attributes:
        x: Column (0 at left).
        y: Row (0 at top).
    """

    x: float
    y: float


@dataclass(frozen=True)
class Offset:
    """Pixel correction applied after a sprite is centred in its cell."""

    dx: float
    dy: float


@dataclass(frozen=True)
class Ratio:
    """Sprite width and height as a fraction of one grid cell."""

    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle in logical pixels."""

    x: float
    y: float
    width: float
    height: float
