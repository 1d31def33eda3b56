"""Read-only entity view consumed by the renderer.

The simulator owns and mutates its entities; the renderer only ever calls the
three getters of :class:`Entity`. :class:`EntitySnapshot` is a frozen value
implementing the same protocol, handy for hosts that copy state per frame and
for tests.

Examples
--------
>>> from survival_canvas.entity import EntitySnapshot
>>> from survival_canvas.types import EntityType, Position
>>> zombie = EntitySnapshot(EntityType.ZOMBIE, health=1, position=Position(2, 3))
>>> health_bucket(zombie)
<HealthBucket.HIT: 'hit'>
"""

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from survival_canvas.types import EntityType, HealthBucket, Position, SpriteKey


@runtime_checkable
class Entity(Protocol):
    def get_type(self) -> EntityType: ...

    def get_health(self) -> int: ...

    def get_position(self) -> Position: ...


@dataclass(frozen=True)
class EntitySnapshot:
    """Immutable copy of one entity's render-relevant state.

    Attributes:
        type: Entity variant.
        health: Current hit points (``>= 0``).
        position: Grid position in cell units.
    """

    type: EntityType
    health: int
    position: Position

    def get_type(self) -> EntityType:
        return self.type

    def get_health(self) -> int:
        return self.health

    def get_position(self) -> Position:
        return self.position


def health_bucket(entity: Entity) -> HealthBucket:
    """Classify health: exactly 1 is ``HIT``, every other value is ``ALIVE``."""
    return HealthBucket.HIT if entity.get_health() == 1 else HealthBucket.ALIVE


def sprite_key(entity: Entity) -> SpriteKey:
    """Return the lookup key for an entity.

    Health only distinguishes zombies; other types always map to ``ALIVE``.
    """
    entity_type = entity.get_type()
    if entity_type == EntityType.ZOMBIE:
        return (entity_type, health_bucket(entity))
    return (entity_type, HealthBucket.ALIVE)
