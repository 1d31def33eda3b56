from dataclasses import dataclass
from typing import Mapping, Optional

from PIL import Image
from pyrsistent import PMap, pmap

from survival_canvas.config import DEFAULT_CONFIG, RenderConfig
from survival_canvas.entity import Entity, sprite_key
from survival_canvas.renderer.assets import AssetStore
from survival_canvas.types import (
    AssetKind,
    EntityType,
    HealthBucket,
    Offset,
    Ratio,
    SpriteKey,
)


SPRITE_KEYS: frozenset[SpriteKey] = frozenset(
    [(entity_type, HealthBucket.ALIVE) for entity_type in EntityType]
    + [(EntityType.ZOMBIE, HealthBucket.HIT)]
)

# --- Sprite tables keyed on (EntityType, HealthBucket) ---

SPRITE_ASSETS: PMap[SpriteKey, AssetKind] = pmap(
    {
        (EntityType.BOX, HealthBucket.ALIVE): AssetKind.BOX,
        (EntityType.PLAYER, HealthBucket.ALIVE): AssetKind.PLAYER,
        (EntityType.ROCK, HealthBucket.ALIVE): AssetKind.ROCK,
        (EntityType.ZOMBIE, HealthBucket.HIT): AssetKind.ZOMBIE_HIT,
        (EntityType.ZOMBIE, HealthBucket.ALIVE): AssetKind.ZOMBIE,
    }
)

# Hand alignment for sprites whose visual mass is off-centre, in pixels.
SPRITE_OFFSETS: PMap[SpriteKey, Offset] = pmap(
    {
        (EntityType.BOX, HealthBucket.ALIVE): Offset(0, 0),
        (EntityType.PLAYER, HealthBucket.ALIVE): Offset(0, 0),
        (EntityType.ROCK, HealthBucket.ALIVE): Offset(0, 0),
        (EntityType.ZOMBIE, HealthBucket.HIT): Offset(-2, 0),
        (EntityType.ZOMBIE, HealthBucket.ALIVE): Offset(14, 0),
    }
)

# Native aspect of each sprite relative to a square cell.
SPRITE_RATIOS: PMap[SpriteKey, Ratio] = pmap(
    {
        (EntityType.BOX, HealthBucket.ALIVE): Ratio(0.87, 1.0),  # 41x47
        (EntityType.PLAYER, HealthBucket.ALIVE): Ratio(1.0, 1.0),  # 64x64
        (EntityType.ROCK, HealthBucket.ALIVE): Ratio(1.0, 0.76),  # 67x51
        (EntityType.ZOMBIE, HealthBucket.HIT): Ratio(0.61, 1.0),  # 40x65
        (EntityType.ZOMBIE, HealthBucket.ALIVE): Ratio(1.0, 1.0),  # 64x64
    }
)


def check_exhaustive(name: str, table: Mapping[SpriteKey, object]) -> None:
    missing = SPRITE_KEYS - set(table.keys())
    if missing:
        raise ValueError(f"Sprite table {name} is missing keys: {sorted(missing)}")


for _name, _table in (
    ("SPRITE_ASSETS", SPRITE_ASSETS),
    ("SPRITE_OFFSETS", SPRITE_OFFSETS),
    ("SPRITE_RATIOS", SPRITE_RATIOS),
):
    check_exhaustive(_name, _table)


@dataclass(frozen=True)
class SpriteDescriptor:
    """Everything needed to draw one entity; built per draw call."""

    image: Image.Image
    offset: Offset
    ratio: Ratio


def resolve_image(entity: Entity, assets: AssetStore) -> Optional[Image.Image]:
    return assets.image(SPRITE_ASSETS[sprite_key(entity)])


def resolve_offset(entity: Entity) -> Offset:
    return SPRITE_OFFSETS[sprite_key(entity)]


def resolve_ratio(entity: Entity) -> Ratio:
    return SPRITE_RATIOS[sprite_key(entity)]


def resolve_opacity(entity: Entity, config: RenderConfig = DEFAULT_CONFIG) -> float:
    """Zombies in the ``hit`` bucket are drawn translucent; everything else opaque."""
    if sprite_key(entity) == (EntityType.ZOMBIE, HealthBucket.HIT):
        return config.hit_opacity
    return 1.0


def resolve_sprite(entity: Entity, assets: AssetStore) -> Optional[SpriteDescriptor]:
    """Return the entity's descriptor, or ``None`` while its image is not loaded."""
    image = resolve_image(entity, assets)
    if image is None:
        return None
    return SpriteDescriptor(
        image=image, offset=resolve_offset(entity), ratio=resolve_ratio(entity)
    )
