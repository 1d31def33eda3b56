import asyncio
import os
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from PIL import Image

from survival_canvas.entity import EntitySnapshot
from survival_canvas.renderer.assets import DEFAULT_ASSET_PATHS, AssetStore
from survival_canvas.types import AssetKind, EntityType, Position

# Native sprite sizes of the shipped artwork.
NATIVE_SIZES: Dict[AssetKind, Tuple[int, int]] = {
    AssetKind.BACKGROUND: (1600, 900),
    AssetKind.BOX: (41, 47),
    AssetKind.PLAYER: (64, 64),
    AssetKind.ROCK: (67, 51),
    AssetKind.ZOMBIE: (64, 64),
    AssetKind.ZOMBIE_HIT: (40, 65),
}

SPRITE_COLORS: Dict[AssetKind, Tuple[int, int, int, int]] = {
    AssetKind.BACKGROUND: (0, 0, 255, 255),
    AssetKind.BOX: (139, 69, 19, 255),
    AssetKind.PLAYER: (0, 255, 0, 255),
    AssetKind.ROCK: (128, 128, 128, 255),
    AssetKind.ZOMBIE: (255, 0, 0, 255),
    AssetKind.ZOMBIE_HIT: (255, 255, 0, 255),
}


def make_entity(
    entity_type: EntityType, health: int = 3, x: float = 0, y: float = 0
) -> EntitySnapshot:
    return EntitySnapshot(type=entity_type, health=health, position=Position(x, y))


def write_assets(
    root: str, sizes: Optional[Dict[AssetKind, Tuple[int, int]]] = None
) -> str:
    """Write solid-colour stand-ins for every asset under ``root``."""
    sizes = {**NATIVE_SIZES, **(sizes or {})}
    for kind, rel in DEFAULT_ASSET_PATHS.items():
        path = os.path.join(root, rel)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        image = Image.new("RGBA", sizes[kind], SPRITE_COLORS[kind])
        if path.endswith(".webp"):
            image.save(path, lossless=True)
        else:
            image.save(path)
    return root


class CountingLoader:
    """In-memory loader recording every fetch; ``fail`` paths raise OSError."""

    def __init__(
        self,
        sizes: Optional[Dict[AssetKind, Tuple[int, int]]] = None,
        fail: Tuple[str, ...] = (),
        fail_times: int = -1,
    ):
        self.sizes = {**NATIVE_SIZES, **(sizes or {})}
        self.fail = fail
        self.fail_times = fail_times
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def __call__(self, path: str) -> Image.Image:
        with self._lock:
            self.calls.append(path)
            attempts = self.calls.count(path)
        if any(path.endswith(f) for f in self.fail):
            if self.fail_times < 0 or attempts <= self.fail_times:
                raise FileNotFoundError(path)
        kind = next(k for k, rel in DEFAULT_ASSET_PATHS.items() if path.endswith(rel))
        return Image.new("RGBA", self.sizes[kind], SPRITE_COLORS[kind])


def loaded_store(loader: Optional[CountingLoader] = None) -> AssetStore:
    store = AssetStore(asset_root="mem", loader=loader or CountingLoader())
    asyncio.run(store.load())
    return store


@dataclass
class DrawCall:
    image: Image.Image
    x: float
    y: float
    width: float
    height: float
    alpha: float


@dataclass
class RecordingContext:
    global_alpha: float = 1.0
    scales: List[Tuple[float, float]] = field(default_factory=list)
    clears: List[Tuple[float, float, float, float]] = field(default_factory=list)
    draws: List[DrawCall] = field(default_factory=list)

    def scale(self, sx: float, sy: float) -> None:
        self.scales.append((sx, sy))

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        self.clears.append((x, y, width, height))

    def draw_image(
        self, image: Image.Image, x: float, y: float, width: float, height: float
    ) -> None:
        self.draws.append(DrawCall(image, x, y, width, height, self.global_alpha))


class RecordingSurface:
    style_width: float = 0.0
    style_height: float = 0.0

    def __init__(self, has_context: bool = True):
        self.context: Optional[RecordingContext] = (
            RecordingContext() if has_context else None
        )
        self.backing: Tuple[int, int] = (300, 150)

    @property
    def width(self) -> int:
        return self.backing[0]

    @property
    def height(self) -> int:
        return self.backing[1]

    def set_backing_size(self, width: int, height: int) -> None:
        self.backing = (width, height)

    def set_layout_size(self, width: float, height: float) -> None:
        self.style_width = width
        self.style_height = height

    def get_context(self) -> Optional[RecordingContext]:
        return self.context
