"""Sprite asset store.

An :class:`AssetStore` fetches the six renderer images in parallel exactly
once and publishes them together. Until publication every getter returns
``None``; afterwards every getter returns an image. A resource that cannot be
fetched (missing file, undecodable data, timeout) is retried according to the
store's policy and finally replaced by a checkerboard texture, so a failed
asset is visible on screen instead of silently absent. The per-resource
outcome is kept as an :class:`AssetResult`.

Loading runs on the caller's asyncio loop; blocking decode work is pushed to
a thread pool owned by the load. The pool is shut down without joining once
the load settles, so a stalled fetch holds the caller no longer than
``load_timeout``. Concurrent callers of :meth:`AssetStore.load` share one
in-flight task. Any exception raised by a fetch marks that resource failed;
it never escapes :meth:`AssetStore.load`.
"""

import asyncio
import logging
import os
from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from enum import StrEnum, auto
from typing import Callable, List, Mapping, Optional

from PIL import Image
from pyrsistent import PMap, pmap

from survival_canvas.config import DEFAULT_ASSET_ROOT, RenderConfig
from survival_canvas.types import AssetKind
from survival_canvas.utils.image import missing_texture

logger = logging.getLogger(__name__)

ImageLoader = Callable[[str], Image.Image]

DEFAULT_ASSET_PATHS: PMap[AssetKind, str] = pmap(
    {
        AssetKind.BACKGROUND: "map.webp",
        AssetKind.BOX: "entities/block.png",
        AssetKind.PLAYER: "entities/player_alive_1.png",
        AssetKind.ROCK: "entities/rocks.png",
        AssetKind.ZOMBIE: "entities/zombie_alive_1.png",
        AssetKind.ZOMBIE_HIT: "entities/zombie_alive_2.png",
    }
)


class ResourceStatus(StrEnum):
    """Outcome of fetching a single resource."""

    PENDING = auto()
    LOADED = auto()
    FAILED = auto()


class StoreStatus(StrEnum):
    """Aggregate state of the whole store."""

    IDLE = auto()
    LOADING = auto()
    READY = auto()
    DEGRADED = auto()


@dataclass(frozen=True)
class AssetResult:
    """Per-resource load outcome.

    Attributes:
        kind: Which resource.
        status: Pending until the store publishes, then loaded or failed.
        image: Decoded RGBA image, or the fallback texture on failure.
        error: Last error message for a failed resource.
    """

    kind: AssetKind
    status: ResourceStatus
    image: Optional[Image.Image] = None
    error: Optional[str] = None


def load_image(path: str) -> Image.Image:
    """Open and fully decode an image file as RGBA."""
    with Image.open(path) as img:
        return img.convert("RGBA")


class AssetStore:
    loading: bool
    loaded: bool
    asset_root: str
    load_timeout: Optional[float]
    load_retries: int

    def __init__(
        self,
        asset_root: str = DEFAULT_ASSET_ROOT,
        paths: Optional[Mapping[AssetKind, str]] = None,
        loader: Optional[ImageLoader] = None,
        load_timeout: Optional[float] = None,
        load_retries: int = 0,
    ):
        merged = DEFAULT_ASSET_PATHS.update(pmap(paths or {}))
        self.loading = False
        self.loaded = False
        self.asset_root = asset_root
        self.load_timeout = load_timeout
        self.load_retries = load_retries
        self._paths: PMap[AssetKind, str] = merged
        self._loader: ImageLoader = loader or load_image
        self._images: PMap[AssetKind, Image.Image] = pmap()
        self._results: PMap[AssetKind, AssetResult] = pmap(
            {kind: AssetResult(kind, ResourceStatus.PENDING) for kind in AssetKind}
        )
        self._task: Optional["asyncio.Future[None]"] = None

    @classmethod
    def from_config(
        cls, config: RenderConfig, loader: Optional[ImageLoader] = None
    ) -> "AssetStore":
        return cls(
            asset_root=config.asset_root,
            loader=loader,
            load_timeout=config.load_timeout,
            load_retries=config.load_retries,
        )

    def path(self, kind: AssetKind) -> str:
        return os.path.join(self.asset_root, self._paths[kind])

    async def load(self) -> None:
        """Fetch all resources once; later and concurrent calls await the same load."""
        if self.loaded:
            return
        if self._task is None:
            # No await between the check and the assignment.
            self.loading = True
            self._task = asyncio.ensure_future(self._load_all())
        await asyncio.shield(self._task)

    def load_in_background(self) -> "asyncio.Task[None]":
        """Schedule :meth:`load` on the running loop without waiting for it."""
        return asyncio.get_running_loop().create_task(self.load())

    async def _load_all(self) -> None:
        logger.info("Loading %d assets from %s", len(AssetKind), self.asset_root)
        # Timed-out workers keep their thread; size for one per attempt.
        executor = ThreadPoolExecutor(
            max_workers=len(AssetKind) * (self.load_retries + 1),
            thread_name_prefix="asset-load",
        )
        try:
            results: List[AssetResult] = await asyncio.gather(
                *(self._load_one(kind, executor) for kind in AssetKind)
            )
        except Exception as exc:
            logger.error("Asset load aborted: %s", exc)
            self._task = None
            self.loading = False
            raise
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        images = pmap({result.kind: result.image for result in results})
        self._results = pmap({result.kind: result for result in results})
        self._images = images
        self.loaded = True

        failed = [r.kind for r in results if r.status == ResourceStatus.FAILED]
        if failed:
            logger.warning(
                "Assets loaded with %d fallback texture(s): %s",
                len(failed),
                ", ".join(failed),
            )
        else:
            logger.info("All %d assets loaded", len(results))

    async def _load_one(self, kind: AssetKind, executor: Executor) -> AssetResult:
        loop = asyncio.get_running_loop()
        path = self.path(kind)
        attempts = self.load_retries + 1
        error = "not attempted"
        for attempt in range(1, attempts + 1):
            try:
                image = await asyncio.wait_for(
                    loop.run_in_executor(executor, self._loader, path),
                    self.load_timeout,
                )
            except asyncio.TimeoutError:
                error = f"timed out after {self.load_timeout}s"
            except Exception as exc:
                error = str(exc) or type(exc).__name__
            else:
                logger.debug("Loaded %s from %s", kind, path)
                return AssetResult(kind, ResourceStatus.LOADED, image)
            logger.warning(
                "Failed to load %s from %s (attempt %d/%d): %s",
                kind,
                path,
                attempt,
                attempts,
                error,
            )
        return AssetResult(kind, ResourceStatus.FAILED, missing_texture(), error)

    def is_loaded(self) -> bool:
        return self.loaded

    @property
    def status(self) -> StoreStatus:
        if self.loaded:
            if any(r.status == ResourceStatus.FAILED for r in self._results.values()):
                return StoreStatus.DEGRADED
            return StoreStatus.READY
        if self.loading:
            return StoreStatus.LOADING
        return StoreStatus.IDLE

    def result(self, kind: AssetKind) -> AssetResult:
        return self._results[kind]

    def image(self, kind: AssetKind) -> Optional[Image.Image]:
        """Return the handle for ``kind``, or ``None`` until the store has loaded."""
        if not self.loaded:
            return None
        return self._images.get(kind)

    @property
    def background(self) -> Optional[Image.Image]:
        return self.image(AssetKind.BACKGROUND)

    @property
    def box(self) -> Optional[Image.Image]:
        return self.image(AssetKind.BOX)

    @property
    def player(self) -> Optional[Image.Image]:
        return self.image(AssetKind.PLAYER)

    @property
    def rock(self) -> Optional[Image.Image]:
        return self.image(AssetKind.ROCK)

    @property
    def zombie(self) -> Optional[Image.Image]:
        return self.image(AssetKind.ZOMBIE)

    @property
    def zombie_hit(self) -> Optional[Image.Image]:
        return self.image(AssetKind.ZOMBIE_HIT)
