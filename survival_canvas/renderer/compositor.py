import asyncio
import logging
from typing import Optional, Sequence

from survival_canvas.config import DEFAULT_CONFIG, RenderConfig
from survival_canvas.entity import Entity
from survival_canvas.renderer.assets import AssetStore
from survival_canvas.renderer.sprites import resolve_opacity, resolve_sprite
from survival_canvas.renderer.surface import DrawingContext, DrawingSurface
from survival_canvas.types import Offset, Position, Ratio, Rect

logger = logging.getLogger(__name__)


def cover_fit(
    canvas_width: float, canvas_height: float, image_width: float, image_height: float
) -> Rect:
    """
    Scale an image to cover the whole canvas while keeping its aspect ratio,
    centring it so the excess is cropped evenly on both sides.
    """
    canvas_ratio = canvas_width / canvas_height
    image_ratio = image_width / image_height

    if image_ratio > canvas_ratio:
        draw_width = canvas_height * image_ratio
        draw_height = canvas_height
        return Rect((canvas_width - draw_width) / 2, 0, draw_width, draw_height)

    draw_width = canvas_width
    draw_height = canvas_width / image_ratio
    return Rect(0, (canvas_height - draw_height) / 2, draw_width, draw_height)


def entity_rect(
    position: Position, ratio: Ratio, offset: Offset, cell_size: float
) -> Rect:
    """Centre a ``ratio``-sized sprite in its cell, then nudge it by ``offset``."""
    return Rect(
        x=position.x * cell_size + ((1 - ratio.width) / 2) * cell_size + offset.dx,
        y=position.y * cell_size + ((1 - ratio.height) / 2) * cell_size + offset.dy,
        width=cell_size * ratio.width,
        height=cell_size * ratio.height,
    )


def _log_load_failure(task: "asyncio.Task[None]") -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.error("Background asset load failed: %s", exc)


class Compositor:
    """Draws a background and an ordered entity snapshot onto a surface.

    Construction sizes the surface for the display's pixel density and never
    waits for assets; call :meth:`prepare` (or poll :attr:`is_ready`) to know
    when sprites will appear. Frames rendered earlier simply omit them.
    """

    assets: AssetStore
    cell_size: float
    config: RenderConfig
    h: float
    w: float

    def __init__(
        self,
        board_height: int,
        board_width: int,
        surface: DrawingSurface,
        cell_size: float,
        config: RenderConfig = DEFAULT_CONFIG,
        assets: Optional[AssetStore] = None,
    ):
        if board_height <= 0 or board_width <= 0:
            raise ValueError(f"Invalid board size: {board_width}x{board_height}")
        if cell_size <= 0:
            raise ValueError(f"Invalid cell size: {cell_size}")

        self.config = config
        self.assets = assets if assets is not None else AssetStore.from_config(config)
        self.cell_size = cell_size
        self.h = board_height * cell_size
        self.w = board_width * cell_size

        ctx = surface.get_context()
        if ctx is None:
            raise RuntimeError("Unable to get 2d context")

        dpr = config.device_pixel_ratio
        surface.set_backing_size(int(self.w * dpr), int(self.h * dpr))
        surface.set_layout_size(self.w, self.h)
        ctx.scale(dpr, dpr)

        self.surface = surface
        self.ctx: DrawingContext = ctx
        self._load_task: Optional["asyncio.Task[None]"] = None

        if config.autoload:
            self._schedule_load()

    def _schedule_load(self) -> None:
        try:
            task = self.assets.load_in_background()
        except RuntimeError:
            logger.debug("No running event loop; assets load on prepare()")
            return
        task.add_done_callback(_log_load_failure)
        self._load_task = task

    async def prepare(self) -> None:
        """Wait until every sprite is available."""
        await self.assets.load()

    @property
    def is_ready(self) -> bool:
        return self.assets.is_loaded()

    def render(self, entities: Sequence[Entity]) -> None:
        """Redraw the whole surface; ``entities`` are painted back to front."""
        self.ctx.clear_rect(0, 0, self.w, self.h)
        self.draw_background()

        drawn = 0
        for entity in entities:
            if self.draw_entity(entity):
                drawn += 1
        logger.debug(
            "Rendered %d/%d entities (assets %s)",
            drawn,
            len(entities),
            self.assets.status,
        )

    def draw_background(self) -> bool:
        bg = self.assets.background
        if bg is None:
            return False

        rect = cover_fit(self.w, self.h, bg.width, bg.height)
        self.ctx.global_alpha = self.config.background_opacity
        try:
            self.ctx.draw_image(bg, rect.x, rect.y, rect.width, rect.height)
        finally:
            self.ctx.global_alpha = 1.0
        return True

    def draw_entity(self, entity: Entity) -> bool:
        sprite = resolve_sprite(entity, self.assets)
        if sprite is None:
            return False

        rect = entity_rect(
            entity.get_position(), sprite.ratio, sprite.offset, self.cell_size
        )
        self.ctx.global_alpha = resolve_opacity(entity, self.config)
        try:
            self.ctx.draw_image(sprite.image, rect.x, rect.y, rect.width, rect.height)
        finally:
            self.ctx.global_alpha = 1.0
        return True
