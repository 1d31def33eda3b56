"""Drawing surface abstraction.

The compositor talks to a small canvas-like API: a surface with a backing
resolution and a laid-out size that hands out a 2D context, and a context that
can scale, clear and draw images with a global alpha. Coordinates passed to the
context are logical pixels; the context's scale maps them to backing pixels.

:class:`ImageSurface` implements the API on top of a Pillow RGBA image. Like a
browser canvas, resizing its backing store discards the pixels and resets the
context's transform and alpha.
"""

from typing import Optional, Protocol, Tuple

from PIL import Image

from survival_canvas.utils.image import apply_opacity

DEFAULT_SURFACE_SIZE: Tuple[int, int] = (300, 150)
TRANSPARENT: Tuple[int, int, int, int] = (0, 0, 0, 0)

Box = Tuple[int, int, int, int]


class DrawingContext(Protocol):
    global_alpha: float

    def scale(self, sx: float, sy: float) -> None: ...

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None: ...

    def draw_image(
        self, image: Image.Image, x: float, y: float, width: float, height: float
    ) -> None: ...


class DrawingSurface(Protocol):
    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...

    style_width: float
    style_height: float

    def set_backing_size(self, width: int, height: int) -> None: ...

    def set_layout_size(self, width: float, height: float) -> None: ...

    def get_context(self) -> Optional[DrawingContext]: ...


class ImageContext:
    surface: "ImageSurface"
    global_alpha: float

    def __init__(self, surface: "ImageSurface"):
        self.surface = surface
        self.reset()

    def reset(self) -> None:
        self.global_alpha = 1.0
        self._sx = 1.0
        self._sy = 1.0

    @property
    def transform(self) -> Tuple[float, float]:
        return (self._sx, self._sy)

    def scale(self, sx: float, sy: float) -> None:
        self._sx *= sx
        self._sy *= sy

    def _device_box(self, x: float, y: float, width: float, height: float) -> Box:
        left = round(x * self._sx)
        top = round(y * self._sy)
        right = round((x + width) * self._sx)
        bottom = round((y + height) * self._sy)
        return left, top, right, bottom

    def clear_rect(self, x: float, y: float, width: float, height: float) -> None:
        left, top, right, bottom = self._device_box(x, y, width, height)
        canvas = self.surface.image
        box = (
            max(left, 0),
            max(top, 0),
            min(right, canvas.width),
            min(bottom, canvas.height),
        )
        if box[2] <= box[0] or box[3] <= box[1]:
            return
        canvas.paste(TRANSPARENT, box)

    def draw_image(
        self, image: Image.Image, x: float, y: float, width: float, height: float
    ) -> None:
        left, top, right, bottom = self._device_box(x, y, width, height)
        w, h = right - left, bottom - top
        canvas = self.surface.image
        if w <= 0 or h <= 0 or self.global_alpha <= 0:
            return
        if right <= 0 or bottom <= 0 or left >= canvas.width or top >= canvas.height:
            return

        if image.mode != "RGBA":
            image = image.convert("RGBA")
        sprite = apply_opacity(image.resize((w, h)), self.global_alpha)
        # alpha_composite rejects negative destinations; crop the source instead.
        source = (max(-left, 0), max(-top, 0))
        dest = (max(left, 0), max(top, 0))
        canvas.alpha_composite(sprite, dest, source)


class ImageSurface:
    image: Image.Image
    style_width: float
    style_height: float

    def __init__(
        self,
        width: int = DEFAULT_SURFACE_SIZE[0],
        height: int = DEFAULT_SURFACE_SIZE[1],
    ):
        self.image = Image.new("RGBA", (width, height), TRANSPARENT)
        self.style_width = float(width)
        self.style_height = float(height)
        self._context: Optional[ImageContext] = None

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def set_backing_size(self, width: int, height: int) -> None:
        size = (max(int(width), 0), max(int(height), 0))
        self.image = Image.new("RGBA", size, TRANSPARENT)
        if self._context is not None:
            self._context.reset()

    def set_layout_size(self, width: float, height: float) -> None:
        self.style_width = width
        self.style_height = height

    def get_context(self) -> Optional[ImageContext]:
        if self._context is None:
            self._context = ImageContext(self)
        return self._context

    def to_image(self) -> Image.Image:
        return self.image.copy()
