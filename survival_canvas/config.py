"""Renderer configuration.

``RenderConfig`` is an immutable bundle of the tunables shared by the asset
store and the compositor. Derive variants with :func:`dataclasses.replace`::

    cfg = replace(DEFAULT_CONFIG, device_pixel_ratio=2.0)

The opacity constants are visual-parity values; keep them at 0.5 unless the
artwork changes.
"""

from dataclasses import dataclass
from typing import Optional


DEFAULT_ASSET_ROOT = "assets"


@dataclass(frozen=True)
class RenderConfig:
    """Tunables for asset loading and compositing.

    Attributes:
        device_pixel_ratio: Physical pixels per logical pixel of the display.
        background_opacity: Alpha applied to the backdrop image.
        hit_opacity: Alpha applied to a zombie in the ``hit`` health bucket.
        asset_root: Directory the default resource paths are relative to.
        load_timeout: Seconds allowed per resource fetch; ``None`` waits forever.
        load_retries: Extra attempts per resource after a failed fetch.
        autoload: Schedule asset loading when a compositor is constructed
            inside a running event loop.
    """

    device_pixel_ratio: float = 1.0
    background_opacity: float = 0.5
    hit_opacity: float = 0.5
    asset_root: str = DEFAULT_ASSET_ROOT
    load_timeout: Optional[float] = None
    load_retries: int = 0
    autoload: bool = False

    def __post_init__(self) -> None:
        if self.device_pixel_ratio <= 0:
            raise ValueError(
                f"device_pixel_ratio must be positive: {self.device_pixel_ratio}"
            )
        for name in ("background_opacity", "hit_opacity"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1]: {value}")
        if self.load_timeout is not None and self.load_timeout <= 0:
            raise ValueError(f"load_timeout must be positive: {self.load_timeout}")
        if self.load_retries < 0:
            raise ValueError(f"load_retries must be >= 0: {self.load_retries}")


DEFAULT_CONFIG = RenderConfig()
