from PIL import Image

from survival_canvas.renderer.surface import ImageSurface

RED = (255, 0, 0, 255)


def red(size: tuple[int, int]) -> Image.Image:
    return Image.new("RGBA", size, RED)


def test_default_size_and_context_is_stable() -> None:
    surface = ImageSurface()
    assert (surface.width, surface.height) == (300, 150)
    assert surface.get_context() is surface.get_context()


def test_resize_resets_context_state() -> None:
    surface = ImageSurface()
    ctx = surface.get_context()
    assert ctx is not None
    ctx.scale(2, 2)
    ctx.global_alpha = 0.3
    surface.set_backing_size(40, 20)
    assert (surface.width, surface.height) == (40, 20)
    assert ctx.transform == (1.0, 1.0)
    assert ctx.global_alpha == 1.0


def test_layout_size_is_independent_of_backing() -> None:
    surface = ImageSurface(10, 10)
    surface.set_backing_size(30, 30)
    surface.set_layout_size(10, 10)
    assert (surface.style_width, surface.style_height) == (10, 10)
    assert surface.to_image().size == (30, 30)


def test_draw_image_applies_scale() -> None:
    surface = ImageSurface(20, 20)
    ctx = surface.get_context()
    assert ctx is not None
    ctx.scale(2, 2)
    ctx.draw_image(red((1, 1)), 2, 3, 4, 5)
    image = surface.to_image()
    assert image.getbbox() == (4, 6, 12, 16)
    assert image.getpixel((4, 6)) == RED


def test_draw_image_clips_negative_origin() -> None:
    surface = ImageSurface(10, 10)
    ctx = surface.get_context()
    assert ctx is not None
    ctx.draw_image(red((4, 4)), -3, -2, 6, 6)
    assert surface.to_image().getbbox() == (0, 0, 3, 4)


def test_draw_image_off_canvas_is_ignored() -> None:
    surface = ImageSurface(10, 10)
    ctx = surface.get_context()
    assert ctx is not None
    ctx.draw_image(red((4, 4)), 12, 0, 4, 4)
    ctx.draw_image(red((4, 4)), -8, -8, 4, 4)
    ctx.draw_image(red((4, 4)), 1, 1, 0, 4)
    assert surface.to_image().getbbox() is None


def test_global_alpha_scales_sprite_alpha() -> None:
    surface = ImageSurface(4, 4)
    ctx = surface.get_context()
    assert ctx is not None
    ctx.global_alpha = 0.5
    ctx.draw_image(red((4, 4)), 0, 0, 4, 4)
    assert surface.to_image().getpixel((0, 0)) == (255, 0, 0, 128)

    ctx.global_alpha = 0.0
    ctx.clear_rect(0, 0, 4, 4)
    ctx.draw_image(red((4, 4)), 0, 0, 4, 4)
    assert surface.to_image().getbbox() is None


def test_clear_rect_only_clears_region() -> None:
    surface = ImageSurface(10, 10)
    ctx = surface.get_context()
    assert ctx is not None
    ctx.draw_image(red((1, 1)), 0, 0, 10, 10)
    ctx.clear_rect(-5, -5, 10, 10)
    image = surface.to_image()
    assert image.getpixel((0, 0))[3] == 0
    assert image.getpixel((4, 4))[3] == 0
    assert image.getpixel((5, 5)) == RED
