"""Rendering subpackage.

Turns an ordered snapshot of simulator entities into pixels on a
canvas-like drawing surface. The pipeline has three parts:

* :mod:`survival_canvas.renderer.assets` loads the six sprite images once and
  publishes them together.
* :mod:`survival_canvas.renderer.sprites` maps an entity's ``(type, health)``
  to an image, a pixel offset and a size ratio.
* :mod:`survival_canvas.renderer.compositor` sizes the surface for the
  display's pixel density and draws a cover-fit background plus every entity.

:mod:`survival_canvas.renderer.surface` provides the Pillow-backed surface.
"""
