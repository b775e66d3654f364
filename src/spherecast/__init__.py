"""Ray-casting renderer for scenes made of colored spheres.

This package renders a still image of a sphere scene by casting jittered
camera rays, bouncing them diffusely off the spheres they hit, and averaging
the resulting colors per pixel. Rows of the image are rendered in parallel.

Subpackages:
    core: Vector algebra, colors, rays, the integrator and the renderer
    geometry: The sphere primitive and ray-sphere intersection
    camera: Camera configuration and viewport construction
    scene: Scene loading and closest-hit search
    output: Quantization and PNG export

Modules:
    config: Render configuration with defaults
    errors: Exception hierarchy
    cli: Command-line entry point
"""

__version__ = "0.1.0"
