# celestial_generator/preview.py

"""
================================================================================
BODY PREVIEW RASTERISER
================================================================================
Renders one body as seen head-on, as a (height, width, 3) uint8 RGB array.
Every pixel inside the disk is mapped back to an object-local surface point
and shaded through `surface.shade_surface`. Pixels outside the disk get the
background colour.

This is a consumer of the surface classification, not a lighting model: no
light sources, no reflectance term.
================================================================================
"""
import numpy as np

from . import config as DEFAULTS
from . import surface


def get_view_grid(resolution: int):
    """
    Pixel-centre coordinates in [-1, 1] for a square image.
    Returns (u, v, disk_mask); v grows upwards.
    """
    coords = (np.arange(resolution, dtype=np.float64) + 0.5) / resolution * 2.0 - 1.0
    u, v = np.meshgrid(coords, -coords)
    disk_mask = (u * u + v * v) <= 1.0
    return u, v, disk_mask


def view_normals_to_local(normals: np.ndarray, rotation: float) -> np.ndarray:
    """Undoes the body's spin about its y axis."""
    c, s = np.cos(rotation), np.sin(rotation)
    nx, ny, nz = normals[..., 0], normals[..., 1], normals[..., 2]
    return np.stack([c * nx + s * nz, ny, -s * nx + c * nz], axis=-1)


def render_body_preview(noise_field, properties, resolution: int = DEFAULTS.PREVIEW_RESOLUTION,
                        time: float = 0.0, rotation: float = 0.0,
                        sample_radius: float = DEFAULTS.SURFACE_SAMPLE_RADIUS,
                        background=DEFAULTS.PREVIEW_BACKGROUND_COLOR) -> np.ndarray:
    """Returns the shaded preview of one body as a uint8 RGB array."""
    u, v, disk_mask = get_view_grid(resolution)

    u_disk = u[disk_mask]
    v_disk = v[disk_mask]
    normals = np.stack([u_disk, v_disk, np.sqrt(np.clip(1.0 - u_disk ** 2 - v_disk ** 2, 0.0, None))], axis=-1)
    points = view_normals_to_local(normals, rotation) * sample_radius

    colors = surface.shade_surface(noise_field, properties, points, normals, view_dir=(0.0, 0.0, 1.0), time=time)

    image = np.empty((resolution, resolution, 3), dtype=np.uint8)
    image[:] = np.asarray(background, dtype=np.uint8)
    image[disk_mask] = np.round(colors * 255).astype(np.uint8)
    return image
