# celestial_generator/surface.py

"""
================================================================================
SURFACE CLASSIFICATION & SHADING
================================================================================
This module re-evaluates a body's noise field over its surface to decide
land vs sea and to blend the body's colours. It samples the NoiseField through
`sample_grid`, which runs the same octave kernel that property generation
uses, so the land fraction picked at generation time and the rendered land
pattern come from one formula.

It is designed to be a pure, stateless utility with no rendering-toolkit
dependencies, allowing it to be used by the preview rasteriser, the bake
tool and the consistency probe alike.

Conventions:
---------------
- `points`: float array of shape (..., 3), object-local positions in noise
  field units (see `config.SURFACE_SAMPLE_RADIUS`).
- `time`: explicit animation time owned by the caller. It offsets the noise
  coordinates and drives the emission glow.
================================================================================
"""
import numpy as np

from . import config as DEFAULTS


def smoothstep(edge0, edge1, x):
    """Cubic Hermite step: 0 below edge0, 1 above edge1, t*t*(3-2t) between."""
    t = np.clip((np.asarray(x, dtype=np.float64) - edge0) / (edge1 - edge0), 0.0, 1.0)
    return t * t * (3.0 - 2.0 * t)


def lerp(a, b, t):
    "Linear interpolation."
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    return a + (b - a) * t


def fibonacci_sphere_points(count: int, radius: float = DEFAULTS.SURFACE_SAMPLE_RADIUS) -> np.ndarray:
    """
    Returns `count` near-uniformly spread points on a sphere, shape (count, 3).
    Equal-area spacing keeps coverage statistics unbiased towards the poles.
    """
    indices = np.arange(count, dtype=np.float64) + 0.5
    z = 1.0 - 2.0 * indices / count
    ring_radius = np.sqrt(1.0 - z * z)
    golden_angle = np.pi * (3.0 - np.sqrt(5.0))
    theta = golden_angle * indices
    unit = np.stack([ring_radius * np.cos(theta), ring_radius * np.sin(theta), z], axis=-1)
    return unit * radius


def sample_surface_noise(noise_field, properties, points: np.ndarray, time: float = 0.0) -> np.ndarray:
    """Noise value at each surface point, with coordinates shifted by `time`."""
    points = np.asarray(points, dtype=np.float64)
    return noise_field.sample_grid(
        points[..., 0] + time,
        points[..., 1] + time,
        points[..., 2] + time,
        properties.seed,
    )


def land_amount(properties, noise_values,
                half_width: float = DEFAULTS.LAND_TRANSITION_HALF_WIDTH) -> np.ndarray:
    """Soft land mask in [0, 1] from raw noise values."""
    return smoothstep(
        properties.land_fraction - half_width,
        properties.land_fraction + half_width,
        noise_values,
    )


def classify_surface(noise_field, properties, points: np.ndarray, time: float = 0.0) -> np.ndarray:
    """Land amount per surface point: 0 is open sea, 1 is solid land."""
    return land_amount(properties, sample_surface_noise(noise_field, properties, points, time))


def surface_color(noise_field, properties, points: np.ndarray, time: float = 0.0) -> np.ndarray:
    """Sea-to-land colour blend per point, shape (..., 3)."""
    amount = classify_surface(noise_field, properties, points, time)
    return lerp(properties.sea_color, properties.base_color, amount[..., np.newaxis])


def emission_glow(points: np.ndarray, time: float,
                  frequency: float = DEFAULTS.EMISSION_GLOW_SPATIAL_FREQUENCY) -> np.ndarray:
    """Travelling glow wave in [0, 1] along the body's local x axis."""
    points = np.asarray(points, dtype=np.float64)
    return np.sin(time + points[..., 0] * frequency) * 0.5 + 0.5


def atmosphere_glow(normals: np.ndarray, view_dir=(0.0, 0.0, 1.0),
                    start: float = DEFAULTS.ATMOSPHERE_GLOW_START,
                    end: float = DEFAULTS.ATMOSPHERE_GLOW_END) -> np.ndarray:
    """Rim factor in [0, 1]; strongest where the surface turns away from the viewer."""
    facing = np.einsum('...i,i->...', np.asarray(normals, dtype=np.float64), np.asarray(view_dir, dtype=np.float64))
    return smoothstep(start, end, 1.0 - facing)


def shade_surface(noise_field, properties, points: np.ndarray, normals: np.ndarray,
                  view_dir=(0.0, 0.0, 1.0), time: float = 0.0) -> np.ndarray:
    """
    Final colour per surface point, shape (..., 3), clipped to [0, 1].

    Applies, in order: the sea/land blend, an emission glow added to all
    channels, and a blend towards the atmosphere colour at the rim.
    """
    color = surface_color(noise_field, properties, points, time)
    color = color + (properties.emission * emission_glow(points, time))[..., np.newaxis]

    rim = properties.atmosphere_thickness * atmosphere_glow(normals, view_dir)
    color = lerp(color, properties.atmosphere_color, rim[..., np.newaxis])
    return np.clip(color, 0.0, 1.0)


def land_coverage(noise_field, properties, points: np.ndarray, time: float = 0.0) -> dict:
    """
    Summarises how much of a surface is land.

    Returns:
        dict: 'soft' is the mean land amount, 'hard' the share of points whose
            noise value is at or above the land fraction.
    """
    noise_values = sample_surface_noise(noise_field, properties, points, time)
    return {
        'soft': float(np.mean(land_amount(properties, noise_values))),
        'hard': float(np.mean(noise_values >= properties.land_fraction)),
    }
