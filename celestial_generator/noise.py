# celestial_generator/noise.py

"""
================================================================================
NOISE GENERATION UTILITIES
================================================================================
This module provides 3D simplex noise and the fractal octave sum built on top
of it. It is designed to be a pure, stateless utility: every function takes
the permutation table as its first argument and never mutates it.

The octave sum (`fractal_noise_3d`) is the single source of truth for the
terrain field. Property generation samples it at a handful of points; surface
classification samples it densely through `fractal_noise_3d_array`, which
calls the very same compiled kernel per element, so both paths agree
bit-for-bit.

Data Contract:
---------------
- Inputs:
    - p: A 512-entry permutation table (int64 array, a shuffled 0..255
      permutation stored twice).
    - x, y, z, seed: Floats (or 1D float64 arrays for the array variant).
    - octaves, persistence, lacunarity, base_frequency: Octave parameters.
- Outputs:
    - simplex_noise_3d: a float in [-1, 1].
    - fractal_noise_3d: a float in [0, 1].
- Side Effects: None.
- Invariants: Non-finite inputs never raise; they yield a non-finite or
  arbitrary in-range value.
================================================================================
"""

import numpy as np
from numba import njit

# The 12 edge-midpoint gradients of a cube.
_GRADIENT_VECTORS = np.array([
    [1.0, 1.0, 0.0], [-1.0, 1.0, 0.0], [1.0, -1.0, 0.0], [-1.0, -1.0, 0.0],
    [1.0, 0.0, 1.0], [-1.0, 0.0, 1.0], [1.0, 0.0, -1.0], [-1.0, 0.0, -1.0],
    [0.0, 1.0, 1.0], [0.0, -1.0, 1.0], [0.0, 1.0, -1.0], [0.0, -1.0, -1.0],
])

# Skew/unskew factors between the cubic grid and the simplex grid.
_F3 = 1.0 / 3.0
_G3 = 1.0 / 6.0

# Radial falloff and output scale. 32 maps the corner sum onto ~[-1, 1].
_FALLOFF_RADIUS_SQ = 0.6
_OUTPUT_SCALE = 32.0


def make_permutation_table(rng: np.random.Generator, size: int = 256) -> np.ndarray:
    """Shuffles 0..size-1 with the given generator and stores it twice."""
    p = np.arange(size, dtype=np.int64)
    rng.shuffle(p)
    return np.stack([p, p]).flatten()


@njit
def _corner_contribution(gi, x, y, z):
    """Contribution of one simplex corner with gradient index gi."""
    t = _FALLOFF_RADIUS_SQ - x * x - y * y - z * z
    if t < 0.0:
        return 0.0
    g = _GRADIENT_VECTORS[gi]
    t *= t
    return t * t * (g[0] * x + g[1] * y + g[2] * z)


@njit
def simplex_noise_3d(p, x, y, z):
    """
    Evaluates 3D simplex noise at one point.
    The result is clamped to the native [-1, 1] range.
    """
    # Skew the input space to find which simplex cell we are in.
    s = (x + y + z) * _F3
    i = int(np.floor(x + s))
    j = int(np.floor(y + s))
    k = int(np.floor(z + s))

    t = (i + j + k) * _G3
    x0 = x - (i - t)
    y0 = y - (j - t)
    z0 = z - (k - t)

    # Offsets of the second and third corners, by rank order of x0, y0, z0.
    if x0 >= y0:
        if y0 >= z0:
            i1, j1, k1, i2, j2, k2 = 1, 0, 0, 1, 1, 0
        elif x0 >= z0:
            i1, j1, k1, i2, j2, k2 = 1, 0, 0, 1, 0, 1
        else:
            i1, j1, k1, i2, j2, k2 = 0, 0, 1, 1, 0, 1
    else:
        if y0 < z0:
            i1, j1, k1, i2, j2, k2 = 0, 0, 1, 0, 1, 1
        elif x0 < z0:
            i1, j1, k1, i2, j2, k2 = 0, 1, 0, 0, 1, 1
        else:
            i1, j1, k1, i2, j2, k2 = 0, 1, 0, 1, 1, 0

    x1 = x0 - i1 + _G3
    y1 = y0 - j1 + _G3
    z1 = z0 - k1 + _G3
    x2 = x0 - i2 + 2.0 * _G3
    y2 = y0 - j2 + 2.0 * _G3
    z2 = z0 - k2 + 2.0 * _G3
    x3 = x0 - 1.0 + 3.0 * _G3
    y3 = y0 - 1.0 + 3.0 * _G3
    z3 = z0 - 1.0 + 3.0 * _G3

    # Wrap cell coordinates into the table. Masking keeps indices valid even
    # when the float-to-int conversion above produced garbage.
    ii = i & 255
    jj = j & 255
    kk = k & 255

    gi0 = p[ii + p[jj + p[kk]]] % 12
    gi1 = p[ii + i1 + p[jj + j1 + p[kk + k1]]] % 12
    gi2 = p[ii + i2 + p[jj + j2 + p[kk + k2]]] % 12
    gi3 = p[ii + 1 + p[jj + 1 + p[kk + 1]]] % 12

    n = (
        _corner_contribution(gi0, x0, y0, z0)
        + _corner_contribution(gi1, x1, y1, z1)
        + _corner_contribution(gi2, x2, y2, z2)
        + _corner_contribution(gi3, x3, y3, z3)
    )
    value = _OUTPUT_SCALE * n

    # Comparisons are False for NaN, so it passes through untouched.
    if value > 1.0:
        value = 1.0
    elif value < -1.0:
        value = -1.0
    return value


@njit
def fractal_noise_3d(p, x, y, z, seed, octaves=4, persistence=0.5, lacunarity=2.0, base_frequency=0.1):
    """
    Sums `octaves` layers of simplex noise and remaps the result to [0, 1].

    Every octave samples at (coord * base_frequency + seed) * frequency.
    The sum is divided by the total amplitude, so the remapped value stays
    in [0, 1] for any octave count >= 1 and positive persistence.
    """
    scaled_x = x * base_frequency + seed
    scaled_y = y * base_frequency + seed
    scaled_z = z * base_frequency + seed

    total = 0.0
    frequency = 1.0
    amplitude = 1.0
    max_amplitude = 0.0

    for _ in range(octaves):
        total += simplex_noise_3d(
            p, scaled_x * frequency, scaled_y * frequency, scaled_z * frequency
        ) * amplitude
        max_amplitude += amplitude
        amplitude *= persistence
        frequency *= lacunarity

    return (total / max_amplitude + 1.0) / 2.0


@njit
def fractal_noise_3d_array(p, xs, ys, zs, seed, octaves=4, persistence=0.5, lacunarity=2.0, base_frequency=0.1):
    """
    Dense variant of `fractal_noise_3d` over flat coordinate arrays.
    Each element is computed by the scalar kernel itself.
    """
    count = xs.shape[0]
    out = np.empty(count)
    for n in range(count):
        out[n] = fractal_noise_3d(
            p, xs[n], ys[n], zs[n], seed,
            octaves, persistence, lacunarity, base_frequency
        )
    return out
