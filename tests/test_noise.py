"""Tests for the simplex and fractal noise kernels."""
import math

import numpy as np
import pytest

from celestial_generator.noise import (
    fractal_noise_3d,
    fractal_noise_3d_array,
    make_permutation_table,
    simplex_noise_3d,
)


@pytest.fixture
def points():
    rng = np.random.default_rng(5)
    return rng.uniform(-300.0, 300.0, size=(2000, 3))


class TestPermutationTable:

    def test_shape_and_repeat(self):
        p = make_permutation_table(np.random.default_rng(1))
        assert p.shape == (512,)
        assert np.array_equal(p[:256], p[256:])
        assert np.array_equal(np.sort(p[:256]), np.arange(256))

    def test_same_generator_seed_same_table(self):
        a = make_permutation_table(np.random.default_rng(9))
        b = make_permutation_table(np.random.default_rng(9))
        assert np.array_equal(a, b)

    def test_different_generator_seed_different_table(self):
        a = make_permutation_table(np.random.default_rng(9))
        b = make_permutation_table(np.random.default_rng(10))
        assert not np.array_equal(a, b)


class TestSimplexNoise:

    def test_native_range(self, permutation_table, points):
        values = [simplex_noise_3d(permutation_table, x, y, z) for x, y, z in points]
        assert min(values) >= -1.0
        assert max(values) <= 1.0

    def test_not_constant(self, permutation_table, points):
        values = np.array([simplex_noise_3d(permutation_table, x, y, z) for x, y, z in points])
        assert values.std() > 0.05

    def test_continuity(self, permutation_table, points):
        for x, y, z in points[:200]:
            a = simplex_noise_3d(permutation_table, x, y, z)
            b = simplex_noise_3d(permutation_table, x + 1e-6, y, z)
            assert abs(a - b) < 1e-3

    def test_zero_at_lattice_origin(self, permutation_table):
        # Every corner contribution vanishes at a lattice point.
        assert simplex_noise_3d(permutation_table, 0.0, 0.0, 0.0) == 0.0


class TestFractalNoise:

    def test_range(self, permutation_table, points):
        for x, y, z in points:
            value = fractal_noise_3d(permutation_table, x, y, z, 3.5)
            assert 0.0 <= value <= 1.0

    def test_deterministic(self, permutation_table):
        a = fractal_noise_3d(permutation_table, 1.0, 2.0, 3.0, 4.0)
        b = fractal_noise_3d(permutation_table, 1.0, 2.0, 3.0, 4.0)
        assert a == b

    def test_matches_octave_formula(self, permutation_table):
        x, y, z, seed = 12.5, -3.25, 7.0, 42.0
        total = 0.0
        max_amplitude = 0.0
        for i in range(4):
            frequency = 2.0 ** i
            amplitude = 0.5 ** i
            total += simplex_noise_3d(
                permutation_table,
                (x * 0.1 + seed) * frequency,
                (y * 0.1 + seed) * frequency,
                (z * 0.1 + seed) * frequency,
            ) * amplitude
            max_amplitude += amplitude
        expected = (total / max_amplitude + 1.0) / 2.0
        assert fractal_noise_3d(permutation_table, x, y, z, seed) == pytest.approx(expected, abs=1e-12)

    def test_seed_shifts_sampling(self, permutation_table):
        a = fractal_noise_3d(permutation_table, 1.0, 2.0, 3.0, 4.0)
        b = fractal_noise_3d(permutation_table, 1.0, 2.0, 3.0, 5.0)
        assert a != b

    def test_array_matches_scalar_exactly(self, permutation_table, points):
        seed = 17.25
        dense = fractal_noise_3d_array(
            permutation_table,
            np.ascontiguousarray(points[:, 0]),
            np.ascontiguousarray(points[:, 1]),
            np.ascontiguousarray(points[:, 2]),
            seed, 4, 0.5, 2.0, 0.1,
        )
        scalar = np.array([
            fractal_noise_3d(permutation_table, x, y, z, seed, 4, 0.5, 2.0, 0.1) for x, y, z in points
        ])
        assert np.array_equal(dense, scalar)

    @pytest.mark.parametrize("bad", [math.nan, math.inf, -math.inf])
    def test_non_finite_input_does_not_raise(self, permutation_table, bad):
        fractal_noise_3d(permutation_table, bad, 0.0, 0.0, 0.0)
        fractal_noise_3d(permutation_table, 0.0, 0.0, 0.0, bad)

    def test_nan_propagates(self, permutation_table):
        assert math.isnan(fractal_noise_3d(permutation_table, math.nan, 1.0, 2.0, 3.0))
