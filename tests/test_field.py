"""Tests for NoiseField construction and sampling."""
import logging

import numpy as np
import pytest

from celestial_generator.field import NoiseField
from celestial_generator.noise import make_permutation_table


class TestConstruction:

    def test_injected_table_reproduces_field(self, permutation_table, logger):
        a = NoiseField(logger=logger, permutation_table=permutation_table)
        b = NoiseField(logger=logger, permutation_table=permutation_table.copy())
        assert a.sample(1.0, 2.0, 3.0, 4.0) == b.sample(1.0, 2.0, 3.0, 4.0)

    def test_rng_reproduces_field(self, logger):
        a = NoiseField(logger=logger, rng=np.random.default_rng(77))
        b = NoiseField(logger=logger, rng=np.random.default_rng(77))
        assert np.array_equal(a.permutation_table, b.permutation_table)

    def test_field_seed_config(self, logger):
        a = NoiseField(config={'field_seed': 5}, logger=logger)
        b = NoiseField(config={'field_seed': 5}, logger=logger)
        assert np.array_equal(a.permutation_table, b.permutation_table)

    def test_table_takes_precedence_over_rng(self, permutation_table, logger):
        field = NoiseField(logger=logger, permutation_table=permutation_table, rng=np.random.default_rng(1))
        assert np.array_equal(field.permutation_table, permutation_table)

    def test_half_table_is_doubled(self, permutation_table, logger):
        field = NoiseField(logger=logger, permutation_table=permutation_table[:256])
        assert np.array_equal(field.permutation_table, permutation_table)

    def test_table_is_read_only(self, noise_field):
        with pytest.raises(ValueError):
            noise_field.permutation_table[0] = 1

    def test_default_logger(self, permutation_table):
        field = NoiseField(permutation_table=permutation_table)
        assert isinstance(field.logger, logging.Logger)

    @pytest.mark.parametrize("table", [
        np.arange(100),
        np.zeros(256, dtype=int),
        np.arange(256, dtype=float),
        np.concatenate([np.arange(256), np.arange(256)[::-1]]),
        np.arange(512).reshape(2, 256),
    ])
    def test_invalid_table_rejected(self, table, logger):
        with pytest.raises(ValueError):
            NoiseField(logger=logger, permutation_table=table)

    @pytest.mark.parametrize("config", [
        {'octaves': 0},
        {'base_frequency': 0.0},
        {'base_frequency': -0.1},
        {'persistence': 0.0},
        {'persistence': -1.0, 'octaves': 2},
    ])
    def test_invalid_config_rejected(self, config, permutation_table, logger):
        with pytest.raises(ValueError):
            NoiseField(config=config, logger=logger, permutation_table=permutation_table)


class TestSampling:

    def test_deterministic(self, noise_field):
        assert noise_field.sample(1, 2, 3, 4) == noise_field.sample(1, 2, 3, 4)

    def test_int_and_float_inputs_agree(self, noise_field):
        assert noise_field.sample(1, 2, 3, 4) == noise_field.sample(1.0, 2.0, 3.0, 4.0)

    def test_range(self, noise_field):
        rng = np.random.default_rng(3)
        for x, y, z, seed in rng.uniform(-1e4, 1e4, size=(500, 4)):
            assert 0.0 <= noise_field.sample(x, y, z, seed) <= 1.0

    def test_different_tables_differ(self, logger):
        a = NoiseField(logger=logger, permutation_table=make_permutation_table(np.random.default_rng(1)))
        b = NoiseField(logger=logger, permutation_table=make_permutation_table(np.random.default_rng(2)))
        samples_a = [a.sample(x, 0.0, 0.0, 1.5) for x in range(20)]
        samples_b = [b.sample(x, 0.0, 0.0, 1.5) for x in range(20)]
        assert samples_a != samples_b

    def test_octave_settings_change_output(self, permutation_table, logger):
        four = NoiseField(logger=logger, permutation_table=permutation_table)
        one = NoiseField(config={'octaves': 1}, logger=logger, permutation_table=permutation_table)
        assert four.sample(3.3, 4.4, 5.5, 6.6) != one.sample(3.3, 4.4, 5.5, 6.6)

    def test_grid_preserves_shape(self, noise_field):
        x, y = np.meshgrid(np.linspace(0, 50, 7), np.linspace(-20, 20, 5))
        values = noise_field.sample_grid(x, y, 3.0, 12.0)
        assert values.shape == (5, 7)
        assert np.all((values >= 0.0) & (values <= 1.0))

    def test_grid_matches_scalar_exactly(self, noise_field):
        x, y = np.meshgrid(np.linspace(-40, 40, 9), np.linspace(10, 90, 11))
        z = x * 0.5 - y
        grid = noise_field.sample_grid(x, y, z, 123.0)
        for idx in np.ndindex(x.shape):
            assert grid[idx] == noise_field.sample(x[idx], y[idx], z[idx], 123.0)

    def test_grid_handles_non_contiguous_input(self, noise_field):
        base = np.linspace(0, 30, 40).reshape(8, 5)
        view = base.T
        values = noise_field.sample_grid(view, view, view, 1.0)
        assert values[2, 3] == noise_field.sample(view[2, 3], view[2, 3], view[2, 3], 1.0)
