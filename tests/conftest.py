import logging

import numpy as np
import pytest

from celestial_generator.field import NoiseField
from celestial_generator.noise import make_permutation_table
from celestial_generator.properties import BodyPropertyGenerator


@pytest.fixture
def logger():
    return logging.getLogger("tests")


@pytest.fixture
def permutation_table():
    return make_permutation_table(np.random.default_rng(2024))


@pytest.fixture
def noise_field(permutation_table, logger):
    return NoiseField(logger=logger, permutation_table=permutation_table)


@pytest.fixture
def property_generator(noise_field, logger):
    return BodyPropertyGenerator(logger=logger, noise_field=noise_field)
