# celestial_generator/field.py

"""
================================================================================
NOISE FIELD
================================================================================
This module contains the NoiseField class: a bounded, coherent scalar field
over 3D space, shifted by a per-body seed.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Overrides for the octave parameters in `config.py`.
    - logger: A configured Python logging object for runtime messages.
    - permutation_table (np.ndarray, optional): An explicit table. Takes
      precedence over `rng`.
    - rng (np.random.Generator, optional): The randomness source used to
      shuffle a new table. If neither is given, a fresh generator is drawn
      from OS entropy (or from config['field_seed'] when set).
- Outputs (from methods):
    - Floats / NumPy arrays in [0, 1].
- Side Effects: Logs messages using the provided logger.
- Invariants: The permutation table is fixed at construction. For one
  instance, equal (x, y, z, seed) inputs always give equal outputs, whether
  sampled one at a time or as a grid.
================================================================================
"""

import logging

import numpy as np

from . import config as DEFAULTS
from . import noise


class NoiseField:
    """
    Fractal simplex noise field shared by property generation and surface
    classification. Safe to share between threads; nothing is mutated after
    construction.
    """
    def __init__(self, config: dict = None, logger: logging.Logger = None,
                 permutation_table: np.ndarray = None, rng: np.random.Generator = None):
        self.logger = logger or logging.getLogger(__name__)
        self.user_config = config or {}

        # --- Consolidate Configuration ---
        self.settings = {
            'octaves': int(self.user_config.get('octaves', DEFAULTS.NOISE_OCTAVES)),
            'persistence': float(self.user_config.get('persistence', DEFAULTS.NOISE_PERSISTENCE)),
            'lacunarity': float(self.user_config.get('lacunarity', DEFAULTS.NOISE_LACUNARITY)),
            'base_frequency': float(self.user_config.get('base_frequency', DEFAULTS.NOISE_BASE_FREQUENCY)),
            'field_seed': self.user_config.get('field_seed'),
        }

        if self.settings['octaves'] < 1:
            raise ValueError(f"octaves must be at least 1, got {self.settings['octaves']}")
        if not self.settings['base_frequency'] > 0:
            raise ValueError(f"base_frequency must be positive, got {self.settings['base_frequency']}")
        if not self.settings['persistence'] > 0:
            raise ValueError(f"persistence must be positive, got {self.settings['persistence']}")

        # --- Initialize Permutation Table ---
        if permutation_table is not None:
            self._p = self._validate_table(permutation_table)
            self.logger.debug("Initialized with injected permutation table.")
        else:
            if rng is None:
                rng = np.random.default_rng(self.settings['field_seed'])
                self.logger.debug(f"No randomness source provided, using default_rng({self.settings['field_seed']}).")
            self._p = noise.make_permutation_table(rng, DEFAULTS.PERMUTATION_SIZE)

        # Workers and probes rebuild an identical field from this.
        self.permutation_table = self._p
        self.permutation_table.setflags(write=False)

        self.logger.info(
            f"NoiseField initialized: {self.settings['octaves']} octaves, "
            f"persistence {self.settings['persistence']}, lacunarity {self.settings['lacunarity']}, "
            f"base frequency {self.settings['base_frequency']}"
        )

    @staticmethod
    def _validate_table(table) -> np.ndarray:
        """Accepts a 256-entry permutation or its 512-entry doubled form."""
        table = np.asarray(table)
        size = DEFAULTS.PERMUTATION_SIZE
        if table.ndim != 1 or table.shape[0] not in (size, 2 * size):
            raise ValueError(
                f"Permutation table must be 1D with {size} or {2 * size} entries, got shape {table.shape}"
            )
        if not np.issubdtype(table.dtype, np.integer):
            raise ValueError(f"Permutation table must be integer typed, got {table.dtype}")
        base = table[:size]
        if not np.array_equal(np.sort(base), np.arange(size)):
            raise ValueError(f"Permutation table must be a permutation of 0..{size - 1}")
        if table.shape[0] == size:
            table = np.stack([table, table]).flatten()
        elif not np.array_equal(table[size:], base):
            raise ValueError("A 512-entry permutation table must repeat its first half")
        return np.array(table, dtype=np.int64)

    def sample(self, x: float, y: float, z: float, seed: float) -> float:
        """Samples the field at one point. Returns a float in [0, 1]."""
        return noise.fractal_noise_3d(
            self._p, float(x), float(y), float(z), float(seed),
            self.settings['octaves'],
            self.settings['persistence'],
            self.settings['lacunarity'],
            self.settings['base_frequency'],
        )

    def sample_grid(self, x, y, z, seed: float) -> np.ndarray:
        """
        Samples the field at every point of equally shaped coordinate arrays.
        The result has the same shape as the inputs and matches `sample`
        element for element.
        """
        x, y, z = np.broadcast_arrays(
            np.asarray(x, dtype=np.float64),
            np.asarray(y, dtype=np.float64),
            np.asarray(z, dtype=np.float64),
        )
        shape = x.shape
        values = noise.fractal_noise_3d_array(
            self._p,
            np.ascontiguousarray(x).ravel(),
            np.ascontiguousarray(y).ravel(),
            np.ascontiguousarray(z).ravel(),
            float(seed),
            self.settings['octaves'],
            self.settings['persistence'],
            self.settings['lacunarity'],
            self.settings['base_frequency'],
        )
        return values.reshape(shape)
