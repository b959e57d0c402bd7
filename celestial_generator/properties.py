# celestial_generator/properties.py

"""
================================================================================
BODY PROPERTY GENERATION
================================================================================
This module maps one seed to the immutable record of visual parameters for a
planet or moon.

Data Contract:
---------------
- Inputs:
    - seed (float): Any finite value. Negative, zero and very large seeds are
      all valid.
- Outputs:
    - BodyProperties with every channel inside its documented range.
- Side Effects: Debug logging only. The NoiseField is read, never written.
- Invariants: The same field and seed always produce an equal record, and
  `generate(seed).seed == seed`.
================================================================================
"""

import logging
from dataclasses import dataclass
from typing import NamedTuple

from . import config as DEFAULTS
from .field import NoiseField


class Color3(NamedTuple):
    """An RGB colour with channels in [0, 1]."""
    r: float
    g: float
    b: float


@dataclass(frozen=True)
class BodyProperties:
    """Surface parameters of one celestial body. Created once, never updated."""
    base_color: Color3
    reflectance: float
    emission: float
    atmosphere_thickness: float
    atmosphere_color: Color3
    sea_color: Color3
    land_fraction: float
    seed: float

    def to_uniforms(self) -> dict:
        """Returns the record keyed by the names renderers bind to."""
        return {
            "baseColor": tuple(self.base_color),
            "reflectance": self.reflectance,
            "emission": self.emission,
            "atmosphereThickness": self.atmosphere_thickness,
            "atmosphereColor": tuple(self.atmosphere_color),
            "seaColor": tuple(self.sea_color),
            "landFraction": self.land_fraction,
            "seed": self.seed,
        }


def _in_range(value: float, upper: float) -> bool:
    # NaN fails both comparisons, so it is reported as out of range.
    return 0.0 <= value <= upper


def validate_properties(properties: BodyProperties) -> list:
    """
    Checks every channel against its range. Returns a list of violation
    messages; an empty list means the record is valid. Never raises.
    """
    violations = []
    for name in ("base_color", "atmosphere_color", "sea_color"):
        color = getattr(properties, name)
        for channel, value in zip("rgb", color):
            if not _in_range(value, 1.0):
                violations.append(f"{name}.{channel}={value} outside [0, 1]")
    for name, upper in DEFAULTS.PROPERTY_RANGE_SCALES.items():
        value = getattr(properties, name)
        if not _in_range(value, upper):
            violations.append(f"{name}={value} outside [0, {upper}]")
    return violations


class BodyPropertyGenerator:
    """
    Derives BodyProperties from a seed by sampling a NoiseField at fixed,
    well-separated offsets.
    """
    def __init__(self, config: dict = None, logger: logging.Logger = None, noise_field: NoiseField = None):
        """
        Args:
            config (dict, optional): Used only when no field is given; its
                'noise_field' section configures the field built here.
            logger (logging.Logger, optional): Logger for runtime messages.
            noise_field (NoiseField, optional): The shared field.
        """
        self.logger = logger or logging.getLogger(__name__)
        config = config or {}
        if noise_field is None:
            noise_field = NoiseField(config=config.get('noise_field', {}), logger=self.logger)
        self.noise_field = noise_field
        # Fixed. validate_properties checks against the same scales.
        self.channel_offsets = DEFAULTS.CHANNEL_OFFSETS
        self.range_scales = DEFAULTS.PROPERTY_RANGE_SCALES

    def _raw(self, seed: float, offset: tuple) -> float:
        off_x, off_y = offset
        return self.noise_field.sample(seed, off_x, off_y, seed)

    def _color(self, seed: float, channel: str) -> Color3:
        return Color3(*(self._raw(seed, offset) for offset in self.channel_offsets[channel]))

    def _scalar(self, seed: float, channel: str) -> float:
        return self._raw(seed, self.channel_offsets[channel]) * self.range_scales[channel]

    def generate(self, seed: float) -> BodyProperties:
        """Builds the full property record for one body."""
        properties = BodyProperties(
            base_color=self._color(seed, "base_color"),
            reflectance=self._scalar(seed, "reflectance"),
            emission=self._scalar(seed, "emission"),
            atmosphere_thickness=self._scalar(seed, "atmosphere_thickness"),
            atmosphere_color=self._color(seed, "atmosphere_color"),
            sea_color=self._color(seed, "sea_color"),
            land_fraction=self._scalar(seed, "land_fraction"),
            seed=seed,
        )
        self.logger.debug(f"Generated properties for seed {seed}: land fraction {properties.land_fraction:.3f}")
        return properties
