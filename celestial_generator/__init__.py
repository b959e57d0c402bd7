# celestial_generator/__init__.py

# Public API of the celestial body generator.

from .field import NoiseField
from .properties import BodyProperties, BodyPropertyGenerator, Color3, validate_properties
from .system import CelestialBody, StarSystem, StarSystemGenerator, generate_starfield

__all__ = [
    "NoiseField",
    "BodyProperties",
    "BodyPropertyGenerator",
    "Color3",
    "validate_properties",
    "CelestialBody",
    "StarSystem",
    "StarSystemGenerator",
    "generate_starfield",
]
