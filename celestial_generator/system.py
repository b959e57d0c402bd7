# celestial_generator/system.py

"""
================================================================================
STAR SYSTEM LAYOUT
================================================================================
This module places planets and moons in space, assigns each body its seed and
generates its properties, and scatters the background star field.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): Overrides for the layout constants in `config.py`.
    - logger: A configured Python logging object for runtime messages.
    - property_generator (BodyPropertyGenerator): Shared by every body.
    - rng (np.random.Generator, optional): Layout randomness. If None, one
      is created from config['system_seed'].
- Outputs:
    - StarSystem holding CelestialBody records, planets first, each planet's
      moons directly after it.
- Side Effects: Logs messages using the provided logger.
- Invariants: Moon seeds are the parent seed plus a fixed step per moon, so
  a moon's look follows from its planet's seed.
================================================================================
"""
import logging
from dataclasses import dataclass, field

import numpy as np

from . import config as DEFAULTS
from .properties import BodyProperties, BodyPropertyGenerator


@dataclass(frozen=True)
class CelestialBody:
    name: str
    kind: str  # "planet" or "moon"
    seed: float
    position: tuple
    radius: float
    properties: BodyProperties
    parent: str = None

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'kind': self.kind,
            'seed': self.seed,
            'position': list(self.position),
            'radius': self.radius,
            'parent': self.parent,
            'properties': self.properties.to_uniforms(),
        }


@dataclass
class StarSystem:
    bodies: list = field(default_factory=list)

    @property
    def planets(self) -> list:
        return [body for body in self.bodies if body.kind == "planet"]

    @property
    def moons(self) -> list:
        return [body for body in self.bodies if body.kind == "moon"]

    def moons_of(self, planet_name: str) -> list:
        return [body for body in self.bodies if body.parent == planet_name]


def generate_starfield(rng: np.random.Generator, count: int = DEFAULTS.STAR_COUNT,
                       radius: float = DEFAULTS.STAR_FIELD_RADIUS):
    """
    Scatters stars uniformly through a ball.

    Returns:
        tuple: (positions (count, 3), colors (count, 4) RGBA in [0, 1]).
    """
    theta = rng.uniform(0.0, 2.0 * np.pi, count)
    phi = np.arccos(2.0 * rng.uniform(0.0, 1.0, count) - 1.0)
    # Cube root of a uniform variate gives uniform density by volume.
    r = np.cbrt(rng.uniform(0.0, 1.0, count)) * radius

    positions = np.column_stack((
        r * np.sin(phi) * np.cos(theta),
        r * np.sin(phi) * np.sin(theta),
        r * np.cos(phi),
    ))

    brightness = DEFAULTS.MIN_STAR_BRIGHTNESS + rng.uniform(0.0, 1.0, count) * (1.0 - DEFAULTS.MIN_STAR_BRIGHTNESS)
    blue = np.minimum(brightness + rng.uniform(0.0, 1.0, count) * DEFAULTS.STAR_BLUE_SHIFT, 1.0)
    alpha = DEFAULTS.MIN_STAR_ALPHA + rng.uniform(0.0, 1.0, count) * (1.0 - DEFAULTS.MIN_STAR_ALPHA)
    colors = np.column_stack((brightness, brightness, blue, alpha))
    return positions, colors


class StarSystemGenerator:
    """Lays out the planets and moons of one scene."""

    def __init__(self, config: dict, logger: logging.Logger, property_generator: BodyPropertyGenerator,
                 rng: np.random.Generator = None):
        self.logger = logger
        self.user_config = config or {}
        self.property_generator = property_generator

        # --- Consolidate Configuration ---
        self.settings = {
            'system_seed': self.user_config.get('system_seed', DEFAULTS.DEFAULT_SYSTEM_SEED),
            'num_planets': self.user_config.get('num_planets', DEFAULTS.NUM_PLANETS),
            'planet_radius': self.user_config.get('planet_radius', DEFAULTS.PLANET_RADIUS),
            'min_planet_distance': self.user_config.get('min_planet_distance', DEFAULTS.MIN_PLANET_DISTANCE),
            'max_planet_distance': self.user_config.get('max_planet_distance', DEFAULTS.MAX_PLANET_DISTANCE),
            'planet_z_spread': self.user_config.get('planet_z_spread', DEFAULTS.PLANET_Z_SPREAD),
            'max_planet_seed': self.user_config.get('max_planet_seed', DEFAULTS.MAX_PLANET_SEED),
            'moons_every_nth_planet': self.user_config.get('moons_every_nth_planet', DEFAULTS.MOONS_EVERY_NTH_PLANET),
            'min_moons': self.user_config.get('min_moons', DEFAULTS.MIN_MOONS),
            'max_moons': self.user_config.get('max_moons', DEFAULTS.MAX_MOONS),
            'moon_radius_factor': self.user_config.get('moon_radius_factor', DEFAULTS.MOON_RADIUS_FACTOR),
            'moon_orbit_radius_factor': self.user_config.get('moon_orbit_radius_factor', DEFAULTS.MOON_ORBIT_RADIUS_FACTOR),
            'moon_orbit_jitter': self.user_config.get('moon_orbit_jitter', DEFAULTS.MOON_ORBIT_JITTER),
            'moon_seed_step': self.user_config.get('moon_seed_step', DEFAULTS.MOON_SEED_STEP),
        }

        if rng is None:
            rng = np.random.default_rng(self.settings['system_seed'])
        self.rng = rng

        self.logger.info(f"StarSystemGenerator initialized for {self.settings['num_planets']} planets.")

    def _planet_position(self) -> tuple:
        angle = self.rng.uniform(0.0, 2.0 * np.pi)
        distance = self.rng.uniform(self.settings['min_planet_distance'], self.settings['max_planet_distance'])
        z = (self.rng.uniform(0.0, 1.0) - 0.5) * self.settings['planet_z_spread']
        return (float(np.cos(angle) * distance), float(np.sin(angle) * distance), float(z))

    def _moons_for(self, planet: CelestialBody) -> list:
        moons = []
        num_moons = int(self.rng.integers(self.settings['min_moons'], self.settings['max_moons'] + 1))
        planet_radius = self.settings['planet_radius']
        for j in range(num_moons):
            orbit = planet_radius * self.settings['moon_orbit_radius_factor'] + self.rng.uniform(0.0, self.settings['moon_orbit_jitter'])
            angle = self.rng.uniform(0.0, 2.0 * np.pi)
            px, py, pz = planet.position
            position = (float(px + np.cos(angle) * orbit), float(py + np.sin(angle) * orbit), float(pz))

            seed = planet.seed + j * self.settings['moon_seed_step']
            moons.append(CelestialBody(
                name=f"{planet.name}-moon{j}",
                kind="moon",
                seed=seed,
                position=position,
                radius=planet_radius * self.settings['moon_radius_factor'],
                properties=self.property_generator.generate(seed),
                parent=planet.name,
            ))
        return moons

    def generate(self) -> StarSystem:
        """Creates every planet and its moons."""
        system = StarSystem()
        for i in range(self.settings['num_planets']):
            seed = float(self.rng.uniform(0.0, self.settings['max_planet_seed']))
            planet = CelestialBody(
                name=f"planet{i}",
                kind="planet",
                seed=seed,
                position=self._planet_position(),
                radius=self.settings['planet_radius'],
                properties=self.property_generator.generate(seed),
            )
            system.bodies.append(planet)

            if i % self.settings['moons_every_nth_planet'] == 0:
                moons = self._moons_for(planet)
                system.bodies.extend(moons)
                self.logger.debug(f"{planet.name} (seed {seed:.3f}) received {len(moons)} moons.")

        self.logger.info(f"Generated system with {len(system.planets)} planets and {len(system.moons)} moons.")
        return system
