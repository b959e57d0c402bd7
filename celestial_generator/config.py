# celestial_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the
celestial body generator. These values are used if they are not explicitly
provided by the user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC SCENE.
Instead, pass a configuration dictionary to the NoiseField or
StarSystemGenerator instance.
================================================================================
"""

# --- Noise Field ---
# Size of the base permutation. The stored table is this doubled so corner
# lookups never need a second wrap.
PERMUTATION_SIZE = 256
NOISE_OCTAVES = 4
NOISE_PERSISTENCE = 0.5   # Amplitude multiplier per octave
NOISE_LACUNARITY = 2.0    # Frequency multiplier per octave
NOISE_BASE_FREQUENCY = 0.1

# --- Body Property Channels ---
# Each channel samples the field at sample(seed, off_x, off_y, seed).
# Pairs are at least 10 units apart so octave-1 noise decorrelates.
CHANNEL_OFFSETS = {
    "base_color": ((10.0, 20.0), (30.0, 40.0), (50.0, 60.0)),
    "reflectance": (70.0, 80.0),
    "emission": (90.0, 100.0),
    "atmosphere_thickness": (110.0, 120.0),
    "atmosphere_color": ((130.0, 140.0), (150.0, 160.0), (170.0, 180.0)),
    "sea_color": ((190.0, 200.0), (210.0, 220.0), (230.0, 240.0)),
    "land_fraction": (250.0, 260.0),
}

# Upper bound of each scalar channel. Raw samples in [0, 1] are multiplied
# by these. Colours are used as-is.
PROPERTY_RANGE_SCALES = {
    "reflectance": 0.8,
    "emission": 0.2,
    "atmosphere_thickness": 0.5,
    "land_fraction": 0.8,
}

# --- Surface Classification ---
# The land/sea transition spans land_fraction +/- this value.
LAND_TRANSITION_HALF_WIDTH = 0.1
# Surface points are sampled on a sphere of this radius in noise-field
# units. At radius 20 one body spans about four octave-1 features.
SURFACE_SAMPLE_RADIUS = 20.0

# --- Glow Terms ---
# Emission glow: emission * (sin(time + x * frequency) * 0.5 + 0.5).
EMISSION_GLOW_SPATIAL_FREQUENCY = 1.0
# Atmosphere glow ramps in over this band of the limb factor (1 - n.v).
ATMOSPHERE_GLOW_START = 0.6
ATMOSPHERE_GLOW_END = 1.0

# --- Star System Layout ---
DEFAULT_SYSTEM_SEED = None  # None = fresh OS entropy per run
NUM_PLANETS = 10
PLANET_RADIUS = 1.0
MIN_PLANET_DISTANCE = 10.0
MAX_PLANET_DISTANCE = 200.0
PLANET_Z_SPREAD = 100.0
MAX_PLANET_SEED = 1000.0
# Planets whose index is a multiple of this receive moons.
MOONS_EVERY_NTH_PLANET = 10
MIN_MOONS = 1
MAX_MOONS = 3
MOON_RADIUS_FACTOR = 0.3
MOON_ORBIT_RADIUS_FACTOR = 4.0  # Orbit distance in planet radii, before jitter
MOON_ORBIT_JITTER = 3.0
MOON_SEED_STEP = 10.0

# --- Star Field ---
STAR_COUNT = 10000
STAR_FIELD_RADIUS = 500.0
MIN_STAR_BRIGHTNESS = 0.5
STAR_BLUE_SHIFT = 0.3
MIN_STAR_ALPHA = 0.5

# --- Preview Rendering ---
PREVIEW_RESOLUTION = 256
PREVIEW_BACKGROUND_COLOR = (0, 0, 0)
