# consistency_probe.py

"""
================================================================================
BAKE CONSISTENCY PROBE
================================================================================
Re-derives a baked star system from its manifest and permutation table and
checks that nothing drifted:

1. Every body's regenerated properties equal the recorded uniforms and lie
   within their documented ranges.
2. Probe pixels of a fresh preview render equal the baked PNG pixels.
3. Scalar sampling and dense grid sampling of the field agree exactly on the
   body's surface.

It also reports each body's land coverage next to its land fraction.

Usage:
    python consistency_probe.py --bake-dir baked_systems/system_42
================================================================================
"""
import os
import sys
import json
import logging
import argparse

import numpy as np

from bake_system import load_body_preview
from celestial_generator.field import NoiseField
from celestial_generator.preview import render_body_preview
from celestial_generator.properties import BodyPropertyGenerator, validate_properties
from celestial_generator.surface import fibonacci_sphere_points, land_coverage

NUM_SURFACE_PROBE_POINTS = 64
NUM_COVERAGE_POINTS = 4096


def _as_comparable(uniforms: dict) -> dict:
    """Normalises JSON lists back to tuples so records compare by value."""
    return {key: tuple(value) if isinstance(value, list) else value for key, value in uniforms.items()}


def run_probe_on_body(logger, noise_field, generator, bake_dir, body, preview_settings) -> bool:
    """Helper function to run the consistency probe on a single body."""
    logger.info(f"\n--- Probing {body['name']} (seed {body['seed']}) ---")
    body_passed = True

    # --- 1. Properties ---
    properties = generator.generate(body['seed'])
    if _as_comparable(properties.to_uniforms()) != _as_comparable(body['properties']):
        logger.error("  - Regenerated properties differ from the manifest -> FAIL")
        body_passed = False
    for violation in validate_properties(properties):
        logger.error(f"  - Range violation: {violation} -> FAIL")
        body_passed = False

    # --- 2. Baked preview pixels ---
    image_path = os.path.join(bake_dir, "bodies", f"{body['image']}.png")
    resolution = preview_settings['resolution']
    try:
        baked_pixels = load_body_preview(image_path, resolution)
    except FileNotFoundError:
        logger.error(f"  - Could not load preview '{image_path}' -> FAIL")
        return False

    live_pixels = render_body_preview(
        noise_field, properties,
        resolution=resolution,
        time=preview_settings['time'],
        rotation=preview_settings['rotation'],
        sample_radius=preview_settings['sample_radius'],
    )
    last = resolution - 1
    probe_pixels = [(0, 0), (last, 0), (0, last), (last, last), (resolution // 2, resolution // 2),
                    (resolution // 4, resolution // 2), (resolution // 2, resolution // 4)]
    for px, py in probe_pixels:
        baked_color = tuple(int(c) for c in baked_pixels[py, px])
        live_color = tuple(int(c) for c in live_pixels[py, px])
        result = "PASS" if baked_color == live_color else "FAIL"
        if result == "FAIL":
            body_passed = False
        logger.info(f"  - Pixel ({px}, {py}): Baked={baked_color}, Live={live_color} -> {result}")

    # --- 3. Scalar vs dense sampling ---
    points = fibonacci_sphere_points(NUM_SURFACE_PROBE_POINTS, preview_settings['sample_radius'])
    dense = noise_field.sample_grid(points[:, 0], points[:, 1], points[:, 2], properties.seed)
    scalar = np.array([noise_field.sample(x, y, z, properties.seed) for x, y, z in points])
    mismatches = int(np.count_nonzero(dense != scalar))
    if mismatches:
        logger.error(f"  - Scalar and dense sampling disagree at {mismatches} points -> FAIL")
        body_passed = False
    else:
        logger.info(f"  - Scalar and dense sampling agree at {NUM_SURFACE_PROBE_POINTS} points -> PASS")

    coverage = land_coverage(
        noise_field, properties,
        fibonacci_sphere_points(NUM_COVERAGE_POINTS, preview_settings['sample_radius']),
        time=preview_settings['time'],
    )
    logger.info(
        f"  - Land fraction {properties.land_fraction:.3f}: "
        f"soft coverage {coverage['soft']:.3f}, hard coverage {coverage['hard']:.3f}"
    )
    return body_passed


def run_full_probe(bake_dir: str) -> bool:
    logger = logging.getLogger("ConsistencyProbe")

    # --- 1. Load Bake Artefacts ---
    manifest_path = os.path.join(bake_dir, "manifest.json")
    table_path = os.path.join(bake_dir, "permutation_table.npy")
    logger.info(f"Loading manifest from '{manifest_path}'...")
    try:
        with open(manifest_path, 'r') as f:
            manifest = json.load(f)
        permutation_table = np.load(table_path)
    except FileNotFoundError as e:
        logger.critical(f"Bake artefact not found ({e}). Run bake_system.py first to create '{bake_dir}'.")
        return False

    # --- 2. Rebuild the Field Exactly ---
    noise_field = NoiseField(config=manifest.get('noise_field', {}), logger=logger, permutation_table=permutation_table)
    generator = BodyPropertyGenerator(logger=logger, noise_field=noise_field)

    # --- 3. Probe Every Body ---
    all_probes_passed = True
    for body in manifest['bodies']:
        if not run_probe_on_body(logger, noise_field, generator, bake_dir, body, manifest['preview']):
            all_probes_passed = False

    logger.info("\n--- Full Probe Complete ---")
    if all_probes_passed:
        logger.info("SUCCESS: All bodies are consistent with the bake.")
    else:
        logger.error("FAILURE: Mismatch detected in one or more bodies.")
    return all_probes_passed


def main(argv=None):
    parser = argparse.ArgumentParser(description="Checks a baked star system against a fresh regeneration.")
    parser.add_argument("--bake-dir", type=str, required=True, help="Directory written by bake_system.py.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
    return 0 if run_full_probe(args.bake_dir) else 1


if __name__ == '__main__':
    sys.exit(main())
