# bake_system.py

"""
================================================================================
OFFLINE STAR SYSTEM BAKER SCRIPT
================================================================================
This script is a command-line tool for generating a star system and
pre-rendering a preview image of every planet and moon ("baking"). The output
directory holds everything a renderer or the consistency probe needs to
re-derive the exact same bodies:

    manifest.json            body layout, seeds, uniforms and image hashes
    permutation_table.npy    the noise field's permutation table
    starfield.npz            star positions and RGBA colours
    bodies/<hash>.png        one preview per distinct body image

Usage:
    python bake_system.py --config path/to/your/config.json
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time
import hashlib
import collections
import multiprocessing

import numpy as np
from PIL import Image
from tqdm import tqdm

from celestial_generator import config as DEFAULTS
from celestial_generator.field import NoiseField
from celestial_generator.preview import render_body_preview
from celestial_generator.properties import BodyPropertyGenerator
from celestial_generator.system import StarSystemGenerator, generate_starfield


# --- Helper for Preview Compression ---
def save_body_preview(image: np.ndarray, directory: str, file_hash: str) -> str:
    """
    Saves a preview using a tiered, lossless compression strategy with Pillow.
    `image` is a (height, width, 3) uint8 array.
    """
    os.makedirs(directory, exist_ok=True)
    file_path = os.path.join(directory, f"{file_hash}.png")

    # Tier 1: Perfectly uniform colour.
    if (image == image[0, 0]).all():
        img = Image.new('RGB', (1, 1), tuple(int(c) for c in image[0, 0]))
        img.save(file_path, 'PNG')
        return 'uniform'

    # Tier 2: Few enough colours for an exact palette.
    height, width = image.shape[:2]
    palette, indices = np.unique(image.reshape(-1, 3), axis=0, return_inverse=True)
    if len(palette) <= 256:
        img = Image.fromarray(indices.reshape(height, width).astype(np.uint8))
        img.putpalette(palette.astype(np.uint8).flatten().tolist())
        img.save(file_path, 'PNG')
        return 'palettized'

    # Tier 3: Full RGB.
    Image.fromarray(image).save(file_path, 'PNG')
    return 'full'


def load_body_preview(file_path: str, resolution: int) -> np.ndarray:
    """Loads a baked preview back into a (resolution, resolution, 3) uint8 array."""
    img = Image.open(file_path).convert('RGB')
    if img.size == (1, 1):
        img = img.resize((resolution, resolution), Image.NEAREST)
    return np.array(img)


# --- Global variables for worker processes ---
worker_field = None
worker_preview_settings = {}
worker_bodies_dir = ""


def init_worker(permutation_table, field_config, preview_settings, bodies_dir):
    """Initializes the global state for each worker process."""
    global worker_field, worker_preview_settings, worker_bodies_dir

    worker_logger = logging.getLogger(f"Worker-{os.getpid()}")
    # Every worker rebuilds the parent's field from its table.
    worker_field = NoiseField(config=field_config, logger=worker_logger, permutation_table=permutation_table)
    worker_preview_settings = preview_settings
    worker_bodies_dir = bodies_dir


def process_body(job):
    """
    Renders and SAVES one body preview. Returns only minimal metadata.
    """
    name, properties = job
    image = render_body_preview(
        worker_field, properties,
        resolution=worker_preview_settings['resolution'],
        time=worker_preview_settings['time'],
        rotation=worker_preview_settings['rotation'],
        sample_radius=worker_preview_settings['sample_radius'],
    )
    file_hash = hashlib.md5(image.tobytes()).hexdigest()
    compression_type = save_body_preview(image, worker_bodies_dir, file_hash)
    return {'name': name, 'hash': file_hash, 'compression_type': compression_type}


def get_preview_settings(preview_config: dict) -> dict:
    return {
        'resolution': int(preview_config.get('resolution', DEFAULTS.PREVIEW_RESOLUTION)),
        'time': float(preview_config.get('time', 0.0)),
        'rotation': float(preview_config.get('rotation', 0.0)),
        'sample_radius': float(preview_config.get('sample_radius', DEFAULTS.SURFACE_SAMPLE_RADIUS)),
    }


# --- Main Baking Function ---
def bake_system(config_path: str, output_dir: str = None, num_workers: int = None):
    """
    Loads a configuration, generates the star system, renders every body
    preview and writes the bake directory.

    Returns:
        str | None: The output directory, or None if the config could not be
            loaded.
    """
    logger = logging.getLogger("Baker")

    # 1. --- Load Configuration ---
    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return None

    field_config = config.get('noise_field', {})
    system_config = config.get('system', {})
    starfield_config = config.get('starfield', {})
    preview_settings = get_preview_settings(config.get('preview', {}))
    system_seed = system_config.get('system_seed', DEFAULTS.DEFAULT_SYSTEM_SEED)

    # 2. --- Build the shared field and lay out the system ---
    noise_field = NoiseField(config=field_config, logger=logger)
    property_generator = BodyPropertyGenerator(logger=logger, noise_field=noise_field)
    rng = np.random.default_rng(system_seed)
    system = StarSystemGenerator(system_config, logger, property_generator, rng=rng).generate()
    star_positions, star_colors = generate_starfield(
        rng,
        count=starfield_config.get('count', DEFAULTS.STAR_COUNT),
        radius=starfield_config.get('radius', DEFAULTS.STAR_FIELD_RADIUS),
    )

    # 3. --- Prepare Output Directories ---
    if output_dir is None:
        output_dir = f"baked_systems/system_{system_seed}"
    bodies_dir = os.path.join(output_dir, "bodies")
    os.makedirs(output_dir, exist_ok=True)

    np.save(os.path.join(output_dir, "permutation_table.npy"), noise_field.permutation_table)
    np.savez_compressed(os.path.join(output_dir, "starfield.npz"), positions=star_positions, colors=star_colors)

    # 4. --- Main Baking Loop ---
    tasks = [(body.name, body.properties) for body in system.bodies]
    total_bodies = len(tasks)
    if num_workers is None:
        num_workers = max(1, multiprocessing.cpu_count() - 1)
    num_workers = min(num_workers, max(1, total_bodies))

    logger.info(f"Starting bake for {total_bodies} bodies using {num_workers} worker(s)...")
    start_time = time.perf_counter()

    image_hashes = {}
    compression_stats = collections.Counter()
    init_args = (noise_field.permutation_table, field_config, preview_settings, bodies_dir)

    if num_workers == 1:
        init_worker(*init_args)
        results = [process_body(task) for task in tqdm(tasks, desc="Baking Bodies")]
    else:
        with multiprocessing.Pool(processes=num_workers, initializer=init_worker, initargs=init_args) as pool:
            results = list(tqdm(pool.imap_unordered(process_body, tasks), total=total_bodies, desc="Baking Bodies"))

    for result in results:
        if result['hash'] not in image_hashes.values():
            compression_stats[result['compression_type']] += 1
        image_hashes[result['name']] = result['hash']

    # --- Finalization ---
    bodies = []
    for body in system.bodies:
        record = body.to_dict()
        record['image'] = image_hashes[body.name]
        bodies.append(record)

    manifest = {
        'system_seed': system_seed,
        'noise_field': field_config,
        'preview': preview_settings,
        'star_count': int(star_positions.shape[0]),
        'bodies': bodies,
    }
    manifest_path = os.path.join(output_dir, "manifest.json")
    with open(manifest_path, 'w') as f:
        json.dump(manifest, f, indent=2)

    end_time = time.perf_counter()
    unique_count = len(set(image_hashes.values()))
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    logger.info(
        f"  - Previews: {total_bodies} total -> {unique_count} unique images saved "
        f"({compression_stats['uniform']} uniform, {compression_stats['palettized']} palettized, "
        f"{compression_stats['full']} full)"
    )
    logger.info(f"Baked system and manifest.json saved to: {output_dir}")
    return output_dir


def main(argv=None):
    parser = argparse.ArgumentParser(description="Offline baker for the celestial body generator.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to the JSON configuration file for the system to be baked."
    )
    parser.add_argument("--output", type=str, default=None, help="Output directory (default: baked_systems/system_<seed>).")
    parser.add_argument("--workers", type=int, default=None, help="Number of worker processes.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    if bake_system(args.config, output_dir=args.output, num_workers=args.workers) is None:
        return 1
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
