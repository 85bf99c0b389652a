# bake_terrain.py

"""
================================================================================
OFFLINE TERRAIN BAKER SCRIPT
================================================================================
This script is a command-line tool for generating a terrain from a JSON
configuration and writing it to disk ("baking"): the heightmap, the splat map
control images, a blended color preview and the generation config used.

The heightfield is split into disjoint row bands which can be generated in
parallel worker processes; each worker owns its band, so the reassembled
field is identical to a single-process run.

Usage:
    python bake_terrain.py --config path/to/your/config.json [--workers 4]
================================================================================
"""
import os
import sys
import json
import logging
import argparse
import time
import multiprocessing
import numpy as np
from tqdm import tqdm

from terrain_generator.generator import TerrainGenerator
from terrain_generator.params import GenerationParameters
from terrain_generator.surface import HeightmapSurface
from terrain_generator.errors import ConfigurationError, TerrainGenerationError
from terrain_generator import color_maps
from terrain_generator import export
from terrain_generator import heightfield
from terrain_generator import splatmap
from terrain_generator import config as DEFAULTS

# --- Global variables for worker processes ---
worker_params = None
worker_permutation_table = None
worker_grid_shape = (0, 0)

def init_worker(params_dict, permutation_table, grid_shape):
    """Initializes the global state for each worker process."""
    global worker_params, worker_permutation_table, worker_grid_shape

    # Workers get the parameters already chosen by the main process, so the
    # random fractal policy is applied exactly once per bake.
    worker_params = GenerationParameters(**params_dict)
    worker_permutation_table = permutation_table
    worker_grid_shape = grid_shape

def process_band(band):
    """Generates one row band of the heightfield. Returns the band with its rows."""
    row_start, row_end = band
    grid_width, grid_height = worker_grid_shape
    heights = heightfield.generate_heights(
        worker_params, grid_width, grid_height, worker_permutation_table, row_start, row_end
    )
    return row_start, row_end, heights

def generate_banded_heights(generator: TerrainGenerator, params: GenerationParameters, grid_width: int, grid_height: int, num_workers: int, logger: logging.Logger) -> np.ndarray:
    """Generates the full heightfield, band by band, across num_workers processes."""
    bands = heightfield.split_rows(grid_height, num_workers * 4)
    heights = np.empty((grid_height, grid_width))

    if num_workers <= 1:
        for row_start, row_end in tqdm(bands, desc="Generating Heights"):
            heights[row_start:row_end] = generator.generate_heights(grid_width, grid_height, row_start, row_end, params=params)
        return heights

    logger.info(f"Using {num_workers} worker processes for {len(bands)} row bands.")
    init_args = (params.to_dict(), generator.permutation_table, (grid_width, grid_height))
    with multiprocessing.Pool(processes=num_workers, initializer=init_worker, initargs=init_args) as pool:
        results_iterator = pool.imap_unordered(process_band, bands)
        for row_start, row_end, band_heights in tqdm(results_iterator, total=len(bands), desc="Generating Heights"):
            heights[row_start:row_end] = band_heights
    return heights

# --- Main Baking Function ---
def bake_terrain(config: dict, output_dir: str, logger: logging.Logger, num_workers: int = 1) -> dict:
    """
    Generates a terrain for the given parameters and saves every artifact to
    output_dir. Returns a dictionary of the written file paths.
    """
    start_time = time.perf_counter()

    generator = TerrainGenerator(config=config, logger=logger)
    params = generator.next_parameters()
    settings = generator.settings

    if settings['alphamap_layers'] < splatmap.REQUIRED_LAYERS:
        raise ConfigurationError(
            f"alphamap_layers must be at least {splatmap.REQUIRED_LAYERS}, got {settings['alphamap_layers']}."
        )

    surface = HeightmapSurface(
        heightmap_width=settings['heightmap_resolution'],
        heightmap_height=settings['heightmap_resolution'],
        alphamap_width=settings['alphamap_resolution'],
        alphamap_height=settings['alphamap_resolution'],
        alphamap_layers=settings['alphamap_layers'],
        size=(params.width, params.amplitude, params.height),
    )

    # 1. --- Heightfield (parallel over row bands) ---
    logger.info(
        f"Generating {surface.heightmap_width}x{surface.heightmap_height} heightmap "
        f"(octaves={params.octaves}, persistence={params.persistence:.3f})..."
    )
    heights = generate_banded_heights(
        generator, params, surface.heightmap_width, surface.heightmap_height, num_workers, logger
    )
    surface.set_heights(0, 0, heights)

    # 2. --- Splat map, read back through the surface ---
    logger.info(f"Classifying {surface.alphamap_width}x{surface.alphamap_height} splat map...")
    weights = splatmap.classify_surface(surface, params, sampling=settings['sampling'])
    surface.set_alphamaps(0, 0, weights)

    # 3. --- Save artifacts ---
    layer_lut = color_maps.create_layer_color_lut()
    outputs = {
        'heightmap': export.save_heightmap(surface.heights, output_dir),
        'splatmap': export.save_splatmap(surface.alphamaps, output_dir),
        'preview': export.save_preview(color_maps.get_splat_color_array(surface.alphamaps, layer_lut), output_dir),
        'elevation_preview': export.save_preview(
            color_maps.get_elevation_color_array(surface.heights), output_dir, name="elevation"
        ),
    }
    birth_certificate = dict(settings)
    birth_certificate['effective_parameters'] = params.to_dict()
    outputs['generation_config'] = export.write_generation_config(birth_certificate, output_dir)

    end_time = time.perf_counter()
    logger.info(f"Baking complete! Total time: {end_time - start_time:.2f} seconds.")
    logger.info(f"Baked terrain saved to: {output_dir}")
    return outputs

def load_config(config_path: str, logger: logging.Logger):
    """Loads the 'terrain_generation_parameters' object of a JSON config file."""
    logger.info(f"Loading configuration from: {config_path}")
    try:
        with open(config_path, 'r') as f:
            config = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError) as e:
        logger.critical(f"Failed to load or parse config file: {e}")
        return None
    return config.get('terrain_generation_parameters', {})

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Offline Terrain Baker for the Perlin Terrain Generator.")
    parser.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to the JSON configuration file for the terrain to be baked."
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Output directory. Defaults to baked_terrains/seed_<seed>."
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=max(1, multiprocessing.cpu_count() - 1),
        help="Number of worker processes used for the heightfield."
    )
    args = parser.parse_args(argv)

    # --- Setup Logging ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stdout
    )
    logger = logging.getLogger("Baker")

    config = load_config(args.config, logger)
    if config is None:
        return 1

    seed = config.get('seed', DEFAULTS.DEFAULT_SEED)
    output_dir = args.output or os.path.join(DEFAULTS.OUTPUT_ROOT, f"seed_{seed}")

    try:
        bake_terrain(config, output_dir, logger, num_workers=args.workers)
    except TerrainGenerationError as e:
        logger.critical(f"Terrain generation failed: {e}")
        return 1
    return 0


# --- Command-Line Interface ---
if __name__ == "__main__":
    sys.exit(main())
