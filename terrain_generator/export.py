# terrain_generator/export.py

"""
Writers for baked terrain data. Arrays are stored twice: as lossless raw
`.npy` files for tools, and as PNG images for engines and quick inspection.
"""

import json
import os

import numpy as np
from PIL import Image

CHANNELS_PER_SPLAT_IMAGE = 4


def save_heightmap(heights: np.ndarray, directory: str, name: str = "heightmap") -> dict:
    """Saves a normalized heightfield as a 16-bit grayscale PNG and a raw .npy file."""
    os.makedirs(directory, exist_ok=True)
    png_path = os.path.join(directory, f"{name}.png")
    npy_path = os.path.join(directory, f"{name}.npy")

    quantized = np.round(np.clip(heights, 0.0, 1.0) * 65535).astype(np.uint16)
    Image.fromarray(quantized).save(png_path, 'PNG')
    np.save(npy_path, heights)
    return {'png': png_path, 'npy': npy_path}


def save_splatmap(weights: np.ndarray, directory: str, name: str = "splatmap") -> dict:
    """
    Saves splat weights as control images, one color channel per layer and up
    to four layers per image, plus the raw weights as a .npy file.
    """
    os.makedirs(directory, exist_ok=True)
    num_layers = weights.shape[-1]
    channels = np.round(np.clip(weights, 0.0, 1.0) * 255).astype(np.uint8)

    png_paths = []
    for index, first_layer in enumerate(range(0, num_layers, CHANNELS_PER_SPLAT_IMAGE)):
        group = channels[..., first_layer:first_layer + CHANNELS_PER_SPLAT_IMAGE]
        if group.shape[-1] < 3:
            padding = np.zeros(group.shape[:-1] + (3 - group.shape[-1],), dtype=np.uint8)
            group = np.concatenate([group, padding], axis=-1)

        png_path = os.path.join(directory, f"{name}_{index}.png")
        Image.fromarray(np.ascontiguousarray(group)).save(png_path, 'PNG')
        png_paths.append(png_path)

    npy_path = os.path.join(directory, f"{name}.npy")
    np.save(npy_path, weights)
    return {'png': png_paths, 'npy': npy_path}


def save_preview(color_array: np.ndarray, directory: str, name: str = "preview") -> str:
    """Saves an (rows, cols, 3) uint8 color array as a palettized PNG."""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, f"{name}.png")
    img = Image.fromarray(np.ascontiguousarray(color_array)).convert('P', palette=Image.ADAPTIVE, colors=256)
    img.save(path, optimize=True)
    return path


def write_generation_config(settings: dict, directory: str) -> str:
    """Saves the "birth certificate" of the settings a terrain was generated with."""
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, "generation_config.json")
    with open(path, 'w') as f:
        json.dump(settings, f, indent=4)
    return path
