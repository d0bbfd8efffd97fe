"""Light map inputs for one texture group level: sizes, names and pixel merging."""

from __future__ import annotations

import logging
from pathlib import Path

import numpy as np

MIN_LEVEL_SIZE = 4

logger = logging.getLogger(__name__)


def _check_level(level: int) -> None:
    if level < 0:
        raise ValueError(f"level must not be negative, got {level}")


def level_size(width: int, height: int, level: int) -> tuple[int, int]:
    """Size of a light map scaled down for ``level``, never below 4 pixels."""
    _check_level(level)
    return (
        max(MIN_LEVEL_SIZE, width >> level),
        max(MIN_LEVEL_SIZE, height >> level),
    )


def he1_level_size(
    light_width: int,
    light_height: int,
    shadow_width: int,
    shadow_height: int,
    level: int,
) -> tuple[int, int]:
    """Common size of a light map and shadow map pair scaled down for ``level``."""
    return level_size(
        max(light_width, shadow_width), max(light_height, shadow_height), level
    )


def merge_he1_lightmap(light_bgra: np.ndarray, shadow: np.ndarray) -> np.ndarray:
    """Return the BGRA light map with its alpha channel replaced by the shadow map."""
    light = np.asarray(light_bgra, dtype=np.uint8)
    shadow_values = np.asarray(shadow, dtype=np.uint8)

    if light.ndim != 3 or light.shape[2] != 4:
        raise ValueError(f"light map must have shape (height, width, 4), got {light.shape}")
    if shadow_values.shape != light.shape[:2]:
        raise ValueError(
            f"shadow map shape {shadow_values.shape} does not match "
            f"light map size {light.shape[:2]}"
        )

    merged = light.copy()
    merged[..., 3] = shadow_values
    return merged


def lightmap_names(name: str, level: int, is_sg: bool) -> tuple[str, str]:
    """Names of the light map and occlusion map of an instance at ``level``."""
    _check_level(level)
    suffix = f"-level{level}"
    light_name = f"{name}_sg{suffix}" if is_sg else f"{name}{suffix}"
    return light_name, f"{name}_occlusion{suffix}"


def he2_input_paths(directory: str | Path, name: str) -> tuple[Path, Path] | None:
    """Light map and occlusion map files of an instance, or None when missing."""
    base = Path(directory)
    light = base / f"{name}_sg.dds"
    shadow = base / f"{name}_occlusion.dds"

    if not light.exists():
        light = base / f"{name}.dds"

    if light.exists() and shadow.exists():
        return light, shadow

    logger.warning('Couldn\'t find lightmap textures for instance "%s"', name)
    return None


def he1_input_paths(directory: str | Path, name: str) -> tuple[Path, Path] | None:
    """Light map and shadow map images of an instance, or None when missing."""
    base = Path(directory)
    light = base / f"{name}_lightmap.png"
    shadow = base / f"{name}_shadowmap.png"

    if light.exists() and shadow.exists():
        return light, shadow

    logger.warning('Couldn\'t find lightmap textures for instance "%s"', name)
    return None