"""Sample accumulators for spherical Gaussian light maps and light field probes."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass, field

import numpy as np

SG_LIGHT_MAP_FORMAT = "BC6H_UF16"
SG_SHADOW_MAP_FORMAT = "BC4_UNORM"

SG_DIRECTIONS = np.array(
    [
        [0.0, 0.57735, 1.0],
        [0.0, 0.57735, -1.0],
        [1.0, 0.57735, 0.0],
        [-1.0, 0.57735, 0.0],
    ]
)

# Approximated normalisation factors.
SG_FACTOR = 4.4774197027285894
SHLF_FACTOR = 5.8369751043319704

SHLF_DIRECTIONS = np.array(
    [
        [1.0, 0.0, 0.0],
        [-1.0, 0.0, 0.0],
        [0.0, 1.0, 0.0],
        [0.0, -1.0, 0.0],
        [0.0, 0.0, 1.0],
        [0.0, 0.0, -1.0],
    ]
)

MAX_HALF_FLOAT = 65504.0
SHLF_TEXELS_PER_PROBE = 9


def _to_local(direction) -> np.ndarray:
    x, y, z = np.asarray(direction, dtype=float)
    return np.array([x, y, -z])


def _scale(colors: np.ndarray, factor: float, sample_count: int) -> None:
    if sample_count <= 0:
        raise ValueError(f"sample count must be positive, got {sample_count}")
    colors *= factor / sample_count


def _zero_colors(count: int):
    return lambda: np.zeros((count, 3))


@dataclass
class SGGIPoint:
    """Accumulates lighting into four spherical Gaussian lobes."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    x: int = 0
    y: int = 0
    shadow: float = 0.0
    colors: np.ndarray = field(default_factory=_zero_colors(4))

    def add_sample(self, color, direction) -> None:
        local = _to_local(direction)
        color = np.asarray(color, dtype=float)
        for i, base in enumerate(SG_DIRECTIONS):
            lobe = np.array([base[0], local[1] * base[1], base[2]])
            cos_theta = float(local @ (lobe / np.linalg.norm(lobe)))
            if cos_theta <= 0.0:
                continue
            self.colors[i] += color * math.exp((cos_theta - 1.0) * 4.0)

    def end(self, sample_count: int) -> None:
        _scale(self.colors, SG_FACTOR, sample_count)


@dataclass
class SHLightFieldPoint:
    """Accumulates lighting of one light field probe along the six axes."""

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    x: int = 0
    y: int = 0
    z: int = 0xFFFF
    shadow: float = 0.0
    colors: np.ndarray = field(default_factory=_zero_colors(6))

    def add_sample(self, color, direction) -> None:
        local = _to_local(direction)
        color = np.asarray(color, dtype=float)
        for i, axis in enumerate(SHLF_DIRECTIONS):
            cos_theta = float(local @ axis)
            if cos_theta <= 0.0:
                continue
            self.colors[i] += color * math.exp((cos_theta - 1.0) * 3.0)

    def end(self, sample_count: int) -> None:
        _scale(self.colors, SHLF_FACTOR, sample_count)

    def texels(self, resolution_x: int) -> Iterator[tuple[int, int, int, np.ndarray]]:
        """Yield (x, y, z, RGBA) for the six texels this probe writes to its volume."""
        shadow = min(max(self.shadow, 0.0), 1.0)
        for i, color in enumerate(self.colors):
            rgba = np.empty(4)
            rgba[:3] = np.clip(color, 0.0, MAX_HALF_FLOAT)
            rgba[3] = shadow if i == 0 else 1.0
            yield i * resolution_x + self.x, self.y, self.z, rgba