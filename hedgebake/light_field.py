"""Spherical harmonics light field volumes and the probes they hold."""

from __future__ import annotations

import copy
import math
from dataclasses import dataclass, field

import numpy as np

DEFAULT_SCALE = (80.0, 120.0, 750.0)
DEFAULT_RESOLUTION = (2, 2, 10)
WORLD_SCALE = 10.0


def _axis_rotation(axis: int, angle: float) -> np.ndarray:
    c, s = math.cos(angle), math.sin(angle)
    i, j = [(1, 2), (2, 0), (0, 1)][axis]
    matrix = np.eye(3)
    matrix[i, i] = c
    matrix[j, j] = c
    matrix[i, j] = -s
    matrix[j, i] = s
    return matrix


@dataclass(eq=False)
class SHLightField:
    """An oriented box filled with a grid of light probes."""

    name: str = ""
    resolution: np.ndarray = field(default_factory=lambda: np.zeros(3, dtype=int))
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation: np.ndarray = field(default_factory=lambda: np.zeros(3))
    scale: np.ndarray = field(default_factory=lambda: np.zeros(3))

    def __post_init__(self) -> None:
        self.resolution = np.asarray(self.resolution, dtype=int)
        self.position = np.asarray(self.position, dtype=float)
        self.rotation = np.asarray(self.rotation, dtype=float)
        self.scale = np.asarray(self.scale, dtype=float)

    def rotation_matrix(self) -> np.ndarray:
        """Rotation about X, then Y, then Z, composed as Rx * Ry * Rz."""
        rx, ry, rz = self.rotation
        return _axis_rotation(0, rx) @ _axis_rotation(1, ry) @ _axis_rotation(2, rz)

    def set_from_rotation_matrix(self, matrix) -> None:
        """Set the Euler angles so that ``rotation_matrix()`` gives ``matrix``.

        The first angle is kept in [0, pi], the others in [-pi, pi].
        """
        m = np.asarray(matrix, dtype=float)
        if m.shape != (3, 3):
            raise ValueError(f"rotation matrix must be 3x3, got {m.shape}")

        a0 = math.atan2(m[1, 2], m[2, 2])
        c2 = math.hypot(m[0, 0], m[0, 1])
        if a0 > 0.0:
            a0 -= math.pi
            a1 = math.atan2(-m[0, 2], -c2)
        else:
            a1 = math.atan2(-m[0, 2], c2)
        s1, c1 = math.sin(a0), math.cos(a0)
        a2 = math.atan2(s1 * m[2, 0] - c1 * m[1, 0], c1 * m[1, 1] - s1 * m[2, 1])
        self.rotation = -np.array([a0, a1, a2])

    def matrix(self) -> np.ndarray:
        """4x4 transform: translation, then rotation, then scaling."""
        result = np.eye(4)
        result[:3, :3] = self.rotation_matrix() @ np.diag(self.scale)
        result[:3, 3] = self.position
        return result

    def probe_positions(self) -> list[tuple[int, int, int, np.ndarray]]:
        """(x, y, z, world position) of every probe, with x varying fastest."""
        matrix = self.matrix()
        res_x, res_y, res_z = (int(v) for v in self.resolution)
        probes = []
        for z in range(res_z):
            zn = (z + 0.5) / res_z - 0.5
            for y in range(res_y):
                yn = (y + 0.5) / res_y - 0.5
                for x in range(res_x):
                    xn = (x + 0.5) / res_x - 0.5
                    point = matrix @ np.array([xn, yn, zn, 1.0])
                    probes.append((x, y, z, point[:3] / WORLD_SCALE))
        return probes

    def snap_radius(self) -> float:
        """Distance within which probes are moved onto nearby geometry."""
        if np.any(self.resolution <= 0):
            raise ValueError(f"resolution must be positive, got {self.resolution.tolist()}")
        cell = float(np.max(self.scale / self.resolution))
        return cell / WORLD_SCALE * math.sqrt(2.0) / 2.0

    def clone(self, name: str) -> SHLightField:
        """An independent copy under a new name."""
        duplicate = copy.deepcopy(self)
        duplicate.name = name
        return duplicate


def new_light_field_name(stage_name: str, index: int) -> str:
    """Name given to a newly added light field of a stage."""
    return f"{stage_name}_shLF_{index:03d}"


def default_light_field(stage_name: str, index: int, position) -> SHLightField:
    """A new light field placed at ``position`` in viewport units."""
    return SHLightField(
        name=new_light_field_name(stage_name, index),
        resolution=np.array(DEFAULT_RESOLUTION),
        position=np.asarray(position, dtype=float) * WORLD_SCALE,
        rotation=np.zeros(3),
        scale=np.array(DEFAULT_SCALE),
    )