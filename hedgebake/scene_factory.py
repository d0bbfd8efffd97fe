"""Scene building blocks read from stage resources: materials, meshes and lights."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field, fields
from typing import Any

import numpy as np

STRIP_RESTART = 0xFFFF


class MaterialType(enum.Enum):
    COMMON = "common"
    SKY = "sky"
    IGNORE_LIGHT = "ignore_light"
    BLEND = "blend"


@dataclass(frozen=True)
class ShaderTraits:
    """What a shader name tells about how a material is lit."""

    type: MaterialType
    sky_type: int = 0
    sky_sqrt: bool = False
    ignore_vertex_color: bool = False
    has_metalness: bool = False


def classify_shader(shader_name: str) -> ShaderTraits:
    """Derive the material traits from the name of its shader."""
    if "Sky" in shader_name:
        material_type = MaterialType.SKY
    elif "IgnoreLight" in shader_name:
        material_type = MaterialType.IGNORE_LIGHT
    elif "Blend" in shader_name:
        material_type = MaterialType.BLEND
    else:
        material_type = MaterialType.COMMON

    sky_type = 0
    sky_sqrt = False
    if material_type is MaterialType.SKY:
        if "Sky3" in shader_name:
            sky_type = 3
        elif "Sky2" in shader_name:
            sky_type = 2
        sky_sqrt = "Sqrt" in shader_name

    return ShaderTraits(
        type=material_type,
        sky_type=sky_type,
        sky_sqrt=sky_sqrt,
        ignore_vertex_color=material_type is MaterialType.BLEND
        or "FadeOutNormal" in shader_name,
        has_metalness=any(
            marker in shader_name for marker in ("MCommon", "MBlend", "MEmission")
        ),
    )


_LAYERED_KINDS = {
    "diffuse": ("diffuse", "diffuse_blend"),
    "specular": ("specular", "specular_blend"),
    "gloss": ("gloss", "gloss_blend"),
    "normal": ("normal", "normal_blend"),
}

_SINGLE_KINDS = {
    "opacity": "alpha",
    "transparency": "alpha",
    "displacement": "emission",
    "emission": "emission",
    "reflection": "environment",
}


@dataclass
class TextureSlots:
    """The textures a material samples, by role."""

    diffuse: Any = None
    specular: Any = None
    gloss: Any = None
    normal: Any = None
    alpha: Any = None
    diffuse_blend: Any = None
    specular_blend: Any = None
    gloss_blend: Any = None
    normal_blend: Any = None
    emission: Any = None
    environment: Any = None

    def assign(self, kind: str, bitmap: Any) -> str | None:
        """Put ``bitmap`` in the slot for a texture of ``kind``.

        A second diffuse, specular, gloss or normal texture goes to the blend
        slot.  Returns the slot used, or None for a kind that has no slot.
        """
        if kind in _LAYERED_KINDS:
            primary, blend = _LAYERED_KINDS[kind]
            slot = blend if getattr(self, primary) is not None else primary
        else:
            slot = _SINGLE_KINDS.get(kind)
            if slot is None:
                return None
        setattr(self, slot, bitmap)
        return slot

    def bitmaps(self) -> list[Any]:
        """Every texture assigned to a slot."""
        return [
            value
            for value in (getattr(self, f.name) for f in fields(self))
            if value is not None
        ]


def triangles_from_strip(indices: Iterable[int]) -> list[tuple[int, int, int]]:
    """Turn a triangle strip with 0xFFFF restart markers into a triangle list.

    Degenerate triangles are dropped; every other triangle has its winding flipped
    so that all of them face the same way.
    """
    faces = list(indices)
    if len(faces) < 2:
        return []

    triangles: list[tuple[int, int, int]] = []
    a, b = faces[0], faces[1]
    direction = -1
    i = 2

    while i < len(faces):
        c = faces[i]
        i += 1
        if c == STRIP_RESTART:
            if i + 2 > len(faces):
                break
            a, b = faces[i], faces[i + 1]
            i += 2
            direction = -1
            continue

        direction = -direction
        if a != b and b != c and c != a:
            triangles.append((a, c, b) if direction > 0 else (a, b, c))
        a, b = b, c

    return triangles


class LightType(enum.IntEnum):
    DIRECTIONAL = 0
    POINT = 1


@dataclass(eq=False)
class Light:
    """A directional or point light of a stage."""

    name: str = ""
    type: LightType = LightType.DIRECTIONAL
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    color: np.ndarray = field(default_factory=lambda: np.zeros(3))
    range: np.ndarray = field(default_factory=lambda: np.zeros(4))
    shadow_radius: float = 1.0
    cast_shadow: bool = True


def create_light(
    light_type: int,
    position: Sequence[float],
    color: Sequence[float],
    range_values: Sequence[float] | None = None,
) -> Light:
    """Build a light from its stored values.

    A directional light keeps a normalised direction in ``position``.  For a
    point light the unused first range value carries the shadow settings: 0
    means defaults (radius from the inverse of the last range value, if set),
    a negative value disables shadows, and its magnitude minus one is the
    shadow radius.
    """
    try:
        kind = LightType(light_type)
    except ValueError:
        raise ValueError(f"unknown light type {light_type!r}") from None

    light = Light(
        type=kind,
        position=np.asarray(position, dtype=float).copy(),
        color=np.asarray(color, dtype=float).copy(),
    )
    if light.position.shape != (3,) or light.color.shape != (3,):
        raise ValueError("light position and color must have three components")

    if kind is not LightType.POINT:
        norm = float(np.linalg.norm(light.position))
        if norm > 0.0:
            light.position = light.position / norm
        return light

    if range_values is None:
        raise ValueError("a point light needs range values")
    light.range = np.asarray(range_values, dtype=float).copy()
    if light.range.shape != (4,):
        raise ValueError("a point light needs four range values")

    first, last = float(light.range[0]), float(light.range[3])
    if first != 0.0:
        light.shadow_radius = abs(first) - 1.0
        light.cast_shadow = first >= 0.0
    else:
        if last != 0.0:
            light.shadow_radius = 1.0 / last
        light.cast_shadow = True

    return light