"""Scene effect parameters and the light scattering model used for previews."""

from __future__ import annotations

import math
import xml.etree.ElementTree as ElementTree
from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

ROOT_ELEMENT = "SceneEffect.prm.xml"


def _saturate(value: float) -> float:
    return min(max(value, 0.0), 1.0)


def _normalized(vector: np.ndarray) -> np.ndarray:
    norm = float(np.linalg.norm(vector))
    return vector / norm if norm > 0.0 else vector


def _element(root: ElementTree.Element | None, path: Sequence[str]) -> ElementTree.Element | None:
    for name in path:
        if root is None:
            return None
        root = root.find(name)
    return root


def _float_value(element: ElementTree.Element | None, name: str) -> float | None:
    """Float held by the child ``name`` of ``element``, or None if absent or unparsable."""
    if element is None:
        return None
    child = element.find(name)
    if child is None or child.text is None:
        return None
    try:
        return float(child.text.strip())
    except ValueError:
        return None


@dataclass
class DefaultParams:
    sky_intensity_scale: float = 1.0


@dataclass
class HdrParams:
    middle_gray: float = 0.37
    lum_min: float = 0.15
    lum_max: float = 1.74


@dataclass(eq=False)
class LightScattering:
    """Light scattering settings and the shader constants derived from them."""

    enable: bool = False
    color: np.ndarray = field(default_factory=lambda: np.array([0.1, 0.21, 0.3]))
    depth_scale: float = 9.1
    in_scattering_scale: float = 50.0
    rayleigh: float = 0.1
    mie: float = 0.01
    g: float = 0.7
    z_near: float = 60.0
    z_far: float = 700.0

    ray_mie_ray2_mie2: np.ndarray = field(default_factory=lambda: np.zeros(4), init=False)
    const_g_fog_density: np.ndarray = field(default_factory=lambda: np.zeros(4), init=False)
    far_near_scale: np.ndarray = field(default_factory=lambda: np.zeros(4), init=False)

    def __post_init__(self) -> None:
        self.color = np.asarray(self.color, dtype=float)
        self.compute_gpu_values()

    def compute_gpu_values(self) -> None:
        """Recompute the constants that the scattering shader reads."""
        if self.z_far == self.z_near:
            raise ValueError("z_far and z_near must differ")

        g = self.g
        self.ray_mie_ray2_mie2 = np.array(
            [
                self.rayleigh,
                self.mie,
                self.rayleigh * 3.0 / (math.pi * 16.0),
                self.mie / (math.pi * 4.0),
            ]
        )
        self.const_g_fog_density = np.array(
            [(1.0 - g) * (1.0 - g), g * g + 1.0, g * -2.0, 0.0]
        )
        self.far_near_scale = np.array(
            [
                1.0 / (self.z_far - self.z_near),
                self.z_near,
                self.depth_scale,
                self.in_scattering_scale,
            ]
        )

    def compute(self, position, view_position, eye_position, light_position) -> tuple[float, float]:
        """Return (extinction, in-scattering) for a point seen from ``eye_position``."""
        position = np.asarray(position, dtype=float)
        view_position = np.asarray(view_position, dtype=float)
        eye_position = np.asarray(eye_position, dtype=float)
        light_position = np.asarray(light_position, dtype=float)

        ray_mie = self.ray_mie_ray2_mie2
        const_g = self.const_g_fog_density
        far_near = self.far_near_scale

        density = ray_mie[0] + ray_mie[1]
        if density == 0.0:
            raise ValueError("rayleigh and mie must not both be zero")

        depth = _saturate((-view_position[2] - far_near[1]) * far_near[0]) * far_near[2]
        extinction = math.exp(-depth * density)

        to_eye = _normalized(eye_position - position)
        cos_theta = -float(light_position @ to_eye)

        henyey = const_g[2] * cos_theta + const_g[1]
        mie_phase = const_g[0] / abs(henyey) ** 1.5 * ray_mie[3]
        phase = ray_mie[2] * (cos_theta * cos_theta + 1.0) + mie_phase

        in_scattering = (1.0 - extinction) * (phase / density)
        return extinction, in_scattering * far_near[3]


@dataclass(eq=False)
class SceneEffect:
    """Tone mapping, sky and light scattering parameters of a stage."""

    default: DefaultParams = field(default_factory=DefaultParams)
    hdr: HdrParams = field(default_factory=HdrParams)
    light_scattering: LightScattering = field(default_factory=LightScattering)

    def load_xml(self, text: str | bytes) -> None:
        """Apply the values found in a ``SceneEffect.prm.xml`` document.

        Values that are missing keep their current setting.
        """
        try:
            root = ElementTree.fromstring(text)
        except ElementTree.ParseError as error:
            raise ValueError(f"malformed scene effect document: {error}") from None

        if root.tag != ROOT_ELEMENT:
            return

        def apply(target, element, mapping) -> None:
            for tag, attribute in mapping:
                value = _float_value(element, tag)
                if value is not None:
                    setattr(target, attribute, value)

        hdr_element = _element(root, ("HDR", "Category", "Basic", "Param"))
        apply(
            self.hdr,
            hdr_element,
            (
                ("Middle_Gray", "middle_gray"),
                ("Luminance_Low", "lum_min"),
                ("Luminance_High", "lum_max"),
            ),
        )

        default_element = _element(root, ("Default", "Category", "Basic", "Param"))
        apply(
            self.default,
            default_element,
            (("CFxSceneRenderer::m_skyIntensityScale", "sky_intensity_scale"),),
        )

        scattering_element = _element(root, ("LightScattering", "Category"))
        if scattering_element is None:
            return

        scattering = self.light_scattering
        scattering.enable = True

        common = _element(scattering_element, ("Common", "Param"))
        for index, tag in enumerate(("ms_Color.x", "ms_Color.y", "ms_Color.z")):
            value = _float_value(common, tag)
            if value is not None:
                scattering.color[index] = value
        apply(scattering, common, (("ms_FarNearScale.z", "depth_scale"),))

        apply(
            scattering,
            _element(scattering_element, ("LightScattering", "Param")),
            (
                ("ms_FarNearScale.w", "in_scattering_scale"),
                ("ms_Ray_Mie_Ray2_Mie2.x", "rayleigh"),
                ("ms_Ray_Mie_Ray2_Mie2.y", "mie"),
                ("ms_G", "g"),
            ),
        )

        apply(
            scattering,
            _element(scattering_element, ("Fog", "Param")),
            (("ms_FarNearScale.y", "z_near"), ("ms_FarNearScale.x", "z_far")),
        )

        scattering.compute_gpu_values()