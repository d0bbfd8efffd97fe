import numpy as np
import pytest

from hedgebake.scene_effect import LightScattering, SceneEffect

SAMPLE = """<SceneEffect.prm.xml>
  <HDR><Category><Basic><Param>
    <Middle_Gray>0.5</Middle_Gray>
    <Luminance_Low>0.25</Luminance_Low>
    <Luminance_High>2.5</Luminance_High>
  </Param></Basic></Category></HDR>
  <Default><Category><Basic><Param>
    <CFxSceneRenderer::m_skyIntensityScale>3.0</CFxSceneRenderer::m_skyIntensityScale>
  </Param></Basic></Category></Default>
  <LightScattering><Category>
    <Common><Param>
      <ms_Color.x>0.5</ms_Color.x>
      <ms_Color.y>0.75</ms_Color.y>
      <ms_Color.z>1.0</ms_Color.z>
      <ms_FarNearScale.z>4.0</ms_FarNearScale.z>
    </Param></Common>
    <LightScattering><Param>
      <ms_FarNearScale.w>20.0</ms_FarNearScale.w>
      <ms_Ray_Mie_Ray2_Mie2.x>0.2</ms_Ray_Mie_Ray2_Mie2.x>
      <ms_Ray_Mie_Ray2_Mie2.y>0.05</ms_Ray_Mie_Ray2_Mie2.y>
      <ms_G>0.5</ms_G>
    </Param></LightScattering>
    <Fog><Param>
      <ms_FarNearScale.y>10.0</ms_FarNearScale.y>
      <ms_FarNearScale.x>500.0</ms_FarNearScale.x>
    </Param></Fog>
  </Category></LightScattering>
</SceneEffect.prm.xml>
"""


def test_defaults_match_source():
    effect = SceneEffect()
    assert effect.default.sky_intensity_scale == 1.0
    assert (effect.hdr.middle_gray, effect.hdr.lum_min, effect.hdr.lum_max) == (0.37, 0.15, 1.74)
    scattering = effect.light_scattering
    assert scattering.enable is False
    assert np.allclose(scattering.color, [0.1, 0.21, 0.3])
    assert (scattering.z_near, scattering.z_far) == (60.0, 700.0)


def test_gpu_values_carry_inputs():
    scattering = LightScattering(rayleigh=0.2, mie=0.05, z_near=10.0, depth_scale=4.0, in_scattering_scale=20.0)
    assert scattering.ray_mie_ray2_mie2[0] == 0.2
    assert scattering.ray_mie_ray2_mie2[1] == 0.05
    assert scattering.far_near_scale[1] == 10.0
    assert scattering.far_near_scale[2] == 4.0
    assert scattering.far_near_scale[3] == 20.0


def test_equal_near_and_far_rejected():
    with pytest.raises(ValueError):
        LightScattering(z_near=5.0, z_far=5.0)


def test_load_xml_reads_all_values():
    effect = SceneEffect()
    effect.load_xml(SAMPLE)
    assert (effect.hdr.middle_gray, effect.hdr.lum_min, effect.hdr.lum_max) == (0.5, 0.25, 2.5)
    assert effect.default.sky_intensity_scale == 3.0
    scattering = effect.light_scattering
    assert scattering.enable is True
    assert np.allclose(scattering.color, [0.5, 0.75, 1.0])
    assert scattering.depth_scale == 4.0
    assert scattering.in_scattering_scale == 20.0
    assert (scattering.rayleigh, scattering.mie, scattering.g) == (0.2, 0.05, 0.5)
    assert (scattering.z_near, scattering.z_far) == (10.0, 500.0)
    assert scattering.far_near_scale[1] == 10.0
    assert scattering.ray_mie_ray2_mie2[0] == 0.2


def test_load_xml_without_scattering_keeps_it_disabled():
    effect = SceneEffect()
    effect.load_xml(
        "<SceneEffect.prm.xml><HDR><Category><Basic><Param>"
        "<Middle_Gray>0.5</Middle_Gray></Param></Basic></Category></HDR></SceneEffect.prm.xml>"
    )
    assert effect.hdr.middle_gray == 0.5
    assert effect.hdr.lum_max == 1.74
    assert effect.light_scattering.enable is False


def test_load_xml_other_root_is_ignored():
    effect = SceneEffect()
    effect.load_xml("<Other><HDR/></Other>")
    assert effect.hdr.middle_gray == 0.37


def test_load_xml_malformed_raises():
    with pytest.raises(ValueError):
        SceneEffect().load_xml("<SceneEffect.prm.xml>")


def test_compute_before_near_plane_has_no_scattering():
    scattering = LightScattering()
    extinction, in_scattering = scattering.compute(
        [0.0, 0.0, -1.0], [0.0, 0.0, -1.0], [0.0, 0.0, 0.0], [0.0, 1.0, 0.0]
    )
    assert extinction == pytest.approx(1.0)
    assert in_scattering == pytest.approx(0.0)


def test_compute_extinction_decreases_with_depth():
    scattering = LightScattering()
    light = [0.0, 1.0, 0.0]
    results = [
        scattering.compute([0.0, 0.0, -d], [0.0, 0.0, -d], [0.0, 0.0, 0.0], light)
        for d in (100.0, 300.0, 600.0)
    ]
    extinctions = [e for e, _ in results]
    assert extinctions[0] > extinctions[1] > extinctions[2]
    assert all(0.0 < e < 1.0 for e in extinctions)
    assert all(s > 0.0 for _, s in results)


def test_compute_without_density_raises():
    scattering = LightScattering(rayleigh=0.0, mie=0.0)
    with pytest.raises(ValueError):
        scattering.compute([0, 0, -100], [0, 0, -100], [0, 0, 0], [0, 1, 0])