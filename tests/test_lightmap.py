import numpy as np
import pytest

from hedgebake.lightmap import (
    he1_input_paths,
    he1_level_size,
    he2_input_paths,
    level_size,
    lightmap_names,
    merge_he1_lightmap,
)


def test_level_zero_keeps_size():
    assert level_size(256, 128, 0) == (256, 128)


def test_level_halves_size():
    assert level_size(1024, 512, 1) == (512, 256)


def test_level_size_never_below_four():
    assert level_size(16, 8, 5) == (4, 4)


def test_level_size_rejects_negative_level():
    with pytest.raises(ValueError):
        level_size(64, 64, -1)


def test_he1_level_size_uses_larger_of_pair():
    assert he1_level_size(64, 32, 32, 128, 0) == (64, 128)


def test_he1_level_size_matches_level_size_of_maximum():
    assert he1_level_size(64, 32, 32, 128, 2) == level_size(64, 128, 2)


def test_merge_replaces_alpha_only():
    rng = np.random.default_rng(1)
    light = rng.integers(0, 256, size=(4, 5, 4), dtype=np.uint8)
    shadow = rng.integers(0, 256, size=(4, 5), dtype=np.uint8)

    merged = merge_he1_lightmap(light, shadow)

    assert merged.shape == light.shape
    assert np.array_equal(merged[..., :3], light[..., :3])
    assert np.array_equal(merged[..., 3], shadow)


def test_merge_leaves_input_untouched():
    light = np.zeros((2, 2, 4), dtype=np.uint8)
    shadow = np.full((2, 2), 200, dtype=np.uint8)
    merge_he1_lightmap(light, shadow)
    assert not light.any()


def test_merge_rejects_mismatched_shadow():
    with pytest.raises(ValueError):
        merge_he1_lightmap(np.zeros((4, 4, 4), np.uint8), np.zeros((4, 3), np.uint8))


def test_merge_rejects_non_bgra_light():
    with pytest.raises(ValueError):
        merge_he1_lightmap(np.zeros((4, 4, 3), np.uint8), np.zeros((4, 4), np.uint8))


def test_lightmap_names_sg():
    assert lightmap_names("stg", 2, True) == ("stg_sg-level2", "stg_occlusion-level2")


def test_lightmap_names_plain():
    assert lightmap_names("stg", 0, False) == ("stg-level0", "stg_occlusion-level0")


def test_he2_paths_prefer_sg(tmp_path):
    (tmp_path / "inst_sg.dds").write_bytes(b"")
    (tmp_path / "inst.dds").write_bytes(b"")
    (tmp_path / "inst_occlusion.dds").write_bytes(b"")
    assert he2_input_paths(tmp_path, "inst") == (
        tmp_path / "inst_sg.dds",
        tmp_path / "inst_occlusion.dds",
    )


def test_he2_paths_fall_back_to_plain(tmp_path):
    (tmp_path / "inst.dds").write_bytes(b"")
    (tmp_path / "inst_occlusion.dds").write_bytes(b"")
    assert he2_input_paths(tmp_path, "inst") == (
        tmp_path / "inst.dds",
        tmp_path / "inst_occlusion.dds",
    )


def test_he2_paths_missing_occlusion(tmp_path):
    (tmp_path / "inst_sg.dds").write_bytes(b"")
    assert he2_input_paths(tmp_path, "inst") is None


def test_he1_paths(tmp_path):
    (tmp_path / "inst_lightmap.png").write_bytes(b"")
    (tmp_path / "inst_shadowmap.png").write_bytes(b"")
    assert he1_input_paths(tmp_path, "inst") == (
        tmp_path / "inst_lightmap.png",
        tmp_path / "inst_shadowmap.png",
    )


def test_he1_paths_missing(tmp_path):
    (tmp_path / "inst_lightmap.png").write_bytes(b"")
    assert he1_input_paths(tmp_path, "inst") is None