import random

import pytest

from hedgebake.atlas import Atlas, Texture, create_atlases


def _overlaps(a, b):
    return not (
        a.x + a.width <= b.x
        or b.x + b.width <= a.x
        or a.y + a.height <= b.y
        or b.y + b.height <= a.y
    )


def _check_atlas(atlas):
    for texture in atlas.textures:
        assert texture.x >= 0 and texture.y >= 0
        assert texture.x + texture.width <= atlas.width
        assert texture.y + texture.height <= atlas.height
    for i, a in enumerate(atlas.textures):
        for b in atlas.textures[i + 1:]:
            assert not _overlaps(a, b)


def test_empty_input_gives_no_atlases():
    assert create_atlases([]) == []


def test_single_texture_fills_its_atlas():
    texture = Texture("stage_a", 64, 64)
    atlases = create_atlases([texture])
    assert len(atlases) == 1
    assert atlases[0].width == 64 and atlases[0].height == 64
    assert atlases[0].textures == [texture]
    assert (texture.x, texture.y) == (0, 0)


def test_equal_squares_pack_without_waste():
    textures = [Texture(f"t{i}", 32, 32) for i in range(4)]
    atlases = create_atlases(textures)
    assert len(atlases) == 1
    atlas = atlases[0]
    assert atlas.width * atlas.height == sum(t.width * t.height for t in textures)
    _check_atlas(atlas)
    assert len({(t.x, t.y) for t in atlas.textures}) == 4


def test_full_size_textures_each_get_an_atlas():
    textures = [Texture(f"big{i}", 2048, 2048) for i in range(5)]
    atlases = create_atlases(textures)
    assert len(atlases) == 5
    for atlas, texture in zip(atlases, textures):
        assert atlas.textures == [texture]
        assert (atlas.width, atlas.height) == (2048, 2048)


def test_textures_ordered_by_area_descending():
    textures = [Texture("small", 8, 8), Texture("large", 64, 64), Texture("mid", 32, 16)]
    atlases = create_atlases(textures)
    names = [t.name for atlas in atlases for t in atlas.textures]
    assert names == ["large", "mid", "small"]


def test_input_sequence_is_not_mutated():
    textures = [Texture("a", 8, 8), Texture("b", 16, 16)]
    create_atlases(textures)
    assert [t.name for t in textures] == ["a", "b"]


def test_oversized_texture_still_placed():
    texture = Texture("wide", 4096, 16)
    atlases = create_atlases([texture])
    assert len(atlases) == 1
    assert atlases[0].width >= texture.width
    assert atlases[0].height >= texture.height
    _check_atlas(atlases[0])


@pytest.mark.parametrize("seed", [1, 2, 3, 4])
def test_random_textures_are_packed_once_without_overlap(seed):
    rng = random.Random(seed)
    sizes = [4, 8, 16, 32, 64, 128, 256]
    textures = [
        Texture(f"tex{i}", rng.choice(sizes), rng.choice(sizes)) for i in range(40)
    ]
    atlases = create_atlases(textures)

    packed = [id(t) for atlas in atlases for t in atlas.textures]
    assert sorted(packed) == sorted(id(t) for t in textures)
    for atlas in atlases:
        assert atlas.textures
        _check_atlas(atlas)


def test_zero_sized_texture_rejected():
    with pytest.raises(ValueError):
        create_atlases([Texture("bad", 0, 16)])


def test_atlas_defaults():
    atlas = Atlas()
    assert atlas.textures == [] and atlas.width == 0 and atlas.name == ""