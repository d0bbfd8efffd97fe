"""Where stage resources live and how their texture resolutions are recovered."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import PurePosixPath

from hedgebake.archive_layout import AtlasEntry

ARCHIVE_SUFFIX = ".ar.00"
SECTOR_COUNT = 100

FLOAT_BITMAP_FORMAT = "R32G32B32A32_FLOAT"
BYTE_BITMAP_FORMAT = "R8G8B8A8_UNORM"

_FLOAT_SOURCE_FORMATS = frozenset(
    {
        "R32G32B32A32_FLOAT",
        "R32G32B32_FLOAT",
        "R16G16B16A16_FLOAT",
        "R32G32_FLOAT",
        "R11G11B10_FLOAT",
        "R16G16_FLOAT",
        "R32_FLOAT",
        "BC6H_UF16",
        "BC6H_SF16",
    }
)

# Texture name suffixes tried in order; the first three are quarter-size levels.
_RESOLUTION_SUFFIXES = (
    "-level2",
    "_sg-level2",
    "_occlusion-level2",
    "_sg",
    "_occlusion",
    "",
)
_LEVEL2_SUFFIX_COUNT = 3
_LEVEL2_SCALE = 4


def _stage_type(stage_name: str) -> str:
    index = stage_name.find("Act")
    if index == -1 or index + 3 >= len(stage_name):
        return ""
    type_char = stage_name[index + 3]
    return type_char if type_char in ("D", "N") else ""


def _stage_region(stage_name: str) -> str:
    index = stage_name.find("_")
    if index == -1:
        return ""
    region = stage_name[index + 1:]

    sub = region.find("Sub")
    if sub != -1:
        region = region[:sub] + region[sub + 3:]

    for suffix in ("_", "Act1", "Act2", "Evil"):
        position = region.find(suffix)
        if position != -1:
            region = region[:position]

    return region


def unleashed_archive_names(stage_name: str) -> list[str]:
    """Archives, relative to the game root, loaded for a stage without its own archive.

    They are listed in load order; later archives take priority.
    """
    names = [stage_name + ARCHIVE_SUFFIX, "#" + stage_name + ARCHIVE_SUFFIX]

    stage_type = _stage_type(stage_name)
    region = _stage_region(stage_name)

    if region:
        names.append(f"CmnAct_{region}{ARCHIVE_SUFFIX}")
        if stage_type:
            names.append(f"CmnAct{stage_type}_Terrain_{region}{ARCHIVE_SUFFIX}")
        names.append(f"Cmn{region}{ARCHIVE_SUFFIX}")

    return names


def lost_world_sector_names(stage_name: str) -> list[str]:
    """File names of every terrain sector package a stage may have."""
    return [f"{stage_name}_trr_s{index:02d}.pac" for index in range(SECTOR_COUNT)]


def original_resolution(
    instance_name: str, resolutions: Mapping[str, tuple[int, int]]
) -> int | None:
    """Full light map resolution of an instance from known (width, height) sizes.

    Returns None when no texture of the instance is known.
    """
    for position, suffix in enumerate(_RESOLUTION_SUFFIXES):
        size = resolutions.get(instance_name + suffix)
        if size is None:
            continue
        width, height = size
        resolution = max(width, height)
        if position < _LEVEL2_SUFFIX_COUNT:
            resolution *= _LEVEL2_SCALE
        return resolution
    return None


def expand_atlas_resolutions(
    resolutions: Mapping[str, tuple[int, int]],
    atlases: Iterable[tuple[str, Iterable[AtlasEntry]]],
) -> dict[str, tuple[int, int]]:
    """Add the pixel sizes of textures packed in atlases of known size.

    ``atlases`` holds (atlas name, entries) pairs; atlases of unknown size are
    skipped.  A new mapping is returned and ``resolutions`` is left unchanged.
    """
    expanded = dict(resolutions)
    for atlas_name, entries in atlases:
        size = expanded.get(atlas_name)
        if size is None:
            continue
        atlas_width, atlas_height = size
        for entry in entries:
            expanded[entry.name] = (
                int(atlas_width * entry.width),
                int(atlas_height * entry.height),
            )
    return expanded


def float_bitmap_format(format_name: str) -> str:
    """Pixel format a texture of ``format_name`` is decoded into."""
    name = format_name.upper()
    if name.startswith("DXGI_FORMAT_"):
        name = name[len("DXGI_FORMAT_"):]
    return FLOAT_BITMAP_FORMAT if name in _FLOAT_SOURCE_FORMATS else BYTE_BITMAP_FORMAT


def preferred_mip_level(alpha_all_opaque: bool, mip_levels: int) -> int:
    """Mip level read from a texture: a smaller one when alpha does not matter."""
    if mip_levels < 1:
        raise ValueError(f"a texture needs at least one mip level, got {mip_levels}")
    return min(2, mip_levels - 1) if alpha_all_opaque else 0


def stage_name_from_path(path: str) -> str:
    """Stage name: the last path component without its extension."""
    normalized = path.replace("\\", "/").rstrip("/")
    if not normalized:
        raise ValueError(f"path {path!r} names no stage")
    return PurePosixPath(normalized).stem