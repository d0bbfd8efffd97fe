"""Layout of the texture archives and stage files written after a bake."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass

from hedgebake.atlas import Atlas

TERRAIN_GROUP_MARKER = "tg-"
STAGE_ARCHIVE_LEVEL = 2


@dataclass(frozen=True)
class AtlasEntry:
    """A texture's place in an atlas, as fractions of the atlas size."""

    name: str
    width: float
    height: float
    x: float
    y: float


def assign_atlas_names(atlases: Iterable[Atlas], keep_single: bool) -> list[str]:
    """Name the atlases in order and return the file name each is stored under.

    Atlases are numbered ``a0000``, ``a0001`` and so on.  With ``keep_single``
    an atlas holding one texture is stored under that texture's name instead,
    keeps no atlas name, and does not use up a number.
    """
    file_names: list[str] = []
    index = 0
    for atlas in atlases:
        if keep_single and len(atlas.textures) == 1:
            file_names.append(atlas.textures[0].name + ".dds")
            continue
        atlas.name = f"a{index:04d}"
        index += 1
        file_names.append(atlas.name + ".dds")
    return file_names


def atlas_uv_entries(atlas: Atlas) -> list[AtlasEntry]:
    """Texture rectangles of an atlas in normalised coordinates."""
    if atlas.width <= 0 or atlas.height <= 0:
        raise ValueError(f"atlas has invalid size {atlas.width}x{atlas.height}")
    return [
        AtlasEntry(
            name=texture.name,
            width=texture.width / atlas.width,
            height=texture.height / atlas.height,
            x=texture.x / atlas.width,
            y=texture.y / atlas.height,
        )
        for texture in atlas.textures
    ]


def gia_archive_name(index: int) -> str:
    """Name of the archive holding texture group ``index``."""
    return f"gia-{index}.ar"


def _directory_name(path: str) -> str:
    return os.path.basename(path.rstrip("/\\").replace("\\", "/"))


def resources_archive_path(stage_directory: str, is_unleashed: bool) -> str:
    """Path of the stage's resources archive."""
    stage_name = _directory_name(stage_directory)
    separator = "/../../#" if is_unleashed else "/"
    return f"{stage_directory}{separator}{stage_name}.ar.00"


def stage_add_pfd_path(stage_directory: str, stage_name: str, is_unleashed: bool) -> str:
    """Path of the packed file holding the texture groups below the top level."""
    directory = stage_directory
    if is_unleashed:
        directory += "/../../Additional/" + stage_name
    return directory + "/Stage-Add.pfd"


def gi_lim_payload() -> bytes:
    """Body of ``gi-lim.gil``: three mip flags (only level 2 set), padded to 4 bytes."""
    flags = bytes([False, False, True])
    return flags + b"\0" * (-len(flags) % 4)


def is_terrain_group_entry(name: str) -> bool:
    """Whether a packed file entry is terrain data that survives cleaning."""
    return TERRAIN_GROUP_MARKER in name


def goes_to_stage_archive(level: int) -> bool:
    """Whether a texture group of ``level`` belongs in Stage.pfd rather than Stage-Add.pfd."""
    return level == STAGE_ARCHIVE_LEVEL