"""Shader program table and preprocessing of shader source text."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from dataclasses import dataclass

SHADER_VERSION = "#version 330"


class ShaderStage(enum.Enum):
    VERTEX = "vertex"
    GEOMETRY = "geometry"
    FRAGMENT = "fragment"


@dataclass(frozen=True)
class ShaderProgramInfo:
    """A named program; each shader is (stage, resource name, defines or None)."""

    name: str
    shaders: tuple[tuple[ShaderStage, str, tuple[str, ...] | None], ...]


def _program(name: str, *shaders) -> ShaderProgramInfo:
    return ShaderProgramInfo(name, tuple(shaders))


_V, _G, _F = ShaderStage.VERTEX, ShaderStage.GEOMETRY, ShaderStage.FRAGMENT

PROGRAMS: dict[str, ShaderProgramInfo] = {
    info.name: info
    for info in (
        _program(
            "CopyTexture",
            (_V, "VertexShader_CopyTexture", None),
            (_F, "FragmentShader_CopyTexture", None),
        ),
        _program(
            "ToneMap",
            (_V, "VertexShader_ToneMap", None),
            (_F, "FragmentShader_ToneMap", None),
        ),
        _program(
            "Im3d_Points",
            (_V, "Shader_Im3d", ("POINTS", "VERTEX_SHADER")),
            (_F, "Shader_Im3d", ("POINTS", "FRAGMENT_SHADER")),
        ),
        _program(
            "Im3d_Lines",
            (_V, "Shader_Im3d", ("LINES", "VERTEX_SHADER")),
            (_G, "Shader_Im3d", ("LINES", "GEOMETRY_SHADER")),
            (_F, "Shader_Im3d", ("LINES", "FRAGMENT_SHADER")),
        ),
        _program(
            "Im3d_Triangles",
            (_V, "Shader_Im3d", ("TRIANGLES", "VERTEX_SHADER")),
            (_F, "Shader_Im3d", ("TRIANGLES", "FRAGMENT_SHADER")),
        ),
        _program(
            "Billboard",
            (_V, "VertexShader_Billboard", None),
            (_F, "FragmentShader_Billboard", None),
        ),
    )
}


def build_shader_source(defines: Iterable[str] | None, shader: str) -> str:
    """Prefix the version line and defines, dropping the shader's own version marker.

    With no defines (None) the shader text is returned as it is.
    """
    if defines is None:
        return shader

    header = SHADER_VERSION + "\n" + "".join(f"#define {d}\n" for d in defines)

    # The marker is searched for only where at least one character follows it.
    index = shader.find(SHADER_VERSION, 0, max(0, len(shader) - 1))
    if index != -1:
        shader = shader[index + len(SHADER_VERSION):]

    return header + shader


def program_info(name: str) -> ShaderProgramInfo:
    """Look up a shader program by name."""
    try:
        return PROGRAMS[name]
    except KeyError:
        raise KeyError(f"unknown shader program {name!r}") from None