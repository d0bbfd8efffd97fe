"""Packing of light map textures into texture atlases."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

MAX_ATLAS_SIZE = 2048


@dataclass
class Texture:
    """A rectangular texture; ``x`` and ``y`` hold its place inside an atlas."""

    name: str
    width: int
    height: int
    x: int = 0
    y: int = 0


@dataclass
class Atlas:
    """A group of textures packed into one ``width`` by ``height`` image."""

    name: str = ""
    textures: list[Texture] = field(default_factory=list)
    width: int = 0
    height: int = 0


class _Node:
    """Node of the binary space-partitioning tree used while packing."""

    __slots__ = ("x", "y", "width", "height", "texture", "left", "right")

    def __init__(self, x: int = 0, y: int = 0, width: int = 0, height: int = 0) -> None:
        self.x = x
        self.y = y
        self.width = width
        self.height = height
        self.texture: Texture | None = None
        self.left: _Node | None = None
        self.right: _Node | None = None

    def insert(self, texture: Texture) -> bool:
        """Place ``texture`` in the first free spot, depth first, left before right."""
        stack = [self]
        while stack:
            node = stack.pop()

            if node.left is not None and node.right is not None:
                stack.append(node.right)
                stack.append(node.left)
                continue

            if (
                node.texture is not None
                or texture.width > node.width
                or texture.height > node.height
            ):
                continue

            if texture.width == node.width and texture.height == node.height:
                node.texture = texture
                return True

            if node.width - texture.width > node.height - texture.height:
                node.left = _Node(node.x, node.y, texture.width, node.height)
                node.right = _Node(
                    node.x + texture.width, node.y, node.width - texture.width, node.height
                )
            else:
                node.left = _Node(node.x, node.y, node.width, texture.height)
                node.right = _Node(
                    node.x, node.y + texture.height, node.width, node.height - texture.height
                )

            stack.append(node.left)

        return False

    def occupied(self) -> Iterator[_Node]:
        """Yield the nodes holding a texture, in depth-first order."""
        stack = [self]
        while stack:
            node = stack.pop()
            if node.texture is not None:
                yield node
            elif node.left is not None and node.right is not None:
                stack.append(node.right)
                stack.append(node.left)

    def fill_ratio(self) -> float:
        used = sum(n.texture.width * n.texture.height for n in self.occupied())
        return used / max(1, self.width * self.height)


def _pack_one(pending: list[Texture]) -> tuple[Atlas, list[Texture]]:
    max_size = MAX_ATLAS_SIZE
    width = height = MAX_ATLAS_SIZE

    for texture in pending:
        max_size = max(texture.width, texture.height, max_size)
        width = min(width, texture.width)
        height = min(height, texture.height)

    best = _Node()

    while True:
        candidate = _Node(width=width, height=height)

        all_inserted = True
        for texture in pending:
            all_inserted &= candidate.insert(texture)

        if all_inserted:
            # Larger resolutions would only waste space, so stop here.
            new_ratio = candidate.fill_ratio()
            if new_ratio == 1.0 or new_ratio > best.fill_ratio():
                best = candidate
            break

        best = candidate

        if width >= max_size and height >= max_size:
            break

        if width < height:
            width *= 2
        else:
            height *= 2

    placed: set[int] = set()
    for node in best.occupied():
        node.texture.x = node.x
        node.texture.y = node.y
        placed.add(id(node.texture))

    atlas = Atlas(
        textures=[t for t in pending if id(t) in placed],
        width=best.width,
        height=best.height,
    )
    remaining = [t for t in pending if id(t) not in placed]
    return atlas, remaining


def create_atlases(textures: Iterable[Texture]) -> list[Atlas]:
    """Pack textures into as few atlases as the packer finds.

    The textures are given their positions in place; the caller's sequence
    is left unchanged.
    """
    pending = sorted(textures, key=lambda t: t.width * t.height, reverse=True)

    for texture in pending:
        if texture.width <= 0 or texture.height <= 0:
            raise ValueError(
                f"texture {texture.name!r} has invalid size {texture.width}x{texture.height}"
            )

    atlases: list[Atlas] = []
    while pending:
        atlas, pending = _pack_one(pending)
        atlases.append(atlas)
    return atlases