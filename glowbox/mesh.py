"""Triangle mesh container shared by the geometry generators and loaders."""

from __future__ import annotations

from dataclasses import dataclass, field

Vec2 = tuple[float, float]
Vec3 = tuple[float, float, float]


@dataclass
class Mesh:
    """Per-vertex attribute lists plus the index list that forms the triangles."""

    vertices: list[Vec3] = field(default_factory=list)
    normals: list[Vec3] = field(default_factory=list)
    texture_coordinates: list[Vec2] = field(default_factory=list)
    tangents: list[Vec3] = field(default_factory=list)
    bitangents: list[Vec3] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)

    def index_count(self) -> int:
        """Number of indices to draw."""
        return len(self.indices)