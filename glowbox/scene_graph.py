"""Hierarchical scene nodes and the propagation of their transformations."""

from __future__ import annotations

import enum
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field

import numpy as np

from glowbox.transforms import rotate, scale, translate

__all__ = [
    "SceneNode",
    "SceneNodeType",
    "print_node",
    "update_node_transformations",
]

Vec3 = tuple[float, float, float]

_X_AXIS = (1.0, 0.0, 0.0)
_Y_AXIS = (0.0, 1.0, 0.0)
_Z_AXIS = (0.0, 0.0, 1.0)


class SceneNodeType(enum.Enum):
    """How the contents of a node are handled when rendering."""

    GEOMETRY = 0
    POINT_LIGHT = 1
    TEXTURE_MAP = 2


@dataclass(eq=False)
class SceneNode:
    """A node placed relative to its parent, optionally carrying drawable geometry."""

    children: list[SceneNode] = field(default_factory=list)
    position: Sequence[float] = (0.0, 0.0, 0.0)
    rotation: Sequence[float] = (0.0, 0.0, 0.0)
    scale: Sequence[float] = (1.0, 1.0, 1.0)
    reference_point: Sequence[float] = (0.0, 0.0, 0.0)
    current_transformation_matrix: np.ndarray = field(default_factory=lambda: np.identity(4))
    model_matrix: np.ndarray = field(default_factory=lambda: np.identity(4))
    vertex_array_object_id: int = -1
    vao_index_count: int = 0
    node_type: SceneNodeType = SceneNodeType.GEOMETRY
    id: int = 0
    color: Sequence[float] = (0.0, 0.0, 0.0)
    texture_id: int = 0

    def add_child(self, child: SceneNode) -> None:
        """Append ``child`` to this node's children."""
        self.children.append(child)

    def total_children(self) -> int:
        """Number of descendants, counted through every level."""
        return sum(1 + child.total_children() for child in self.children)

    def walk(self) -> Iterator[SceneNode]:
        """This node and all of its descendants, depth first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def local_transform(self) -> np.ndarray:
        """Transformation of this node relative to its parent."""
        position = np.asarray(self.position, dtype=np.float64)
        reference = np.asarray(self.reference_point, dtype=np.float64)
        rx, ry, rz = (float(v) for v in self.rotation)
        return (
            translate(position)
            @ translate(reference)
            @ rotate(ry, _Y_AXIS)
            @ rotate(rx, _X_AXIS)
            @ rotate(rz, _Z_AXIS)
            @ scale(self.scale)
            @ translate(-reference)
        )

    def describe(self) -> str:
        """Multi-line summary of the node's placement and geometry."""
        rx, ry, rz = (float(v) for v in self.rotation)
        px, py, pz = (float(v) for v in self.position)
        fx, fy, fz = (float(v) for v in self.reference_point)
        return (
            "SceneNode {\n"
            f"    Child count: {len(self.children)}\n"
            f"    Rotation: ({rx:f}, {ry:f}, {rz:f})\n"
            f"    Location: ({px:f}, {py:f}, {pz:f})\n"
            f"    Reference point: ({fx:f}, {fy:f}, {fz:f})\n"
            f"    VAO ID: {self.vertex_array_object_id}\n"
            "}\n"
        )


def update_node_transformations(
    node: SceneNode,
    transformation_thus_far: np.ndarray,
    view_transformation: np.ndarray,
) -> None:
    """Recompute model and model-view-projection matrices for a whole subtree."""
    model = np.asarray(transformation_thus_far, dtype=np.float64) @ node.local_transform()
    node.model_matrix = model
    node.current_transformation_matrix = np.asarray(view_transformation, dtype=np.float64) @ model
    for child in node.children:
        update_node_transformations(child, model, view_transformation)


def print_node(node: SceneNode) -> None:
    """Write the node's description to standard output."""
    print(node.describe(), end="")