"""The desert scene: window settings, scene construction and per-frame updates."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field

import numpy as np

from glowbox.mesh import Mesh
from glowbox.scene_graph import SceneNode, SceneNodeType, update_node_transformations
from glowbox.transforms import perspective, rotate, translate

__all__ = [
    "MESH_NAMES",
    "CommandLineOptions",
    "DesertScene",
    "WindowSettings",
    "build_scene",
]

# Order in which the mesh buffers are generated; a node's vertex array id is
# its mesh's 1-based position in this sequence.
MESH_NAMES = (
    "cactus_flower",
    "cactus",
    "terrain",
    "rock01",
    "rock02",
    "rock03",
    "bizon_bones",
    "bizon_skull",
)

_LIGHT_RADIUS = 4.0
_LIGHT_SPEED = 0.5
_LIGHT_CENTRE = (11.0, 3.0, -3.0)

_CAMERA_POSITION = (-40.0, 30.0, 170.0)
_CAMERA_PITCH = 0.4
_LOOK_ROTATION = 0.0
_FIELD_OF_VIEW_DEGREES = 80.0
_NEAR_PLANE = 0.1
_FAR_PLANE = 350.0


@dataclass(frozen=True)
class WindowSettings:
    """Size, title and buffer options of the game window."""

    width: int = 1366
    height: int = 768
    title: str = "Glowbox"
    resizable: bool = False
    samples: int = 4

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class CommandLineOptions:
    """Switches chosen on the command line."""

    enable_music: bool = False
    enable_autoplay: bool = False


# (name, mesh, scale, position, rotation) for every prop placed on the terrain.
_PROPS = (
    ("cactus_flower", "cactus_flower", 0.7, (11.0, 1.0, -8.0), (0.0, 0.55, 0.0)),
    ("cactus01", "cactus", 0.7, (16.0, 1.0, 0.5), (0.0, -0.85, 0.0)),
    ("cactus02", "cactus", 0.7, (11.0, 1.0, 1.0), (0.0, 0.3, 0.0)),
    ("rock01", "rock01", 0.7, (15.5, -0.5, -3.0), (0.0, 0.6, 0.0)),
    ("rock02", "rock02", 2.0, (16.0, 1.0, 6.0), (0.0, 0.0, 0.0)),
    ("rock02_1", "rock02", 2.0, (4.0, 1.0, 10.0), (0.0, 0.0, 0.0)),
    ("rock02_2", "rock02", 2.15, (2.0, 1.0, -9.2), (0.0, 0.0, 0.0)),
    ("rock03", "rock03", 2.0, (-4.0, 1.5, 0.0), (0.0, 0.5, 0.0)),
    ("bizon_bones", "bizon_bones", 0.25, (7.0, 0.0, -4.0), (0.0, 0.7, 0.0)),
    ("bizon_skull", "bizon_skull", 0.45, (10.0, 0.0, -3.8), (0.0, -0.1, 0.9)),
)


@dataclass(eq=False)
class DesertScene:
    """Scene graph of the desert with a light circling above the props."""

    root: SceneNode
    terrain: SceneNode
    light: SceneNode
    nodes: dict[str, SceneNode]
    window: WindowSettings = field(default_factory=WindowSettings)
    camera_position: tuple[float, float, float] = _CAMERA_POSITION
    angle: float = 0.0

    def view_projection(self) -> np.ndarray:
        """Projection times camera transform for the fixed viewpoint."""
        projection = perspective(
            math.radians(_FIELD_OF_VIEW_DEGREES),
            self.window.aspect_ratio,
            _NEAR_PLANE,
            _FAR_PLANE,
        )
        camera = (
            rotate(_CAMERA_PITCH, (1.0, 0.0, 0.0))
            @ rotate(_LOOK_ROTATION, (0.0, 1.0, 0.0))
            @ translate(-np.asarray(self.camera_position, dtype=np.float64))
        )
        return projection @ camera

    def update(self, time_delta: float) -> None:
        """Advance the light along its circle and recompute every node's matrices."""
        self.angle += float(time_delta) * _LIGHT_SPEED
        cx, cy, cz = _LIGHT_CENTRE
        self.light.position = (
            cx + _LIGHT_RADIUS * math.cos(self.angle),
            cy,
            cz + _LIGHT_RADIUS * math.sin(self.angle),
        )
        update_node_transformations(self.root, np.identity(4), self.view_projection())

    def light_position(self) -> tuple[float, float, float]:
        """World position of the light as of the last update."""
        world = self.light.model_matrix @ np.array([0.0, 0.0, 0.0, 1.0])
        return (float(world[0]), float(world[1]), float(world[2]))

    def summary(self) -> str:
        """One-line description of the scene's size."""
        return f"Initialized scene with {self.root.total_children()} SceneNodes."


def _require(mapping: Mapping[str, object], kind: str) -> None:
    missing = [name for name in MESH_NAMES if name not in mapping]
    if missing:
        raise ValueError(f"missing {kind} for: {', '.join(missing)}")


def build_scene(
    meshes: Mapping[str, Mesh], texture_ids: Mapping[str, int]
) -> DesertScene:
    """Assemble the desert scene from loaded meshes and their texture ids.

    Both mappings are keyed by the names in ``MESH_NAMES``.
    """
    _require(meshes, "meshes")
    _require(texture_ids, "texture ids")
    vao_ids = {name: number for number, name in enumerate(MESH_NAMES, start=1)}

    def textured(mesh_name: str, size: float, position, rotation) -> SceneNode:
        return SceneNode(
            scale=(size, size, size),
            position=position,
            rotation=rotation,
            node_type=SceneNodeType.TEXTURE_MAP,
            texture_id=int(texture_ids[mesh_name]),
            vertex_array_object_id=vao_ids[mesh_name],
            vao_index_count=meshes[mesh_name].index_count(),
        )

    root = SceneNode()
    terrain = textured("terrain", 10.0, (0.0, 0.0, 0.0), (0.0, 180.0, 0.0))
    root.add_child(terrain)

    nodes = {"root": root, "terrain": terrain}
    for node_name, mesh_name, size, position, rotation in _PROPS:
        node = textured(mesh_name, size, position, rotation)
        terrain.add_child(node)
        nodes[node_name] = node

    light = SceneNode(
        node_type=SceneNodeType.POINT_LIGHT,
        id=0,
        color=(255.0, 255.0, 255.0),
        position=(12.0, 4.0, -1.0),
    )
    terrain.add_child(light)
    nodes["light"] = light

    return DesertScene(root=root, terrain=terrain, light=light, nodes=nodes)