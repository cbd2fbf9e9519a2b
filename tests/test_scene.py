import math

import numpy as np
import pytest

from glowbox.mesh import Mesh
from glowbox.scene import (
    MESH_NAMES,
    CommandLineOptions,
    WindowSettings,
    build_scene,
)
from glowbox.scene_graph import SceneNodeType


def _meshes():
    return {
        name: Mesh(indices=list(range(3 * (n + 1))))
        for n, name in enumerate(MESH_NAMES)
    }


def _textures():
    return {name: 100 + n for n, name in enumerate(MESH_NAMES)}


@pytest.fixture
def scene():
    return build_scene(_meshes(), _textures())


def test_window_settings_defaults():
    settings = WindowSettings()
    assert (settings.width, settings.height) == (1366, 768)
    assert settings.title == "Glowbox"
    assert settings.resizable is False
    assert settings.samples == 4
    assert settings.aspect_ratio == pytest.approx(1366 / 768)


def test_command_line_options_defaults():
    options = CommandLineOptions()
    assert options.enable_music is False
    assert options.enable_autoplay is False


def test_scene_structure(scene):
    assert scene.root.children == [scene.terrain]
    assert len(scene.terrain.children) == 11
    assert scene.terrain.children[-1] is scene.light
    assert scene.summary() == "Initialized scene with 12 SceneNodes."


def test_light_node(scene):
    assert scene.light.node_type is SceneNodeType.POINT_LIGHT
    assert tuple(scene.light.color) == (255.0, 255.0, 255.0)
    assert tuple(scene.light.position) == (12.0, 4.0, -1.0)


def test_props_use_mesh_index_counts_and_textures(scene):
    meshes = _meshes()
    textures = _textures()
    assert scene.nodes["cactus01"].vao_index_count == meshes["cactus"].index_count()
    assert scene.nodes["cactus02"].texture_id == textures["cactus"]
    assert scene.nodes["terrain"].vao_index_count == meshes["terrain"].index_count()
    for name in ("rock02", "rock02_1", "rock02_2"):
        assert scene.nodes[name].vertex_array_object_id == scene.nodes["rock02"].vertex_array_object_id
    textured = [n for n in scene.terrain.children if n is not scene.light]
    assert all(n.node_type is SceneNodeType.TEXTURE_MAP for n in textured)


def test_missing_mesh_raises():
    meshes = _meshes()
    del meshes["rock03"]
    with pytest.raises(ValueError, match="rock03"):
        build_scene(meshes, _textures())


def test_missing_texture_raises():
    textures = _textures()
    del textures["terrain"]
    with pytest.raises(ValueError, match="terrain"):
        build_scene(_meshes(), textures)


def test_update_moves_light_on_circle(scene):
    for delta in (0.3, 1.7, 2.5):
        scene.update(delta)
        x, y, z = scene.light.position
        assert y == pytest.approx(3.0)
        assert math.hypot(x - 11.0, z + 3.0) == pytest.approx(4.0)


def test_zero_update_places_light_at_start(scene):
    scene.update(0.0)
    assert tuple(scene.light.position) == pytest.approx((15.0, 3.0, -3.0))


def test_update_accumulates_angle(scene):
    scene.update(1.0)
    scene.update(3.0)
    assert scene.angle == pytest.approx(2.0)


def test_camera_lies_on_projection_plane(scene):
    vp = scene.view_projection()
    clip = vp @ np.array([*scene.camera_position, 1.0])
    assert clip[3] == pytest.approx(0.0, abs=1e-9)


def test_update_sets_consistent_matrices(scene):
    scene.update(0.5)
    vp = scene.view_projection()
    np.testing.assert_allclose(scene.root.model_matrix, np.identity(4))
    for node in scene.root.walk():
        np.testing.assert_allclose(node.current_transformation_matrix, vp @ node.model_matrix)
    expected = scene.light.model_matrix[:3, 3]
    assert scene.light_position() == pytest.approx(tuple(expected))