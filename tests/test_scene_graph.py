import numpy as np
import pytest

from glowbox.scene_graph import (
    SceneNode,
    SceneNodeType,
    print_node,
    update_node_transformations,
)


def _chain(depth):
    root = SceneNode()
    node = root
    for _ in range(depth):
        child = SceneNode()
        node.add_child(child)
        node = child
    return root, node


def test_defaults():
    node = SceneNode()
    assert node.vertex_array_object_id == -1
    assert node.vao_index_count == 0
    assert node.node_type is SceneNodeType.GEOMETRY
    assert tuple(node.scale) == (1.0, 1.0, 1.0)
    assert node.children == []


def test_total_children_counts_all_levels():
    root = SceneNode()
    a, b = SceneNode(), SceneNode()
    root.add_child(a)
    root.add_child(b)
    a.add_child(SceneNode())
    a.children[0].add_child(SceneNode())
    assert root.total_children() == 4
    assert a.total_children() == 2
    assert b.total_children() == 0
    assert len(list(root.walk())) == root.total_children() + 1


def test_describe_default_node():
    expected = (
        "SceneNode {\n"
        "    Child count: 0\n"
        "    Rotation: (0.000000, 0.000000, 0.000000)\n"
        "    Location: (0.000000, 0.000000, 0.000000)\n"
        "    Reference point: (0.000000, 0.000000, 0.000000)\n"
        "    VAO ID: -1\n"
        "}\n"
    )
    assert SceneNode().describe() == expected


def test_print_node_writes_description(capsys):
    node = SceneNode(position=(1.5, 2.0, -3.0), vertex_array_object_id=7)
    node.add_child(SceneNode())
    print_node(node)
    out = capsys.readouterr().out
    assert out == node.describe()
    assert "Child count: 1" in out
    assert "Location: (1.500000, 2.000000, -3.000000)" in out
    assert "VAO ID: 7" in out


def test_local_transform_default_is_identity():
    assert np.allclose(SceneNode().local_transform(), np.identity(4))


def test_local_transform_translation():
    node = SceneNode(position=(3.0, -1.0, 2.0))
    point = node.local_transform() @ np.array([0.0, 0.0, 0.0, 1.0])
    assert np.allclose(point[:3], [3.0, -1.0, 2.0])


def test_reference_point_is_fixed_under_rotation_and_scale():
    node = SceneNode(rotation=(0.3, 1.2, -0.7), scale=(2.0, 3.0, 0.5), reference_point=(1.0, 2.0, 3.0))
    point = node.local_transform() @ np.array([1.0, 2.0, 3.0, 1.0])
    assert np.allclose(point[:3], [1.0, 2.0, 3.0])


def test_update_propagates_model_matrices():
    root, leaf = _chain(3)
    root.position = (1.0, 0.0, 0.0)
    root.children[0].position = (0.0, 2.0, 0.0)
    leaf.position = (0.0, 0.0, 4.0)
    update_node_transformations(root, np.identity(4), np.identity(4))
    origin = leaf.model_matrix @ np.array([0.0, 0.0, 0.0, 1.0])
    assert np.allclose(origin[:3], [1.0, 2.0, 4.0])


def test_current_matrix_is_view_times_model():
    root = SceneNode(position=(1.0, 2.0, 3.0), rotation=(0.1, 0.2, 0.3))
    child = SceneNode(position=(-1.0, 0.5, 0.0), scale=(2.0, 2.0, 2.0))
    root.add_child(child)
    view = np.arange(16, dtype=float).reshape(4, 4) + np.identity(4)
    update_node_transformations(root, np.identity(4), view)
    for node in root.walk():
        assert np.allclose(node.current_transformation_matrix, view @ node.model_matrix)
    assert np.allclose(child.model_matrix, root.model_matrix @ child.local_transform())


def test_rotation_about_y_preserves_length():
    node = SceneNode(rotation=(0.0, 0.9, 0.0))
    moved = node.local_transform() @ np.array([1.0, 0.0, 0.0, 1.0])
    assert moved[1] == pytest.approx(0.0)
    assert np.linalg.norm(moved[:3]) == pytest.approx(1.0)