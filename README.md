# glowbox

The scene logic of a small desert diorama renderer as a plain Python
library. It provides procedural meshes, glTF model loading, a scene graph
with hierarchical transforms, a free-fly camera, PNG texture decoding and
the keyframe timeline the scene is timed to. Matrices and vectors are
NumPy arrays, and nothing in the package needs a graphics context.

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `glowbox.mesh` holds `Mesh`. It is a dataclass with lists of
  `vertices`, `normals`, `texture_coordinates`, `tangents`, `bitangents`
  and `indices`. `index_count()` returns the number of indices.
- `glowbox.shapes`:
  - `cube(scale, texture_scale, tiling_textures, inverted, texture_scale_3d)`
    builds an axis-aligned box centred on the origin, with normals,
    texture coordinates and tangents.
  - `generate_sphere(sphere_radius, slices, layers)` builds a UV sphere.
    It returns an empty mesh when `slices` or `layers` is not positive.
    A zero radius raises `ValueError`.
  - `compute_tangent_basis(vertices, uvs, normals)` returns
    `(tangents, bitangents)` for consecutive vertex triples.
  - `load_model(path)` reads a `.glb` or `.gltf` file. Buffers may be
    embedded, base64 data URIs, or files next to the model. It merges every
    mesh primitive into one `Mesh`:
    - triangle strips and fans are turned into triangle lists;
    - missing normals are computed from the faces;
    - the V texture coordinate is flipped.

    It raises `ModelLoadError`, a `ValueError`, on unreadable or malformed
    input.
- `glowbox.glfont` has `generate_text_geometry_buffer(text,
  character_height_over_width, total_text_width)`. It lays out one
  textured quad per character, for a single-row atlas of 128 glyphs.
- `glowbox.transforms`:
  - matrices: `translate`, `rotate` (angle in radians about an axis),
    `scale`, `perspective` and `ortho`;
  - quaternion helpers, on `(w, x, y, z)` arrays: `quat_from_euler`,
    `quat_multiply`, `quat_normalize` and `quat_to_matrix`.

  Matrices act on column vectors (`matrix @ point`).
- `glowbox.camera` has `Camera`. It takes key, mouse-button and cursor
  events through `handle_keyboard_inputs`, `handle_mouse_button_inputs`
  and `handle_cursor_pos_input`, using the `PRESS`/`RELEASE`, `KEY_*` and
  `MOUSE_BUTTON_LEFT` codes in the module. `update_camera(delta_time)`
  moves it with W/A/S/D (plane) and E/Q (up/down). It turns while the left
  button is dragged. `view_matrix()` returns the current view.
- `glowbox.timeutils`:
  - `FrameTimer(clock)` returns elapsed seconds between calls to
    `delta_seconds()`;
  - `get_time_delta_seconds()` does the same with a module-wide timer.
- `glowbox.image_loader`:
  - `load_png_file(file_name)` decodes an image with Pillow into a
    `PNGImage` (`width`, `height`, RGBA `pixels`), with the bottom row
    first. It raises `ImageLoadError` when decoding fails.
  - `flip_rows(pixels, width, height)` reverses the row order of packed
    RGBA data.
- `glowbox.scene_graph`:
  - `SceneNode` has a position, rotation, scale, reference point,
    node type (`SceneNodeType`: `GEOMETRY`, `POINT_LIGHT`, `TEXTURE_MAP`)
    and children. Its methods are `add_child`, `total_children`, `walk`,
    `local_transform` and `describe`.
  - `update_node_transformations(node, transformation_thus_far,
    view_transformation)` fills in `model_matrix` and
    `current_transformation_matrix` for a whole subtree.
  - `print_node` writes `describe()` to standard output.
- `glowbox.keyframes`:
  - `key_frames()` returns the track's `KeyFrame`s, each with a `time` and
    a `KeyFrameAction` (`BOTTOM` or `TOP`);
  - `key_frame_index_at(time)` gives the key frame in effect at a moment.
- `glowbox.scene`:
  - `build_scene(meshes, texture_ids)` assembles a `DesertScene`. It holds
    terrain with cacti, rocks, bison bones and a point light. Both mappings
    are keyed by the names in `MESH_NAMES`.
  - `DesertScene.update(time_delta)` moves the light along its circle and
    recomputes every node's matrices.
  - `view_projection()`, `light_position()` and `summary()` report on the
    scene.
  - `WindowSettings` and `CommandLineOptions` hold the window size, title
    and switches.

## Example

```python
import numpy as np

from glowbox.scene_graph import SceneNode, update_node_transformations
from glowbox.shapes import cube, generate_sphere
from glowbox.scene import MESH_NAMES, build_scene

sphere = generate_sphere(1.0, 40, 40)

root = SceneNode()
ball = SceneNode(position=(0.0, 2.0, 0.0))
root.add_child(ball)
update_node_transformations(root, np.identity(4), np.identity(4))
print(root.total_children(), sphere.index_count())
print(ball.model_matrix @ np.array([0.0, 0.0, 0.0, 1.0]))

scene = build_scene(
    {name: cube() for name in MESH_NAMES},
    {name: number for number, name in enumerate(MESH_NAMES, start=1)},
)
scene.update(0.5)
print(scene.summary())
print(scene.light_position())
```

## What it does not do

The package computes geometry, transforms and timing, but it does not put
anything on screen:

- It opens no window and issues no drawing calls.
- It compiles no shaders.
- It plays no music.

The texture ids and vertex array ids on scene nodes are plain numbers for
a renderer to use. There is no command to run: `CommandLineOptions` is only
a record of the switches, and nothing in the package parses a command
line.