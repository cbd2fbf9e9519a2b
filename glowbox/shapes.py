"""Procedural shapes (cube, sphere), tangent computation and glTF model loading."""

from __future__ import annotations

import base64
import json
import math
import struct
import urllib.parse
from collections.abc import Iterator, Sequence
from pathlib import Path

import numpy as np

from glowbox.mesh import Mesh, Vec2, Vec3

__all__ = [
    "ModelLoadError",
    "compute_tangent_basis",
    "cube",
    "generate_sphere",
    "load_model",
]


class ModelLoadError(ValueError):
    """Raised when a model file cannot be read or understood."""


def _sub3(a: Vec3, b: Vec3) -> Vec3:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _triples(items: Sequence) -> Iterator[tuple]:
    it = iter(items)
    return zip(it, it, it)


def compute_tangent_basis(
    vertices: Sequence[Vec3],
    uvs: Sequence[Vec2],
    normals: Sequence[Vec3],
) -> tuple[list[Vec3], list[Vec3]]:
    """Return per-vertex (tangents, bitangents), one pair per triangle corner.

    Triangles are taken as consecutive vertex triples; the normals are accepted
    for interface symmetry but do not affect the result.
    """
    if len(vertices) % 3:
        raise ValueError("vertex count must be a multiple of 3")
    if len(uvs) < len(vertices):
        raise ValueError("need one texture coordinate per vertex")

    tangents: list[Vec3] = []
    bitangents: list[Vec3] = []
    for (v0, v1, v2), (uv0, uv1, uv2) in zip(_triples(vertices), _triples(uvs)):
        dp1 = _sub3(v1, v0)
        dp2 = _sub3(v2, v0)
        du1 = (uv1[0] - uv0[0], uv1[1] - uv0[1])
        du2 = (uv2[0] - uv0[0], uv2[1] - uv0[1])

        det = du1[0] * du2[1] - du1[1] * du2[0]
        r = 1.0 / det if det else math.copysign(math.inf, det)
        tangent = tuple((p1 * du2[1] - p2 * du1[1]) * r for p1, p2 in zip(dp1, dp2))
        bitangent = tuple((p2 * du1[0] - p1 * du2[0]) * r for p1, p2 in zip(dp1, dp2))

        tangents.extend([tangent] * 3)
        bitangents.extend([bitangent] * 3)
    return tangents, bitangents


_CUBE_FACES = (
    (2, 3, 0, 1),  # bottom
    (4, 5, 6, 7),  # top
    (7, 5, 3, 1),  # right
    (4, 6, 0, 2),  # left
    (5, 4, 1, 0),  # back
    (6, 7, 2, 3),  # front
)

_CUBE_NORMALS: tuple[Vec3, ...] = (
    (0.0, -1.0, 0.0),
    (0.0, 1.0, 0.0),
    (1.0, 0.0, 0.0),
    (-1.0, 0.0, 0.0),
    (0.0, 0.0, -1.0),
    (0.0, 0.0, 1.0),
)

_CUBE_UVS: tuple[Vec2, ...] = ((0.0, 0.0), (0.0, 1.0), (1.0, 0.0), (1.0, 1.0))


def _cube_corner(index: int, scale: Vec3) -> Vec3:
    x, z, y = index & 1, (index >> 1) & 1, (index >> 2) & 1
    return tuple((c * 2 - 1) * 0.5 * s for c, s in zip((x, y, z), scale))


def cube(
    scale: Vec3 = (1.0, 1.0, 1.0),
    texture_scale: Vec2 = (1.0, 1.0),
    tiling_textures: bool = False,
    inverted: bool = False,
    texture_scale_3d: Vec3 = (1.0, 1.0, 1.0),
) -> Mesh:
    """Build an axis-aligned box centred on the origin with the given extents."""
    points = [_cube_corner(i, scale) for i in range(8)]

    sx, sy, sz = (s * t for s, t in zip(scale, texture_scale_3d))
    face_scales = (
        (-sx, -sz),
        (-sx, -sz),
        (sz, sy),
        (sz, sy),
        (sx, sy),
        (sx, sy),
    )

    sign = -1.0 if inverted else 1.0
    uv_order = (3, 1, 0, 3, 0, 2) if inverted else (1, 2, 3, 1, 0, 2)

    mesh = Mesh()
    for face, (corners, normal, face_scale) in enumerate(
        zip(_CUBE_FACES, _CUBE_NORMALS, face_scales)
    ):
        a, b, c, d = corners
        order = (a, b, d, a, d, c) if inverted else (a, d, b, a, c, d)
        offset = face * 6

        mesh.vertices.extend(points[i] for i in order)
        mesh.indices.extend(range(offset, offset + 6))
        mesh.normals.extend([tuple(n * sign for n in normal)] * 6)

        if tiling_textures:
            factor = (face_scale[0] / texture_scale[0], face_scale[1] / texture_scale[1])
        else:
            factor = (1.0, 1.0)
        mesh.texture_coordinates.extend(
            (_CUBE_UVS[i][0] * factor[0], _CUBE_UVS[i][1] * factor[1]) for i in uv_order
        )

    mesh.tangents, mesh.bitangents = compute_tangent_basis(
        mesh.vertices, mesh.texture_coordinates, mesh.normals
    )
    return mesh


def generate_sphere(sphere_radius: float, slices: int, layers: int) -> Mesh:
    """Build a UV sphere from `layers` bands of `slices` quads each."""
    mesh = Mesh()
    if slices <= 0 or layers <= 0:
        return mesh
    if sphere_radius == 0:
        raise ValueError("sphere radius must be non-zero")

    degrees_per_layer = 180.0 / layers
    degrees_per_slice = 360.0 / slices

    index = 0
    for layer in range(layers):
        current_angle = math.radians(degrees_per_layer * layer)
        next_angle = math.radians(degrees_per_layer * (layer + 1))
        current_z = -math.cos(current_angle)
        next_z = -math.cos(next_angle)
        radius = math.sin(current_angle)
        next_radius = math.sin(next_angle)

        for slice_ in range(slices):
            start = math.radians(slice_ * degrees_per_slice)
            end = math.radians((slice_ + 1) * degrees_per_slice)
            cx, cy = math.cos(start), math.sin(start)
            nx, ny = math.cos(end), math.sin(end)

            unit = [
                (radius * cx, radius * cy, current_z),
                (radius * nx, radius * ny, current_z),
                (next_radius * nx, next_radius * ny, next_z),
                (radius * cx, radius * cy, current_z),
                (next_radius * nx, next_radius * ny, next_z),
                (next_radius * cx, next_radius * cy, next_z),
            ]
            scaled = [tuple(sphere_radius * c for c in p) for p in unit]

            mesh.vertices.extend(scaled)
            mesh.normals.extend(unit)
            mesh.indices.extend(range(index, index + 6))
            for vx, vy, vz in (tuple(c / sphere_radius for c in p) for p in scaled):
                mesh.texture_coordinates.append(
                    (
                        0.5 + math.atan2(vz, -vx) / (2.0 * math.pi),
                        0.5 + math.asin(max(-1.0, min(1.0, vy))) / math.pi,
                    )
                )
            index += 6
    return mesh


# --- glTF loading -----------------------------------------------------------

_CHUNK_JSON = 0x4E4F534A
_CHUNK_BIN = 0x004E4942

_COMPONENT_DTYPES = {
    5120: "<i1",
    5121: "<u1",
    5122: "<i2",
    5123: "<u2",
    5125: "<u4",
    5126: "<f4",
}
_TYPE_WIDTHS = {
    "SCALAR": 1,
    "VEC2": 2,
    "VEC3": 3,
    "VEC4": 4,
    "MAT2": 4,
    "MAT3": 9,
    "MAT4": 16,
}

_TRIANGLES, _TRIANGLE_STRIP, _TRIANGLE_FAN = 4, 5, 6


def _parse_glb(data: bytes) -> tuple[dict, bytes | None]:
    if len(data) < 12:
        raise ModelLoadError("truncated GLB header")
    _, version, length = struct.unpack_from("<4sII", data)
    if version != 2:
        raise ModelLoadError(f"unsupported glTF version {version}")
    if length > len(data):
        raise ModelLoadError("GLB length exceeds file size")

    document = None
    binary = None
    offset = 12
    while offset + 8 <= length:
        chunk_length, chunk_type = struct.unpack_from("<II", data, offset)
        offset += 8
        chunk = data[offset:offset + chunk_length]
        if len(chunk) != chunk_length:
            raise ModelLoadError("truncated GLB chunk")
        offset += chunk_length
        if chunk_type == _CHUNK_JSON and document is None:
            document = _parse_json(chunk)
        elif chunk_type == _CHUNK_BIN and binary is None:
            binary = bytes(chunk)
    if document is None:
        raise ModelLoadError("GLB has no JSON chunk")
    return document, binary


def _parse_json(data: bytes) -> dict:
    try:
        document = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ModelLoadError(f"invalid glTF JSON: {exc}") from exc
    if not isinstance(document, dict):
        raise ModelLoadError("glTF document must be an object")
    return document


def _load_buffers(document: dict, binary: bytes | None, base_dir: Path) -> list[bytes]:
    buffers = []
    for entry in document.get("buffers", []):
        uri = entry.get("uri")
        if uri is None:
            if binary is None:
                raise ModelLoadError("buffer refers to a missing binary chunk")
            data = binary
        elif uri.startswith("data:"):
            header, _, payload = uri.partition(",")
            if ";base64" not in header:
                raise ModelLoadError("only base64 data URIs are supported")
            try:
                data = base64.b64decode(payload, validate=True)
            except ValueError as exc:
                raise ModelLoadError(f"invalid data URI: {exc}") from exc
        else:
            try:
                data = (base_dir / urllib.parse.unquote(uri)).read_bytes()
            except OSError as exc:
                raise ModelLoadError(f"cannot read buffer {uri!r}: {exc}") from exc
        if len(data) < entry.get("byteLength", 0):
            raise ModelLoadError("buffer is shorter than its declared length")
        buffers.append(data)
    return buffers


def _read_accessor(document: dict, buffers: list[bytes], index: int) -> np.ndarray:
    try:
        accessor = document["accessors"][index]
        count = int(accessor["count"])
        dtype = np.dtype(_COMPONENT_DTYPES[accessor["componentType"]])
        width = _TYPE_WIDTHS[accessor["type"]]
        element = dtype.itemsize * width

        if count == 0:
            return np.zeros((0, width), dtype=dtype)
        if "bufferView" not in accessor:
            return np.zeros((count, width), dtype=dtype)

        view = document["bufferViews"][accessor["bufferView"]]
        buffer = buffers[view["buffer"]]
        view_start = view.get("byteOffset", 0)
        start = view_start + accessor.get("byteOffset", 0)
        stride = view.get("byteStride") or element
        end = start + stride * (count - 1) + element
        if end > len(buffer) or end > view_start + view["byteLength"]:
            raise ModelLoadError("accessor reads past the end of its buffer view")

        values = np.array(
            np.ndarray(
                (count, width),
                dtype=dtype,
                buffer=buffer,
                offset=start,
                strides=(stride, dtype.itemsize),
            )
        )
    except ModelLoadError:
        raise
    except (KeyError, IndexError, TypeError, ValueError) as exc:
        raise ModelLoadError(f"invalid accessor {index}: {exc}") from exc

    if accessor.get("normalized") and dtype.kind in "iu":
        values = values.astype(np.float64) / np.iinfo(dtype).max
        if dtype.kind == "i":
            values = np.maximum(values, -1.0)
    return values


def _triangulate(indices: list[int], mode: int) -> list[int]:
    if mode == _TRIANGLE_STRIP:
        triangles = (
            (indices[i], indices[i + 1], indices[i + 2])
            if i % 2 == 0
            else (indices[i + 1], indices[i], indices[i + 2])
            for i in range(len(indices) - 2)
        )
    elif mode == _TRIANGLE_FAN:
        triangles = (
            (indices[0], indices[i + 1], indices[i + 2]) for i in range(len(indices) - 2)
        )
    else:
        return indices
    return [v for triangle in triangles for v in triangle]


def _vertex_normals(positions: np.ndarray, indices: list[int]) -> np.ndarray:
    """Per-vertex normals accumulated from the faces that use each vertex."""
    normals = np.zeros_like(positions)
    faces = np.asarray(indices[: len(indices) - len(indices) % 3], dtype=np.int64).reshape(-1, 3)
    if faces.size:
        v0, v1, v2 = (positions[faces[:, k]] for k in range(3))
        face_normals = np.cross(v1 - v0, v2 - v0)
        for k in range(3):
            np.add.at(normals, faces[:, k], face_normals)
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    return np.divide(normals, lengths, out=np.zeros_like(normals), where=lengths > 0)


def load_model(path: str | Path) -> Mesh:
    """Load every mesh primitive of a glTF (.glb or .gltf) file into one Mesh.

    Polygons are triangulated, missing normals on triangle primitives are
    computed from the faces, and the V texture coordinate is flipped so the
    origin sits at the bottom left. Indices stay local to each primitive.
    """
    path = Path(path)
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise ModelLoadError(f"cannot read model {path}: {exc}") from exc

    if data[:4] == b"glTF":
        document, binary = _parse_glb(data)
    else:
        document, binary = _parse_json(data), None
    buffers = _load_buffers(document, binary, path.parent)

    mesh = Mesh()
    for entry in document.get("meshes", []):
        for primitive in entry.get("primitives", []):
            attributes = primitive.get("attributes", {})
            if "POSITION" not in attributes:
                raise ModelLoadError("primitive has no POSITION attribute")
            positions = _read_accessor(document, buffers, attributes["POSITION"])[:, :3]
            positions = positions.astype(np.float64)
            count = len(positions)

            if "indices" in primitive:
                raw = _read_accessor(document, buffers, primitive["indices"])[:, 0]
                raw_indices = raw.astype(np.int64).tolist()
            else:
                raw_indices = list(range(count))
            mode = primitive.get("mode", _TRIANGLES)
            indices = _triangulate(raw_indices, mode)
            if any(i < 0 or i >= count for i in indices):
                raise ModelLoadError("index refers to a missing vertex")

            if "NORMAL" in attributes:
                normals = _read_accessor(document, buffers, attributes["NORMAL"])[:, :3]
            elif mode in (_TRIANGLES, _TRIANGLE_STRIP, _TRIANGLE_FAN):
                normals = _vertex_normals(positions, indices)
            else:
                normals = None

            uvs = None
            if "TEXCOORD_0" in attributes:
                uvs = _read_accessor(document, buffers, attributes["TEXCOORD_0"])[:, :2]
                uvs = uvs.astype(np.float64)
                uvs[:, 1] = 1.0 - uvs[:, 1]

            for extra in (normals, uvs):
                if extra is not None and len(extra) != count:
                    raise ModelLoadError("attribute counts do not match")

            mesh.vertices.extend(map(tuple, positions.tolist()))
            if normals is not None:
                mesh.normals.extend(map(tuple, normals.astype(np.float64).tolist()))
            if uvs is not None:
                mesh.texture_coordinates.extend(map(tuple, uvs.tolist()))
            mesh.indices.extend(indices)
    return mesh