"""Quad geometry for drawing text with a single-row 128-glyph font atlas."""

from __future__ import annotations

from glowbox.mesh import Mesh

SYMBOL_COUNT = 128


def generate_text_geometry_buffer(
    text: str, character_height_over_width: float, total_text_width: float
) -> Mesh:
    """Lay out one textured quad per character along the x axis."""
    mesh = Mesh()
    if not text:
        return mesh

    character_width = total_text_width / len(text)
    character_height = character_height_over_width * character_width
    texture_width = 1.0 / SYMBOL_COUNT

    for i, char in enumerate(text):
        x = i * character_width
        u = ord(char) * texture_width
        mesh.vertices.extend(
            [
                (x, 0.0, 0.0),
                (x + character_width, 0.0, 0.0),
                (x + character_width, character_height, 0.0),
                (x, character_height, 0.0),
            ]
        )
        mesh.texture_coordinates.extend(
            [(u, 0.0), (u + texture_width, 0.0), (u + texture_width, 1.0), (u, 1.0)]
        )
        base = 4 * i
        mesh.indices.extend([base, base + 1, base + 2, base, base + 2, base + 3])
    return mesh