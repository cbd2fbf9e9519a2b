"""Meshes, glTF and PNG loading, scene graph, camera and keyframe timing for a desert diorama."""

__version__ = "0.1.0"