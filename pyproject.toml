[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "glowbox"
version = "0.1.0"
description = "Scene graph, procedural meshes, glTF loading and camera math for a small desert diorama renderer"
requires-python = ">=3.10"
keywords = ["scene graph", "mesh", "gltf", "3d", "camera", "quaternion", "keyframes"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["glowbox"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
