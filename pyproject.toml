[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "ppgso"
version = "0.1.0"
description = "RGB images with BMP/RAW files, Wavefront OBJ/MTL loading and 4x4 transformation matrices"
requires-python = ">=3.10"
keywords = ["graphics", "bmp", "raw", "wavefront", "obj", "mtl", "matrix", "projection"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics",
    "Topic :: Multimedia :: Graphics :: 3D Modeling",
]
dependencies = [
    "numpy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["ppgso"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
