[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hedgebake"
version = "0.1.0"
description = "Lightmap atlas packing, light probe accumulation, scene effect parameters and stage resource naming for global illumination baking"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["lightmap", "global-illumination", "atlas", "light-field", "baking"]
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

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["hedgebake"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
