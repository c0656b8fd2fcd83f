[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sceneforge"
version = "0.1.0"
description = "Entity/component scene simulation: transforms, cameras, input state, lights and particle systems"
requires-python = ">=3.10"
dependencies = [
    "numpy",
]
keywords = ["entity-component", "game", "scene", "particles", "camera", "transform"]
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
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sceneforge"]

[tool.pytest.ini_options]
addopts = "-ra"
