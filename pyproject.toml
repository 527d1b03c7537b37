[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "framepipe"
version = "0.1.0"
description = "Frame-processing pipeline building blocks: bounded queues, worker nodes, geofence analysis and ByteTrack-style multi-object tracking."
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "shapely",
]
keywords = ["pipeline", "video", "tracking", "bytetrack", "kalman", "lapjv", "geofence", "detection"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Recognition",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["framepipe"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
