[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tactgrid"
version = "0.1.0"
description = "Serial tactile and light sensor readers, frame decoding and calibration on a small in-process publish/subscribe bus"
requires-python = ">=3.10"
keywords = ["serial", "sensor", "tactile", "calibration", "pressure"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Interface Engine/Protocol Translator",
]
dependencies = [
    "pyserial",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
tactgrid-serial = "tactgrid.nodes:main_serial"
tactgrid-grid = "tactgrid.nodes:main_grid"
tactgrid-calibrator = "tactgrid.nodes:main_calibrator"

[tool.hatch.build.targets.wheel]
packages = ["tactgrid"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
