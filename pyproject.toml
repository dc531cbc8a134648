[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "featgroup"
version = "0.1.0"
description = "Feature-based grouping of point tracks into moving objects, with descriptor distances, colour histograms and homography helpers"
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["tracking", "feature grouping", "computer vision", "homography", "histogram"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Image Recognition",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["featgroup"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
