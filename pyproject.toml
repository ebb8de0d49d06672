[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "yfsdisk"
version = "0.1.0"
description = "Disk image tools and a block/inode storage layer for the YFS file system format"
requires-python = ">=3.10"
dependencies = []
keywords = ["filesystem", "inode", "disk-image", "lru-cache", "yfs"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Filesystems",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mkyfs = "yfsdisk.mkyfs:main"

[tool.hatch.build.targets.wheel]
packages = ["yfsdisk"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
