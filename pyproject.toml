[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gharial"
version = "0.2.0"
description = "Master-stack layout engine, control-socket protocol and server, and the gharialctl tool for the river Wayland compositor."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "wayland",
    "river",
    "window-manager",
    "tiling",
    "master-stack",
    "ipc",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Desktop Environment :: Window Managers",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gharialctl = "gharial.ctl:main"

[tool.hatch.build.targets.wheel]
packages = ["gharial"]

[tool.hatch.build.targets.sdist]
include = ["gharial", "tests", "README.md", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
