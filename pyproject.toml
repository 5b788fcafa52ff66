[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "wayscriber"
version = "0.5.1"
description = "Screenshot capture helpers and configuration types for a Wayland screen annotation tool"
requires-python = ">=3.11"
dependencies = [
    "platformdirs",
]
keywords = [
    "wayland",
    "screenshot",
    "annotation",
    "hyprland",
    "xdg-desktop-portal",
    "keybindings",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: End Users/Desktop",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Capture :: Screen Capture",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
]

[tool.hatch.build.targets.wheel]
packages = ["wayscriber"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
warn_redundant_casts = true
