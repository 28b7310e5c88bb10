[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "motionkit"
version = "0.1.0"
description = "Path planning, path tracking and perception algorithms for mobile robots and vehicles"
requires-python = ">=3.10"
dependencies = [
    "numpy",
    "matplotlib",
]
keywords = [
    "robotics",
    "path-planning",
    "path-tracking",
    "lqr",
    "pure-pursuit",
    "stanley",
    "kalman-filter",
    "lattice-planner",
    "dynamic-window-approach",
    "potential-field",
    "rectangle-fitting",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
motionkit-pure-pursuit = "motionkit.pure_pursuit:main"
motionkit-ekf = "motionkit.ekf_localization:main"
motionkit-rectangle-fitting = "motionkit.rectangle_fitting:main"
motionkit-dwa = "motionkit.dynamic_window:main"
motionkit-potential-field = "motionkit.potential_field:main"

[tool.hatch.build.targets.wheel]
packages = ["motionkit"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
ignore_missing_imports = true
