[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "xconcur"
version = "0.1.0"
description = "Thread-based concurrency helpers: a concurrent map, a sharded map, a resource manager, a spin lock, context-controlled tasks, retries and bounded workers."
requires-python = ">=3.11"
dependencies = []
keywords = ["concurrency", "threading", "concurrent map", "retry", "spinlock", "worker"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries :: Python Modules",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["xconcur"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py311"

[tool.mypy]
python_version = "3.11"
warn_unused_ignores = true
