[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "clairscan"
version = "0.1.0"
description = "Container image layer analysis: package listers, OS namespace detectors, severities, pagination tokens and bulk SQL builders for vulnerability scanning."
requires-python = ">=3.10"
keywords = ["containers", "vulnerability", "security", "dpkg", "rpm", "apk", "os-release"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security",
]
dependencies = [
    "cryptography",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["clairscan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
