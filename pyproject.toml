[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cwvalidator"
version = "0.1.0"
description = "Validation logic for CloudWatch agent load, stress and performance tests"
requires-python = ">=3.10"
dependencies = ["pyyaml"]
keywords = ["cloudwatch", "validation", "metrics", "stress-testing", "performance"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["cwvalidator"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
