[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "opsagent"
version = "0.1.0"
description = "A terminal assistant that remembers DevOps and personal facts and acts on them through a local LLM"
requires-python = ">=3.10"
dependencies = []
keywords = ["llm", "assistant", "devops", "ssh", "memory", "ollama"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: MacOS",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Artificial Intelligence",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
opsagent = "opsagent.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["opsagent"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"
