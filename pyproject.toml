[build-system]
requires = ["setuptools>=61.0"]
build-backend = "setuptools.build_meta"

[project]
name = "pmuevents"
version = "0.1.0"
description = "Read, look up, list and reverse-map named CPU performance-monitoring events from JSON event files"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "performance counters",
    "pmu",
    "perf",
    "events",
    "json",
    "processor trace",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Monitoring",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pmu-rmap = "pmuevents.cli:rmap_main"
pmu-listevents = "pmuevents.cli:listevents_main"

[tool.setuptools.packages.find]
include = ["pmuevents*"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
