[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "casctl"
version = "0.1.0"
description = "List and describe container-attached storage pools and volumes (cStor, Jiva, LVM LocalPV, ZFS LocalPV)"
requires-python = ">=3.10"
dependencies = []
keywords = ["storage", "kubernetes", "cstor", "jiva", "lvm", "zfs", "volumes", "pools"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: System Administrators",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["casctl"]

[tool.pytest.ini_options]
addopts = "-ra"
