[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "hbaserpc"
version = "0.1.0"
description = "Request and response building blocks for the HBase RPC protocol: gets, scans, mutations, admin calls and cell block encoding."
requires-python = ">=3.10"
dependencies = []
keywords = ["hbase", "rpc", "database", "client", "cellblock"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database :: Front-Ends",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["hbaserpc"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
