[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sqlplanopt"
version = "0.1.0"
description = "Parse, validate and optimise simple SQL SELECT queries into relational-algebra execution plans"
requires-python = ">=3.10"
dependencies = []
keywords = ["sql", "query optimizer", "relational algebra", "execution plan", "database"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Education",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
sqlplanopt = "sqlplanopt.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["sqlplanopt"]

[tool.pytest.ini_options]
addopts = "-ra"
