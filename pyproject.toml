[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gxpages"
version = "0.1.0"
description = "Development server and in-memory page model for an interactive lesson site with a code editor"
requires-python = ">=3.10"
dependencies = []
keywords = ["http-server", "lessons", "code-editor", "static-files", "development"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Environment :: Web Environment",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Education",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
gxpages = "gxpages.server:main"

[tool.hatch.build.targets.wheel]
packages = ["gxpages"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
