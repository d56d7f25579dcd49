[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "toyweb"
version = "0.1.0"
description = "A small HTTP server framework with tree routing, filter chains, static files and graceful shutdown"
requires-python = ">=3.10"
dependencies = []
keywords = ["http", "server", "router", "web framework", "middleware", "graceful shutdown"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Internet :: WWW/HTTP :: HTTP Servers",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
toyweb-demo = "toyweb.demo:main"

[tool.hatch.build.targets.wheel]
packages = ["toyweb"]

[tool.pytest.ini_options]
addopts = "-ra"
