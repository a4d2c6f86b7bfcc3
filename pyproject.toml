[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fieldnotes"
version = "0.1.0"
description = "Worked examples of service patterns: a task API, clean layering, env config, WSGI middleware, error handling and concurrency."
requires-python = ">=3.10"
dependencies = [
    "werkzeug",
]
keywords = [
    "examples",
    "wsgi",
    "middleware",
    "clean-architecture",
    "concurrency",
    "configuration",
    "error-handling",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Education",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Application",
    "Topic :: Internet :: WWW/HTTP :: WSGI :: Middleware",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
fieldnotes-taskapi = "fieldnotes.taskapi.server:main"
fieldnotes-users = "fieldnotes.cleanarch.users:main"
fieldnotes-envconfig = "fieldnotes.envconfig:main"
fieldnotes-middleware = "fieldnotes.web.middleware_chain:main"
fieldnotes-di = "fieldnotes.web.di_example:main"
fieldnotes-tasks-router = "fieldnotes.web.tasks_router:main"
fieldnotes-json-api = "fieldnotes.web.json_api:main"
fieldnotes-pipeline = "fieldnotes.concurrency.pipelines:main"
fieldnotes-workers = "fieldnotes.concurrency.workers:main"

[tool.hatch.build.targets.wheel]
packages = ["fieldnotes"]

[tool.hatch.build.targets.sdist]
include = ["fieldnotes", "tests", "pyproject.toml"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
