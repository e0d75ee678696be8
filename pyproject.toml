[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "turboscraper"
version = "0.1.0"
description = "Asynchronous web crawling framework with spiders, per-category retry policies, statistics and pluggable storage"
requires-python = ">=3.10"
keywords = ["crawler", "scraper", "spider", "web-scraping", "asyncio", "retry"]
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
    "Framework :: AsyncIO",
    "Topic :: Internet :: WWW/HTTP :: Indexing/Search",
]
dependencies = [
    "httpx",
    "beautifulsoup4",
    "pymongo",
]

[project.optional-dependencies]
test = [
    "pytest",
    "pytest-asyncio",
    "respx",
]

[project.scripts]
turboscraper = "turboscraper.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["turboscraper"]

[tool.hatch.build.targets.sdist]
include = ["turboscraper", "tests", "README.md", "pyproject.toml"]

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
ignore_missing_imports = true
