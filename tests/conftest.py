" generic fixtures "
import logging
from pathlib import Path

import pytest

from makecomp.config import Configuration

ANNOTATED_MAKEFILE = """\
## PARAM test: True False
## PARAM test TYPE=bool DEFAULT=False

## PARAM env: dev stage prod
## PARAM env TYPE=enum REQUIRED

## TARGET run
## PARAM app: api worker
## PARAM app TYPE=enum REQUIRED

## CMD when test=True: app.deploy app.cleanup

run:
\t@echo run

build:
\t@echo build

help:
\t@awk '/^## /{print}' Makefile
"""

SCENARIO_LINES = [
    "## PARAM env: dev stage prod",
    "## TARGET deploy",
    "## PARAM region: us-east-1 eu-west-1",
]


def pytest_configure():
    "Runs once before all"
    from makecomp.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


@pytest.fixture
def test_logger() -> logging.Logger:
    "A logger writing to the test log handlers"
    from makecomp.logging_setup import get_logger

    return get_logger("tests")


@pytest.fixture
def makefile(tmp_path: Path) -> Path:
    "An annotated Makefile"
    path = tmp_path / "Makefile"
    path.write_text(ANNOTATED_MAKEFILE)
    return path


@pytest.fixture
def scenario_makefile(tmp_path: Path) -> Path:
    "The deploy/build Makefile with one global and one target parameter"
    path = tmp_path / "Makefile"
    path.write_text("\n".join(SCENARIO_LINES) + "\n\ndeploy:\n\t./deploy.sh\n\nbuild:\n\tcc main.c\n")
    return path


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    return tmp_path / "cache"


@pytest.fixture
def config(cache_dir: Path, test_logger: logging.Logger) -> Configuration:
    "Default configuration, caching under tmp_path"
    return Configuration({"cache_dir": str(cache_dir)}, logger=test_logger)
