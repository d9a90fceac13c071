"""
Centralized test configuration and fixtures for memongo.

This module provides shared test fixtures that:
1. Build fake mongod executables that replay scripted log output
2. Provide an in-memory client factory for unit tests
3. Locate a real mongod for integration tests
"""

import logging
import stat
import sys
from pathlib import Path
from typing import Callable, List

import mongomock
import pytest

from memongo.runtime.mongod_launcher import find_mongod

# Configure logging for tests
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


FAKE_MONGOD_TEMPLATE = """#!/bin/sh
echo "$@" > "{args_file}"
port=""
while [ $# -gt 0 ]; do
  case "$1" in
    --port) port="$2"; shift 2 ;;
    *) shift ;;
  esac
done
{body}
"""


def _render_line(line: str) -> str:
    """Render one scripted log line as a shell echo; {port} expands to the requested port."""
    if "'" in line:
        raise ValueError(f"Scripted mongod lines cannot contain single quotes: {line}")
    return "echo '" + line.replace("{port}", "'\"$port\"'") + "'"


@pytest.fixture
def fake_mongod(tmp_path) -> Callable[..., str]:
    """
    Factory fixture writing a fake mongod shell script.

    The script records its arguments to ``args.txt`` next to it, prints the
    given lines, then either keeps running (``keep_running=True``) or exits.
    """
    if sys.platform == "win32":
        pytest.skip("Fake mongod scripts require a POSIX shell")

    def make(lines: List[str], keep_running: bool = True, name: str = "mongod") -> str:
        script_path = tmp_path / name
        body = [_render_line(line) for line in lines]
        body.append("exec sleep 60" if keep_running else "exit 0")

        script = FAKE_MONGOD_TEMPLATE.replace("{args_file}", str(tmp_path / "args.txt"))
        script = script.replace("{body}", "\n".join(body))
        script_path.write_text(script)
        script_path.chmod(script_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return str(script_path)

    return make


@pytest.fixture
def undecodable_mongod(tmp_path) -> str:
    """Fake mongod that prints a non UTF-8 byte before its readiness line."""
    if sys.platform == "win32":
        pytest.skip("Fake mongod scripts require a POSIX shell")

    script_path = tmp_path / "mongod-latin1"
    script_path.write_text(
        "#!/bin/sh\n"
        "printf 'bad \\377 byte\\n'\n"
        "echo 'waiting for connections on port 27017'\n"
        "exec sleep 60\n"
    )
    script_path.chmod(script_path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return str(script_path)


@pytest.fixture
def recorded_args(tmp_path) -> Callable[[], List[str]]:
    """Read back the arguments the fake mongod was started with."""
    def read() -> List[str]:
        return (tmp_path / "args.txt").read_text().split()
    return read


@pytest.fixture
def mongomock_client_factory():
    """Client factory returning a fresh in-memory mongomock client per call."""
    created = []

    def factory(uri, **kwargs):
        client = mongomock.MongoClient()
        created.append((uri, kwargs, client))
        return client

    factory.created = created
    return factory


@pytest.fixture
def working_root(tmp_path) -> str:
    """Root directory for mongod working directories created during a test."""
    root = tmp_path / "work"
    return str(root)


@pytest.fixture(scope="session")
def real_mongod_path():
    """Path to a real mongod binary, or skip the test if none is installed."""
    path = find_mongod()
    if not path or not Path(path).is_file():
        pytest.skip("mongod binary not available (set MEMONGO_MONGOD_BIN)")
    return path


# Pytest configuration

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on test location."""
    for item in items:
        # Add integration marker for tests in integration directory
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
