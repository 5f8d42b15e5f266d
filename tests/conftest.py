"""Shared test fixtures for specbind.

Provides the petstore Swagger 2.0 document, a frozen registry holding it,
isolated config environments, and output state management. These fixtures
are automatically discovered by pytest and available to all test modules
without explicit imports.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest

from specbind.documents.registry import DocumentRegistry
from specbind.output import OutputFormat, OutputManager, reset_output, set_output


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches references to sys.stdout/sys.stderr at
    creation time.  When Typer's CliRunner redirects those streams during
    a test and the test finishes, the cached references become stale
    ("I/O operation on closed file").  Resetting forces a fresh manager
    to be created on next use.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Document fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def petstore_raw() -> dict[str, Any]:
    """Load the raw petstore Swagger 2.0 document."""
    with open(FIXTURES_DIR / "petstore_2.0.json") as f:
        return json.load(f)


@pytest.fixture
def registry(petstore_raw: dict[str, Any]) -> DocumentRegistry:
    """Frozen registry with the petstore document registered as ``petstore``."""
    reg = DocumentRegistry()
    reg.register("petstore", petstore_raw)
    reg.freeze()
    return reg


@pytest.fixture
def bare_registry() -> DocumentRegistry:
    """Frozen registry with a document that has no basePath, consumes or produces."""
    reg = DocumentRegistry()
    reg.register("bare", {"swagger": "2.0", "info": {"title": "Bare", "version": "1"}, "paths": {}})
    reg.freeze()
    return reg


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Clears all SPECBIND_* environment variables and changes the working
    directory to tmp_path so ``./specbind.json`` lookups never see a real
    project.

    Returns:
        The tmp_path root directory for additional file creation.
    """
    for var in ["SPECBIND_CONFIG", "SPECBIND_HEADER_STYLE"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def project_dir(isolated_config: Path) -> Path:
    """An isolated project with the petstore document and a ``specbind.json``."""
    docs = isolated_config / "docs"
    docs.mkdir()
    (docs / "petstore.json").write_text(
        (FIXTURES_DIR / "petstore_2.0.json").read_text(encoding="utf-8"),
        encoding="utf-8",
    )
    (isolated_config / "specbind.json").write_text(
        json.dumps({"documents": {"petstore": "docs/petstore.json"}}),
        encoding="utf-8",
    )
    return isolated_config


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def json_output() -> OutputManager:
    """Install a JSON-format OutputManager as the global output."""
    output = OutputManager(format=OutputFormat.JSON)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
