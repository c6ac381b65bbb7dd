import sys
from pathlib import Path

import pytest

# conftest.py -> tests -> project root
project_root = Path(__file__).resolve().parent.parent

# Allows 'import jit_import' and 'tests.fixtures' without an install.
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

pytest_plugins = [
    "tests.fixtures.archive_fixtures",
]


@pytest.fixture
def archive_path(tmp_path, nested_archive):
    """Nested archive written to disk."""
    path = tmp_path / "model.pt"
    path.write_bytes(nested_archive)
    return path
