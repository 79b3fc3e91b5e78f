import shutil
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def workdir(tmp_path):
    """A scratch copy of the fixtures directory, so outputs never land in the repo."""
    target = tmp_path / "oas"
    shutil.copytree(FIXTURES, target)
    return target
