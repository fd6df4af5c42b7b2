import pytest

from library import Library
from utils.ui_helpers import OUTPUT_MODE_ENV


@pytest.fixture
def lib():
    # Her test kendi tohumlanmış kataloğunu alır
    return Library.with_seed()


@pytest.fixture
def empty_lib():
    return Library()


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    # --output writes to os.environ; keep it from leaking between tests
    monkeypatch.setenv(OUTPUT_MODE_ENV, "plain")
