import pytest

from eventbus import Registry


@pytest.fixture
def registry():
    return Registry()


@pytest.fixture
def calls():
    return []
