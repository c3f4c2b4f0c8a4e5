import pytest
from fastapi.testclient import TestClient

from api import create_app
from library import MemoryLibrary


@pytest.fixture
def lib():
    # Her test için boş bir bellek içi kütüphane
    lib = MemoryLibrary()
    yield lib
    lib.close()


@pytest.fixture
def client(lib):
    return TestClient(create_app(lib))
