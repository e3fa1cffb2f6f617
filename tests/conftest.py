import pytest

from gallery.app import GalleryApp
from gallery.core.storage import JsonStorage


@pytest.fixture
def storage(tmp_path):
    return JsonStorage(tmp_path / "data")


@pytest.fixture
def gallery(storage):
    return GalleryApp(storage)
