# type: ignore
import pytest

from wspace.common.settings import Settings


@pytest.fixture
def settings():
    yield Settings()


@pytest.fixture
def source_file(tmp_path):
    def write(source: str, name: str = 'program.ws'):
        path = tmp_path / name
        path.write_bytes(source.encode())
        return path

    yield write
