import pytest

from helpers import baseline_jpeg, real_jpeg


@pytest.fixture
def baseline_bytes():
    return baseline_jpeg()


@pytest.fixture
def baseline_path(tmp_path, baseline_bytes):
    path = tmp_path / "baseline.jpg"
    path.write_bytes(baseline_bytes)
    return path


@pytest.fixture
def real_path(tmp_path):
    path = tmp_path / "real.jpg"
    path.write_bytes(real_jpeg())
    return path
