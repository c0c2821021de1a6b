import pytest


def write_file(path, size=None, content=None):
    """
    Creates `path` (and its parents). With `content` the bytes are written as
    is, otherwise a sparse file of `size` bytes is created.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    if content is not None:
        path.write_bytes(content)
    else:
        with open(path, 'wb') as f:
            f.truncate(size)
    return path


@pytest.fixture
def make_file():
    return write_file


@pytest.fixture
def trees(tmp_path):
    """Empty DIR_D and DIR_T roots."""
    dir_d = tmp_path / "dir_d"
    dir_t = tmp_path / "dir_t"
    dir_d.mkdir()
    dir_t.mkdir()
    return dir_d, dir_t
