import pytest


@pytest.fixture
def people_left_csv():
    return "id,name\n1,Alice\n2,Bob"


@pytest.fixture
def people_right_csv():
    return "id,name\n1,Alice\n3,Carol"


@pytest.fixture
def write_pair(tmp_path):
    """Write two documents to disk and return their paths as strings."""

    def _write(left: str, right: str, suffix: str = ".txt") -> tuple[str, str]:
        left_path = tmp_path / f"left{suffix}"
        right_path = tmp_path / f"right{suffix}"
        left_path.write_text(left, encoding="utf-8")
        right_path.write_text(right, encoding="utf-8")
        return str(left_path), str(right_path)

    return _write
