import pytest


class FakeClock:
    """Manually advanced monotonic clock (seconds)."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def registry_yaml(tmp_path):
    """Write a registry YAML overriding the post cache and return its path."""
    content = """
caches:
  post:
    ttl: 120
    max_entries: 50
  thumbnails:
    max_size: 1048576
    cleanup_interval: 30
"""
    path = tmp_path / "caches.yaml"
    path.write_text(content)
    return path
