"""Person Registry: cache-aside orchestration over a transactional person store."""

__version__ = "1.0.0"
