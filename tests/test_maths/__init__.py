__all__ = ["test_stats"]
