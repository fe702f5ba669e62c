__all__ = ["misc", "warning"]
