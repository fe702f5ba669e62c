__all__ = [
    "test_distribution",
    "test_gamma",
    "test_nbinom",
    "test_probability",
    "test_special",
]
