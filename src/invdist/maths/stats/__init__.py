"""Provides the quantile solvers and the distribution functions they use."""


__all__ = [
    "distribution",
    "gamma",
    "nbinom",
    "probability",
    "special",
]
