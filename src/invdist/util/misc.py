"""Generally useful utility functions."""

import functools

from numpy import asarray, float64, ndim, zeros


def vectorise(func):
    """applies a scalar function element-wise over its first argument

    A scalar first argument returns a Python float. An array-like first
    argument returns a numpy float64 array with the same shape, each element
    computed independently with the remaining arguments.
    """

    @functools.wraps(func)
    def wrapped(p, *args, **kwargs):
        if ndim(p) == 0:
            return float(func(float(p), *args, **kwargs))

        probs = asarray(p, dtype=float64)
        result = zeros(probs.shape, dtype=float64)
        for index, value in enumerate(probs.flat):
            result.flat[index] = func(float(value), *args, **kwargs)
        return result

    return wrapped
