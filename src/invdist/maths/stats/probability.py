"""Helpers for probabilities given in any of the four encodings.

A probability p is accompanied by two flags: lower_tail, whether p is
P[X <= x] rather than P[X > x], and log_p, whether p is given as its natural
logarithm. These follow the R_D_* and R_DT_* conventions of R's nmath.
"""

from numpy import exp, expm1, inf, log, log1p

from invdist.maths.stats.special import M_LN2
from invdist.util.warning import domain_error


def d_0(log_p):
    """the encoding of probability 0"""
    return -inf if log_p else 0.0


def d_1(log_p):
    """the encoding of probability 1"""
    return 0.0 if log_p else 1.0


def dt_0(lower_tail, log_p):
    """the encoded probability at the left end of the support"""
    return d_0(log_p) if lower_tail else d_1(log_p)


def dt_1(lower_tail, log_p):
    """the encoded probability at the right end of the support"""
    return d_1(log_p) if lower_tail else d_0(log_p)


def log1_exp(x):
    """Returns log(1 - exp(x)) for x <= 0.

    Uses log(-expm1(x)) near 0 and log1p(-exp(x)) otherwise, see Maechler
    (2012) "Accurately Computing log(1 - exp(-|a|))".
    """
    return log(-expm1(x)) if x > -M_LN2 else log1p(-exp(x))


def dt_qiv(p, lower_tail, log_p):
    """Returns p as a linear lower tail probability."""
    if log_p:
        return exp(p) if lower_tail else -expm1(p)
    return p if lower_tail else 0.5 - p + 0.5


def _d_lexp(p, log_p):
    # log(1 - p)
    return log1_exp(p) if log_p else log1p(-p)


def dt_log(p, lower_tail, log_p):
    """Returns the log of the lower tail probability."""
    if lower_tail:
        return p if log_p else log(p)
    return _d_lexp(p, log_p)


def dt_clog(p, lower_tail, log_p):
    """Returns the log of the upper tail probability."""
    if lower_tail:
        return _d_lexp(p, log_p)
    return p if log_p else log(p)


def is_invalid(p, log_p):
    """whether p lies outside [0, 1], or above 0 on the log scale"""
    if log_p:
        return p > 0
    return p < 0 or p > 1


def q_p01_check(p, log_p, label):
    """Returns nan, with a domain diagnostic, for an invalid probability.

    None otherwise.
    """
    if is_invalid(p, log_p):
        return domain_error(label)
    return None


def q_p01_boundaries(p, lower_tail, log_p, left, right, label):
    """early exit value for a probability at the edge of its encoding

    Parameters
    ----------
    p
        the probability
    lower_tail, log_p
        the encoding of p
    left, right
        the quantiles of probability 0 and 1 respectively
    label
        name of the calling function, for diagnostics

    Returns
    -------
    left or right when p encodes probability 0 or 1, nan for an invalid p
    and None when p is interior
    """
    if is_invalid(p, log_p):
        return domain_error(label)

    if p == dt_0(lower_tail, log_p):
        return left
    if p == dt_1(lower_tail, log_p):
        return right
    return None
