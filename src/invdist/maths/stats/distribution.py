"""Distribution functions consumed by the quantile solvers.

Thin scalar wrappers over scipy, with R's (lower_tail, log_p) calling
convention.
"""

from numpy import errstate, exp, isinf, isnan, log, log1p
from scipy.special import gammainc, gammaincc, gammaln, ndtri, ndtri_exp
from scipy.stats import gamma, nbinom

from invdist.maths.stats.probability import dt_0, dt_1
from invdist.maths.stats.special import log_igam, log_igamc


def lgammafn(x):
    """Returns log(|Gamma(x)|)."""
    return float(gammaln(x))


@errstate(divide="ignore")
def pgamma(x, shape, scale=1.0, lower_tail=True, log_p=False):
    """Returns the Gamma distribution function at x.

    Parameters
    ----------
    x
        the quantile
    shape, scale
        parameters of the distribution
    lower_tail
        if True, P[X <= x], otherwise P[X > x]
    log_p
        if True, the log of the probability

    Notes
    -----
    When the requested tail underflows, the log probability is computed
    directly by power series (lower tail) or continued fraction (upper
    tail).
    """
    if isnan(x) or isnan(shape) or isnan(scale):
        return x + shape + scale

    x = x / scale
    if x <= 0:
        return dt_0(lower_tail, log_p)
    if isinf(x):
        return dt_1(lower_tail, log_p)

    lower = float(gammainc(shape, x))
    upper = float(gammaincc(shape, x))
    prob, comp = (lower, upper) if lower_tail else (upper, lower)
    if not log_p:
        return prob

    if prob > 0.5:
        return float(log1p(-comp))
    if prob > 0:
        return float(log(prob))
    # underflow
    return log_igam(shape, x) if lower_tail else log_igamc(shape, x)


def dgamma(x, shape, scale=1.0, log_p=False):
    """Returns the Gamma density at x, or its log if log_p."""
    if isnan(x) or isnan(shape) or isnan(scale):
        return x + shape + scale

    with errstate(divide="ignore"):
        result = float(gamma.logpdf(x, shape, scale=scale))
    return result if log_p else float(exp(result))


def pnbinom(y, size, prob, lower_tail=True, log_p=False):
    """Returns the negative binomial distribution function at y.

    y is the number of failures before the size-th success, prob the
    probability of success.
    """
    if isnan(y) or isnan(size) or isnan(prob):
        return y + size + prob

    if lower_tail:
        func = nbinom.logcdf if log_p else nbinom.cdf
    else:
        func = nbinom.logsf if log_p else nbinom.sf
    with errstate(divide="ignore"):
        return float(func(y, size, prob))


def qnorm(p, mu=0.0, sigma=1.0, lower_tail=True, log_p=False):
    """Returns the normal quantile for probability p."""
    z = ndtri_exp(p) if log_p else ndtri(p)
    if not lower_tail:
        z = -z
    return float(mu + sigma * z)
