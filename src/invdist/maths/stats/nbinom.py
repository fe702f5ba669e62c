"""Quantile function of the negative binomial distribution.

The quantile is found by a search over the integers, started from the
Cornish-Fisher approximation. For large quantiles the search is run with
step sizes shrinking by a factor of 100.
"""

from numpy import errstate, float64, floor, inf, isfinite, isnan, rint, sqrt

from invdist.maths.stats.distribution import pnbinom, qnorm
from invdist.maths.stats.probability import dt_qiv, q_p01_boundaries
from invdist.maths.stats.special import DBL_EPSILON
from invdist.util.misc import vectorise
from invdist.util.warning import domain_error, trace


__copyright__ = "Copyright 2024-2026, The invdist Project"
__license__ = "BSD-3"
__version__ = "2026.10.1"
__status__ = "Production"

# seeds at or above this are searched coarse to fine
SEARCH_CUTOFF = 1e5
# applied to the target probability to ensure left continuity
FUZZ = 1 - 64 * DBL_EPSILON


def _do_search(y, z, p, size, prob, incr):
    """search from y, in steps of incr, for the smallest y with F(y) >= p

    Parameters
    ----------
    y
        starting value
    z
        F(y)
    p
        the target lower tail probability
    size, prob
        parameters of the distribution
    incr
        the step size

    Returns
    -------
    y and F(y)
    """
    trace(
        "do_search",
        "start: y=%r, z=%r, p=%r, size=%r, prob=%r, incr=%r",
        y,
        z,
        p,
        size,
        prob,
        incr,
    )
    if z >= p:
        # search to the left
        while True:
            if y == 0:
                return y, z
            z_left = pnbinom(y - incr, size, prob)
            if z_left < p:
                trace("do_search", "left search stopped at y=%r", y)
                # z is F(y), not the F(y - incr) just computed
                return y, z
            y = max(0, y - incr)
            z = z_left

    # search to the right
    while True:
        y = y + incr
        z = pnbinom(y, size, prob)
        if z >= p:
            trace("do_search", "right search stopped at y=%r", y)
            return y, z


@vectorise
@errstate(divide="ignore", over="ignore", invalid="ignore")
def qnbinom(p, size, prob, lower_tail=True, log_p=False):
    """Returns the quantile of the negative binomial distribution.

    Parameters
    ----------
    p
        probability, or sequence of probabilities
    size
        target number of successes, >= 0 and need not be an integer
    prob
        probability of success in each trial, 0 < prob <= 1
    lower_tail
        if True, p is P[X <= x], otherwise P[X > x]
    log_p
        if True, p is given as log(p)

    Returns
    -------
    The smallest integer y (as a float) for which P[X <= y] >= p. nan for
    invalid arguments, inf for p of 1.
    """
    if isnan(p) or isnan(size) or isnan(prob):
        return p + size + prob

    # arises from the mu parameterisation, prob == size / (size + mu)
    if prob == 0 and size == 0:
        return 0.0

    if prob <= 0 or prob > 1 or size < 0:
        return domain_error("qnbinom")

    if prob == 1 or size == 0:
        return 0.0

    boundary = q_p01_boundaries(p, lower_tail, log_p, 0.0, inf, "qnbinom")
    if boundary is not None:
        return boundary

    Q = 1.0 / prob
    P = (1.0 - prob) * Q
    mu = size * P
    sigma = sqrt(size * P * Q)
    gamma = (Q + P) / sigma

    if not lower_tail or log_p:
        p = dt_qiv(p, lower_tail, log_p)
        # check again, the conversion can cancel to an end point
        if p == 0:
            return 0.0
        if p == 1:
            return inf

    if p + 1.01 * DBL_EPSILON >= 1:
        return inf

    # Cornish-Fisher expansion
    z = qnorm(p)
    y = rint(mu + sigma * (z + gamma * (z * z - 1) / 6))
    if not isfinite(y):
        # the mean itself overflows
        return inf

    y = max(0.0, float(y))
    z = pnbinom(y, size, prob)

    p *= FUZZ

    if y < SEARCH_CUTOFF:
        y, _ = _do_search(y, z, p, size, prob, 1)
        return y

    incr = floor(y * 0.001)
    while True:
        oldincr = incr
        y, z = _do_search(y, z, p, size, prob, incr)
        incr = max(1, floor(incr / 100))
        if not (oldincr > 1 and incr > y * 1e-15):
            break
    return y


def qnbinom_mu(p, size, mu, lower_tail=True, log_p=False):
    """Returns the quantile of the negative binomial distribution with mean mu.

    Equivalent to qnbinom with prob = size / (size + mu).
    """
    with errstate(divide="ignore", invalid="ignore"):
        prob = float(float64(size) / (float64(size) + mu))
    return qnbinom(p, size, prob, lower_tail=lower_tail, log_p=log_p)
