"""Quantile function of the Gamma distribution, and so of chi-square.

The solver runs in three phases:

0. a starting approximation on the chi-square scale (qchisq_appr),
   choosing between the small chi-square asymptote, the Wilson-Hilferty
   approximation and the AS 91 fixed point iteration
1. the seven term Taylor series iteration of AS 91, Best and Roberts (1975)
   Appl. Statist. 24, 385-388
2. Newton-Raphson steps on the log probability scale

Each phase returns a PhaseResult whose outcome decides what happens next.
"""

from dataclasses import dataclass
from enum import Enum

from numpy import errstate, exp, float64, inf, isfinite, isnan, log, sqrt

from invdist.maths.stats.distribution import dgamma, lgammafn, pgamma, qnorm
from invdist.maths.stats.probability import (
    dt_clog,
    dt_log,
    dt_qiv,
    q_p01_boundaries,
    q_p01_check,
)
from invdist.maths.stats.special import DBL_MIN, M_LN2, lgamma1p
from invdist.util.misc import vectorise
from invdist.util.warning import (
    ConvergenceWarning,
    PrecisionWarning,
    domain_error,
    emit,
    trace,
)


__copyright__ = "Copyright 2024-2026, The invdist Project"
__license__ = "BSD-3"
__version__ = "2026.10.1"
__status__ = "Production"

EPS1 = 1e-2  # tolerance of the AS 91 fixed point in qchisq_appr
EPS2 = 5e-7  # final precision of AS 91
EPS_N = 1e-15  # precision of Newton steps
MAXIT = 1000  # cap on Taylor series iterations
P_MIN = 1e-100
P_MAX = 1 - 1e-14
NEWTON_STEPS = 1  # default number of Newton steps
TINY_SHAPE = 1e-10

# AS 91 constants
C7 = 4.67
C8 = 6.66
C9 = 6.73
C10 = 13.32

I420 = 1 / 420
I2520 = 1 / 2520
I5040 = 1 / 5040


class Outcome(Enum):
    """what a phase of the solver asks for next"""

    REFINE = "refine"  # continue with the Taylor series
    POLISH = "polish"  # go directly to Newton steps
    CONVERGED = "converged"
    FAILED = "failed"  # non-finite approximation, no further steps


@dataclass(frozen=True)
class PhaseResult:
    """estimate on the chi-square scale and the Newton steps still owed"""

    outcome: Outcome
    ch: float
    newton_steps: int = 0


@errstate(divide="ignore", over="ignore", invalid="ignore")
def qchisq_appr(p, nu, g, lower_tail=True, log_p=False, tol=EPS1):
    """Returns an approximate chi-square quantile.

    Parameters
    ----------
    p
        the probability
    nu
        degrees of freedom, > 0
    g
        log(Gamma(nu / 2))
    lower_tail, log_p
        the encoding of p
    tol
        relative tolerance for the fixed point iteration used when nu is
        small

    Notes
    -----
    Small chi-square values use the asymptote of the lower tail, nu > 0.32
    uses Wilson and Hilferty (1931) with a log correction as p tends to 1.
    Otherwise AS 91's rational fixed point is iterated from 0.4.
    """
    if isnan(p) or isnan(nu):
        return p + nu

    invalid = q_p01_check(p, log_p, "qchisq_appr")
    if invalid is not None:
        return invalid

    if nu <= 0:
        return domain_error("qchisq_appr")

    alpha = 0.5 * nu  # the Gamma shape
    c = alpha - 1

    p1 = dt_log(p, lower_tail, log_p)
    if nu < -1.24 * p1:
        # small chi-square, log(alpha) + g = lgamma(alpha + 1) suffers from
        # cancellation when alpha << 1
        lgam1pa = lgamma1p(alpha) if alpha < 0.5 else log(alpha) + g
        ch = exp((lgam1pa + p1) / alpha + M_LN2)
        trace("qchisq_appr", "small chi-square, ch0 = %r", ch)
    elif nu > 0.32:
        # Wilson and Hilferty
        x = qnorm(p, 0, 1, lower_tail, log_p)
        p1 = 2 / (9 * nu)
        ch = nu * (x * sqrt(p1) + 1 - p1) ** 3
        trace("qchisq_appr", "nu > 0.32, Wilson-Hilferty; x = %r", x)

        # approximation for p tending to 1
        if ch > 2.2 * nu + 6:
            ch = -2 * (dt_clog(p, lower_tail, log_p) - c * log(0.5 * ch) + g)
    else:
        # small nu, 1.24 * (-log(p)) <= nu <= 0.32
        ch = float64(0.4)
        a = dt_clog(p, lower_tail, log_p) + g + c * M_LN2
        trace("qchisq_appr", "nu <= 0.32, a = %r", a)
        while True:
            q = ch
            p1 = 1 / (1 + ch * (C7 + ch))
            p2 = ch * (C9 + ch * (C8 + ch))
            t = -0.5 + (C7 + 2 * ch) * p1 - (C9 + ch * (C10 + 3 * ch)) / p2
            ch -= (1 - exp(a + 0.5 * ch) * p2 * p1) / t
            if not abs(q - ch) > tol * abs(ch):
                break

    return float(ch)


def _chisq_seed(p, shape, g, p_, lower_tail, log_p, newton_steps):
    """phase 0, the starting approximation"""
    ch = qchisq_appr(p, 2 * shape, g, lower_tail, log_p, tol=EPS1)
    if not isfinite(ch):
        # forget about all iterations
        return PhaseResult(Outcome.FAILED, ch)

    if ch < EPS2:
        return PhaseResult(Outcome.POLISH, ch, 20)

    # a cutoff to {0, inf} is worse than Newton steps from here
    if p_ > P_MAX or p_ < P_MIN:
        return PhaseResult(Outcome.POLISH, ch, 20)

    return PhaseResult(Outcome.REFINE, ch, newton_steps)


def _taylor_series(ch, p, shape, g, p_, newton_steps):
    """phase 1, AS 91 seven term Taylor series iteration

    Parameters
    ----------
    ch
        starting value on the chi-square scale
    p
        the probability as given, for diagnostics
    shape
        the Gamma shape
    g
        log(Gamma(shape))
    p_
        the lower tail probability
    newton_steps
        Newton steps to request once the series has converged
    """
    c = shape - 1
    s6 = (120 + c * (346 + 127 * c)) * I5040

    ch = float64(ch)
    ch0 = ch
    q = ch
    for i in range(1, MAXIT + 1):
        q = ch
        p1 = 0.5 * ch
        p2 = p_ - pgamma(p1, shape)
        trace("qgamma", "Taylor it=%d, ch=%r, p2=%r", i, ch, p2)

        if not isfinite(p2) or ch <= 0:
            trace("qgamma", "Taylor series abandoned, restoring ch=%r", ch0)
            return PhaseResult(Outcome.POLISH, ch0, 27)

        t = p2 * exp(shape * M_LN2 + g + p1 - c * log(ch))
        b = t / ch
        a = 0.5 * t - b * c

        s1 = (210 + a * (140 + a * (105 + a * (84 + a * (70 + 60 * a))))) * I420
        s2 = (420 + a * (735 + a * (966 + a * (1141 + 1278 * a)))) * I2520
        s3 = (210 + a * (462 + a * (707 + 932 * a))) * I2520
        s4 = (252 + a * (672 + 1182 * a) + c * (294 + a * (889 + 1740 * a))) * I5040
        s5 = (84 + 2264 * a + c * (1175 + 606 * a)) * I2520

        ch += t * (
            1
            + 0.5 * t * s1
            - b * c * (s1 - b * (s2 - b * (s3 - b * (s4 - b * (s5 - b * s6)))))
        )
        if abs(q - ch) < EPS2 * ch:
            return PhaseResult(Outcome.CONVERGED, float(ch), newton_steps)

        if abs(q - ch) > 0.1 * ch:
            # diverging, this also forces ch > 0
            ch = 0.9 * q if ch < q else 1.1 * q

    emit(
        "qgamma",
        f"p={p} not converged in {MAXIT} iterations; rel.ch={ch / abs(q - ch)}",
        ConvergenceWarning,
    )
    return PhaseResult(Outcome.POLISH, float(ch), newton_steps)


def _newton(x, p, shape, scale, lower_tail, log_p, max_steps):
    """phase 2, Newton-Raphson steps on the log probability scale

    Returns the refined quantile.
    """
    if not log_p:
        p = log(p)

    if x == 0:
        x = DBL_MIN
        p_ = pgamma(x, shape, scale, lower_tail, True)
        # the root is at or below the smallest normal double
        if (lower_tail and p_ > p * (1 + 1e-7)) or (
            not lower_tail and p_ < p * (1 - 1e-7)
        ):
            return 0.0
    else:
        p_ = pgamma(x, shape, scale, lower_tail, True)

    if p_ == -inf:
        return 0.0

    for i in range(1, max_steps + 1):
        p1 = p_ - p
        trace("qgamma", "Newton it=%d, p=%r, x=%r, p_=%r, p1=%r", i, p, x, p_, p1)
        if abs(p1) < abs(EPS_N * p):
            break

        g = dgamma(x, shape, scale, log_p=True)
        if g == -inf:
            if i == 1:
                trace("qgamma", "no final Newton step because dgamma(*) == 0")
            break

        # f(x) = log P(x) - p and f'(x) = P'(x) / P(x), so
        # f(x) / f'(x) = p1 * exp(p_) / P'(x)
        t = p1 * exp(p_ - g)
        t = x - t if lower_tail else x + t
        p_ = pgamma(t, shape, scale, lower_tail, True)
        if abs(p_ - p) > abs(p1) or (i > 1 and abs(p_ - p) == abs(p1)):
            # no improvement, or flip-flopping
            if i == 1 and max_steps > 1:
                trace("qgamma", "no Newton step done since delta{p} >= last delta")
            break

        # control step length
        if t > 1.1 * x:
            t = 1.1 * x
        elif t < 0.9 * x:
            t = 0.9 * x
        x = t

    return float(x)


@vectorise
@errstate(divide="ignore", over="ignore", invalid="ignore")
def qgamma(p, shape=1.0, scale=1.0, lower_tail=True, log_p=False):
    """Returns the quantile of the Gamma distribution.

    Parameters
    ----------
    p
        probability, or sequence of probabilities
    shape
        the shape parameter, >= 0
    scale
        the scale parameter, > 0
    lower_tail
        if True, p is P[X <= x], otherwise P[X > x]
    log_p
        if True, p is given as log(p)

    Returns
    -------
    x >= 0 such that P[X <= x] = p. nan for invalid arguments.

    Examples
    --------
    The median of the exponential distribution is log(2)

    >>> round(qgamma(0.5, 1.0, 1.0), 7)
    0.6931472
    """
    if isnan(p) or isnan(shape) or isnan(scale):
        return p + shape + scale

    boundary = q_p01_boundaries(p, lower_tail, log_p, 0.0, inf, "qgamma")
    if boundary is not None:
        return boundary

    if shape < 0 or scale <= 0:
        return domain_error("qgamma")

    if shape == 0:
        # all mass at 0
        return 0.0

    newton_steps = NEWTON_STEPS
    if shape < TINY_SHAPE:
        emit(
            "qgamma",
            f"value of shape ({shape}) is extremely small: results may be unreliable",
            PrecisionWarning,
        )
        newton_steps = 7

    p_ = dt_qiv(p, lower_tail, log_p)
    trace(
        "qgamma",
        "qgamma(p=%r, shape=%r, scale=%r, lower_tail=%r, log_p=%r)",
        p,
        shape,
        scale,
        lower_tail,
        log_p,
    )

    g = lgammafn(shape)
    result = _chisq_seed(p, shape, g, p_, lower_tail, log_p, newton_steps)
    if result.outcome is Outcome.REFINE:
        result = _taylor_series(result.ch, p, shape, g, p_, newton_steps)

    x = 0.5 * scale * result.ch
    if result.newton_steps:
        x = _newton(x, p, shape, scale, lower_tail, log_p, result.newton_steps)
    return x


def qchisq(p, df, lower_tail=True, log_p=False):
    """Returns the quantile of the chi-square distribution with df degrees
    of freedom."""
    return qgamma(p, 0.5 * df, 2.0, lower_tail=lower_tail, log_p=log_p)
