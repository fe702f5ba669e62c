"""Special functions needed by the quantile solvers.

The incomplete gamma series and continued fraction are adapted from the
Cephes Math Library, (c) Stephen L. Moshier 1984, 1995, evaluated in log
space so that tails beyond the range of a double remain usable.
"""

from numpy import arange, errstate, log, log1p
from scipy.special import gammaln, zetac


__copyright__ = "Copyright 2024-2026, The invdist Project"
__license__ = "BSD-3"
__version__ = "2026.10.1"
__status__ = "Production"

# For IEEE arithmetic (IBMPC):
MACHEP = 1.11022302462515654042e-16  # 2**-53
DBL_EPSILON = 2.220446049250313e-16  # 2**-52
DBL_MIN = 2.2250738585072014e-308  # smallest normalised double
MAXLOG = 7.09782712893383996843e2  # log(2**1024)
M_LN2 = 6.93147180559945309417e-1  # log(2)
EULERS_CONST = 0.5772156649015328606065120900824024

big = 4.503599627370496e15
biginv = 2.22044604925031308085e-16


def polevl(x, coef):
    """evaluates a polynomial y = C_0 + C_1x + C_2x^2 + ... + C_Nx^N

    Coefficients are stored in reverse order, i.e. coef[0] = C_N
    """
    result = 0
    for c in coef:
        result = result * x + c
    return result


# log(1+x) - x = x^2 * sum_k (-1)^(k+1) x^k / (k+2), highest order first
LOG1PMX = [(-1) ** (k + 1) / (k + 2) for k in range(14, -1, -1)]


def log1pmx(x):
    """Returns log(1 + x) - x, accurate for small x."""
    if abs(x) < 1e-2:
        return x * x * polevl(x, LOG1PMX)
    return log1p(x) - x


# (zeta(k) - 1) / k for k = 41 down to 2, the coefficients of the Taylor
# series of log(Gamma(1 + a)) once the log1pmx part is split off
_k = arange(41, 1, -1)
LGAMMA1P = list(zetac(_k) / _k)


def lgamma1p(a):
    """Returns log(Gamma(a + 1)), accurate also for small a.

    Notes
    -----
    For |a| < 0.5 uses

        lgamma(1 + a) = -gamma * a + sum_k (-a)^k (zeta(k) - 1) / k - log1pmx(a)

    which avoids the cancellation in log(a) + lgamma(a) when a << 1.
    """
    if abs(a) >= 0.5:
        return float(gammaln(a + 1))
    lgam = polevl(-a, LGAMMA1P)
    return float((a * lgam - EULERS_CONST) * a - log1pmx(a))


def log_igam(a, x):
    """log of the regularised lower incomplete Gamma integral

    Power series, use for 0 < x <= max(1, a). See Cephes igam docs.
    """
    r = a
    c = 1
    ans = 1
    while 1:
        r += 1
        c *= x / r
        ans += c
        if c / ans <= MACHEP:
            break

    return float(a * log(x) - x - gammaln(a) + log(ans / a))


def log_igamc(a, x):
    """log of the complemented incomplete Gamma integral

    Continued fraction, use for x > 1 and x > a. See Cephes igamc docs.
    """
    y = 1 - a
    z = x + y + 1
    c = 0
    pkm2 = 1
    qkm2 = x
    pkm1 = x + 1
    qkm1 = z * x
    ans = pkm1 / qkm1

    while 1:
        c += 1
        y += 1
        z += 2
        yc = y * c
        pk = pkm1 * z - pkm2 * yc
        qk = qkm1 * z - qkm2 * yc
        if qk != 0:
            r = pk / qk
            t = abs((ans - r) / r)
            ans = r
        else:
            t = 1
        pkm2 = pkm1
        pkm1 = pk
        qkm2 = qkm1
        qkm1 = qk
        if abs(pk) > big:
            pkm2 *= biginv
            pkm1 *= biginv
            qkm2 *= biginv
            qkm1 *= biginv
        if t <= MACHEP:
            break

    with errstate(divide="ignore"):
        return float(a * log(x) - x - gammaln(a) + log(ans))
