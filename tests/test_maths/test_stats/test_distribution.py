import math

import pytest
from numpy import inf, isnan
from numpy.testing import assert_allclose

from invdist.maths.stats.distribution import (
    dgamma,
    lgammafn,
    pgamma,
    pnbinom,
    qnorm,
)


def test_lgammafn():
    assert_allclose(lgammafn(5.0), math.log(24), rtol=1e-14)
    assert_allclose(lgammafn(0.5), 0.5 * math.log(math.pi), rtol=1e-14)


@pytest.mark.parametrize("x", (0.1, 1.0, 4.0))
def test_pgamma_exponential(x):
    """shape 1 is the exponential distribution"""
    assert_allclose(pgamma(x, 1.0), -math.expm1(-x), rtol=1e-14)
    assert_allclose(pgamma(x, 1.0, lower_tail=False), math.exp(-x), rtol=1e-14)
    assert_allclose(pgamma(x, 1.0, lower_tail=False, log_p=True), -x, rtol=1e-14)
    assert_allclose(
        pgamma(x, 1.0, log_p=True), math.log(-math.expm1(-x)), rtol=1e-13
    )


def test_pgamma_scale():
    assert_allclose(pgamma(6.0, 2.0, scale=3.0), pgamma(2.0, 2.0), rtol=1e-14)


def test_pgamma_boundaries():
    assert pgamma(0.0, 2.0) == 0.0
    assert pgamma(-1.0, 2.0) == 0.0
    assert pgamma(-1.0, 2.0, log_p=True) == -inf
    assert pgamma(0.0, 2.0, lower_tail=False) == 1.0
    assert pgamma(inf, 2.0) == 1.0
    assert pgamma(inf, 2.0, lower_tail=False, log_p=True) == -inf
    assert isnan(pgamma(float("nan"), 2.0))


def test_pgamma_log_tails():
    """log probabilities remain finite when the linear ones underflow"""
    assert_allclose(pgamma(800.0, 1.0, lower_tail=False, log_p=True), -800.0)
    # P[X <= x] ~ x^a / Gamma(a + 1) for small x
    x, a = 1e-100, 5.0
    expect = a * math.log(x) - math.log(120)
    assert_allclose(pgamma(x, a, log_p=True), expect, rtol=1e-12)


def test_pgamma_log_near_one():
    """log of a lower tail near 1 uses the complement"""
    got = pgamma(50.0, 1.0, log_p=True)
    assert_allclose(got, -math.exp(-50.0), rtol=1e-12)


def test_dgamma():
    assert_allclose(dgamma(1.0, 1.0), math.exp(-1.0), rtol=1e-14)
    # x^2 exp(-x / 2) / (Gamma(3) 2^3) at x = 2
    expect = math.log(math.exp(-1) / 4)
    assert_allclose(dgamma(2.0, 3.0, scale=2.0, log_p=True), expect, rtol=1e-13)
    assert dgamma(-1.0, 2.0, log_p=True) == -inf
    assert dgamma(-1.0, 2.0) == 0.0


def test_pnbinom():
    """geometric distribution when size is 1"""
    assert_allclose(pnbinom(3, 1, 0.5), 0.9375, rtol=1e-14)
    assert_allclose(pnbinom(3, 1, 0.5, lower_tail=False), 0.0625, rtol=1e-13)
    assert_allclose(pnbinom(0, 1, 0.5, log_p=True), math.log(0.5), rtol=1e-14)
    assert pnbinom(-1, 1, 0.5) == 0.0
    assert pnbinom(inf, 1, 0.5) == 1.0


def test_pnbinom_non_integer_size():
    """P[X = 0] = prob ** size for any size"""
    assert_allclose(pnbinom(0, 2.5, 0.4), 0.4**2.5, rtol=1e-13)


def test_qnorm():
    assert_allclose(qnorm(0.975), 1.959963984540054, rtol=1e-14)
    assert_allclose(qnorm(0.025, lower_tail=False), 1.959963984540054, rtol=1e-14)
    assert_allclose(qnorm(math.log(0.975), log_p=True), 1.959963984540054, rtol=1e-13)
    assert_allclose(
        qnorm(math.log(0.025), lower_tail=False, log_p=True),
        1.959963984540054,
        rtol=1e-13,
    )
    assert_allclose(qnorm(0.5, mu=3.0, sigma=2.0), 3.0)
    assert qnorm(0.0) == -inf
