import math

import pytest
from numpy import inf, isnan
from numpy.testing import assert_allclose

from invdist.maths.stats.probability import (
    dt_0,
    dt_1,
    dt_clog,
    dt_log,
    dt_qiv,
    log1_exp,
    q_p01_boundaries,
    q_p01_check,
)
from invdist.util.warning import DomainWarning


@pytest.mark.parametrize(
    "lower_tail,log_p,left,right",
    (
        (True, False, 0.0, 1.0),
        (False, False, 1.0, 0.0),
        (True, True, -inf, 0.0),
        (False, True, 0.0, -inf),
    ),
)
def test_dt_end_points(lower_tail, log_p, left, right):
    assert dt_0(lower_tail, log_p) == left
    assert dt_1(lower_tail, log_p) == right


@pytest.mark.parametrize(
    "p,lower_tail,log_p",
    (
        (0.3, True, False),
        (0.7, False, False),
        (math.log(0.3), True, True),
        (math.log(0.7), False, True),
    ),
)
def test_dt_qiv(p, lower_tail, log_p):
    """all encodings of 0.3 give the same linear lower tail probability"""
    assert_allclose(dt_qiv(p, lower_tail, log_p), 0.3, rtol=1e-15)


def test_dt_qiv_upper_tiny():
    """the upper tail conversion keeps precision for log probabilities"""
    assert_allclose(dt_qiv(-1e-20, False, True), 1e-20, rtol=1e-15)


@pytest.mark.parametrize(
    "p,lower_tail,log_p",
    (
        (0.25, True, False),
        (0.75, False, False),
        (math.log(0.25), True, True),
        (math.log(0.75), False, True),
    ),
)
def test_dt_log_clog(p, lower_tail, log_p):
    assert_allclose(dt_log(p, lower_tail, log_p), math.log(0.25), rtol=1e-14)
    assert_allclose(dt_clog(p, lower_tail, log_p), math.log(0.75), rtol=1e-14)


def test_log1_exp():
    """log(1 - exp(x)) on both sides of the switch point"""
    assert_allclose(log1_exp(-1e-20), math.log(1e-20), rtol=1e-14)
    assert_allclose(log1_exp(-50.0), -math.exp(-50.0), rtol=1e-14)
    assert_allclose(log1_exp(math.log(0.5)), math.log(0.5), rtol=1e-14)


@pytest.mark.parametrize(
    "p,lower_tail,log_p,expect",
    (
        (0.0, True, False, "left"),
        (1.0, True, False, "right"),
        (0.0, False, False, "right"),
        (1.0, False, False, "left"),
        (-inf, True, True, "left"),
        (0.0, True, True, "right"),
        (-inf, False, True, "right"),
        (0.0, False, True, "left"),
    ),
)
def test_q_p01_boundaries(p, lower_tail, log_p, expect):
    got = q_p01_boundaries(p, lower_tail, log_p, "left", "right", "test")
    assert got == expect


@pytest.mark.parametrize("p,log_p", ((0.5, False), (1e-300, False), (-3.0, True)))
def test_q_p01_boundaries_interior(p, log_p):
    assert q_p01_boundaries(p, True, log_p, 0.0, inf, "test") is None
    assert q_p01_check(p, log_p, "test") is None


@pytest.mark.parametrize("p,log_p", ((-0.1, False), (1.1, False), (0.1, True)))
def test_invalid_probability(p, log_p):
    with pytest.warns(DomainWarning):
        assert isnan(q_p01_boundaries(p, True, log_p, 0.0, inf, "test"))
    with pytest.warns(DomainWarning):
        assert isnan(q_p01_check(p, log_p, "test"))
