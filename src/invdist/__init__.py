"""invdist: quantile functions of the negative binomial and Gamma
distributions, numerically matching R.

>>> from invdist import qgamma, qnbinom
>>> qnbinom(0.9, 1, 0.5)
3.0
"""

from invdist.maths.stats.gamma import qchisq, qgamma
from invdist.maths.stats.nbinom import qnbinom, qnbinom_mu
from invdist.util.warning import (
    ConvergenceWarning,
    DomainWarning,
    LoggerSink,
    PrecisionWarning,
    QuantileWarning,
    diagnostic_sink,
    set_sink,
)


__copyright__ = "Copyright 2024-2026, The invdist Project"
__license__ = "BSD-3"
__version__ = "2026.10.1"
__status__ = "Production"

__all__ = [
    "ConvergenceWarning",
    "DomainWarning",
    "LoggerSink",
    "PrecisionWarning",
    "QuantileWarning",
    "diagnostic_sink",
    "qchisq",
    "qgamma",
    "qnbinom",
    "qnbinom_mu",
    "set_sink",
]
