"""Diagnostics emitted by the quantile solvers.

Numerical notices go through the :mod:`warnings` module as subclasses of
``RuntimeWarning``. Every notice, and the per-iteration trace messages, is
passed to a single sink callable which callers can replace, e.g. with a
``LoggerSink`` writing to a scitrack log.
"""

from contextlib import contextmanager
from typing import Callable, Optional, Type
from warnings import warn as _warn

from numpy import nan
from scitrack import CachingLogger


class QuantileWarning(RuntimeWarning):
    """base class for diagnostics from the quantile functions"""


class DomainWarning(QuantileWarning):
    """an argument lies outside the domain of the distribution"""


class ConvergenceWarning(QuantileWarning):
    """an iteration stopped at its cap before reaching tolerance"""


class PrecisionWarning(QuantileWarning):
    """parameters for which results may be unreliable"""


Sink = Callable[[str, str, Optional[Type[Warning]]], None]


def warning_sink(label: str, message: str, category: Optional[Type[Warning]] = None):
    """the default sink, issues a warning for notices and discards traces

    Parameters
    ----------
    label
        name of the emitting function
    message
        the text of the diagnostic
    category
        a Warning subclass, None for trace messages

    Notes
    -----
    The location attached to the warning is the invdist function that
    detected the condition (e.g. qgamma, or the probability check it calls),
    not the caller's line. The label prefixed to the message names the
    emitting function. Use ``warnings.simplefilter("always", QuantileWarning)``
    to see every occurrence.
    """
    if category is None:
        return
    _warn(f"{label}: {message}", category, stacklevel=4)


class LoggerSink:
    """sends all diagnostics, including traces, to a scitrack CachingLogger

    Parameters
    ----------
    logger
        a CachingLogger, one is created if not provided. Messages are cached
        by the logger until its log_file_path is set.
    warn
        if True, notices are also issued as warnings
    """

    def __init__(self, logger: Optional[CachingLogger] = None, warn: bool = True):
        if logger is None:
            logger = CachingLogger(create_dir=True)
        if not isinstance(logger, CachingLogger):
            raise TypeError(f"logger must be of type CachingLogger not {type(logger)}")
        self.logger = logger
        self.warn = warn

    def __call__(self, label, message, category=None):
        self.logger.log_message(message, label=label)
        if self.warn and category is not None:
            warning_sink(label, message, category)


_sink: Sink = warning_sink


def get_sink() -> Sink:
    """returns the current diagnostic sink"""
    return _sink


def set_sink(sink: Optional[Sink]) -> Sink:
    """replaces the diagnostic sink, returning the previous one

    None restores the default warning_sink.
    """
    global _sink
    if sink is not None and not callable(sink):
        raise TypeError(f"sink must be callable, not {type(sink)}")
    previous = _sink
    _sink = warning_sink if sink is None else sink
    return previous


@contextmanager
def diagnostic_sink(sink: Optional[Sink]):
    """temporarily routes diagnostics to sink"""
    previous = set_sink(sink)
    try:
        yield sink
    finally:
        set_sink(previous)


def emit(label: str, message: str, category: Type[Warning] = QuantileWarning):
    """sends a notice to the current sink"""
    _sink(label, message, category)


def trace(label: str, message: str, *args):
    """sends a trace message to the current sink

    Formatting with args is deferred, the default sink discards traces.
    """
    if _sink is warning_sink:
        return
    _sink(label, message % args if args else message, None)


def domain_error(label: str) -> float:
    """emits a DomainWarning and returns nan"""
    emit(label, "argument out of domain, returning nan", DomainWarning)
    return nan
