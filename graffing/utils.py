r"""@package graffing.utils

General utilities for simplifying certain tasks in Python.
"""

from contextlib import contextmanager
import datetime
import logging
from timeit import default_timer


__all__ = [
    "lmap",
    "isiterable",
    "timethis",
]


def lmap(func, *iterables):
    r"""Implementation of `map` that returns a list instead of a generator."""
    return list(map(func, *iterables))


def isiterable(obj):
    """Check whether an object is iterable.

    Note that this returns `True` for strings, which you may or may not intend
    to check for.
    """
    try:
        iter(obj)
    except TypeError:
        return False
    return True


@contextmanager
def timethis(start_msg=None, end_msg="Elapsed time: {}", logger=None,
             level=logging.DEBUG):
    r"""Context manager for logging the duration of code execution.

    @param start_msg
        Message to log at the beginning. May contain the placeholder
        ``'{now}'``, which will be replaced by the current date and time. A
        value of `True` will be taken to mean ``"Started: {now}``.
    @param end_msg
        Message to log after execution. The placeholder ``{}`` is replaced by
        the elapsed time. Default is ``"Elapsed time: {}"``.
    @param logger
        Logger to use. Default is the logger of this module.
    @param level
        Logging level of the messages. Default is `logging.DEBUG`.
    """
    if logger is None:
        logger = logging.getLogger(__name__)
    if start_msg is True:
        start_msg = "Started: {now}"
    if start_msg is not None:
        now = datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')
        logger.log(level, start_msg.format(now=now))
    start = default_timer()
    try:
        yield
    finally:
        if end_msg is not None:
            time_str = datetime.timedelta(seconds=default_timer()-start)
            logger.log(level, end_msg.format(time_str))
