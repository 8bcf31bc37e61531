r"""@package graffing.config

Global default settings of the numerical layer.

The defaults are class attributes of Settings and are used whenever the
respective argument of a function is not given explicitly. They may be
changed directly:

    Settings.quadrature_subintervals = 5000

or read from INI style configuration files using load_settings(), e.g. a file
containing

    [graffing]
    quadrature_subintervals = 5000
    log_interval = 50

Later files override earlier ones, such that a user specific file (like
`graffing.mine.cfg`) can refine the project wide one (`graffing.cfg`).
"""

from configparser import ConfigParser
import logging
import os.path as op


__all__ = [
    "Settings",
    "load_settings",
]


logger = logging.getLogger(__name__)


class Settings(object):
    """Global default settings."""
    ## Maximum number of bottom-up passes of the simplifier.
    simplify_max_passes = 50
    ## Default number of subintervals of the composite quadrature rules.
    quadrature_subintervals = 1000
    ## Number of subintervals for the inner products of Legendre projection.
    legendre_subintervals = 2000
    ## Number of random sample points drawn per iteration of the fitting loops.
    fit_samples = 64
    ## Number of equidistant points of the grid the fit loss is judged on.
    fit_grid_size = 201
    ## Number of iterations between progress messages of the fitting loops.
    log_interval = 100

    @classmethod
    def as_dict(cls):
        r"""Return all settings as a dictionary."""
        return dict((k, getattr(cls, k)) for k in _setting_names())


def _setting_names():
    return [k for k, v in vars(Settings).items()
            if not k.startswith('_') and isinstance(v, (int, float, bool))]


def load_settings(*filenames, section='graffing'):
    r"""Update Settings from one or more INI files.

    Missing files are skipped. Values are converted to the type of the
    respective default.

    @param *filenames
        Files to read in order. Settings in later files take precedence.
    @param section
        Section of the files to read. Default is ``'graffing'``.

    @return List of the files that were actually read.

    @b Raises
        `ValueError` for unknown settings or values of the wrong type.
    """
    config = ConfigParser()
    read = config.read([op.expanduser(f) for f in filenames])
    if not config.has_section(section):
        return read
    names = _setting_names()
    for key in config.options(section):
        if key not in names:
            raise ValueError("Unknown setting: %s" % key)
        default = getattr(Settings, key)
        if isinstance(default, bool):
            value = config.getboolean(section, key)
        elif isinstance(default, int):
            value = config.getint(section, key)
        else:
            value = config.getfloat(section, key)
        logger.info("Setting %s = %r", key, value)
        setattr(Settings, key, value)
    return read
