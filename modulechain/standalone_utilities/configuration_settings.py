"""Configuration settings."""
from importlib.metadata import version
from importlib.metadata import PackageNotFoundError
from warnings import warn

DISTRIBUTION_NAME = 'modulechain'


def get_version():
    _version = 'unknown'
    try:
        _version = version(DISTRIBUTION_NAME)
    except PackageNotFoundError:
        warn(f'{DISTRIBUTION_NAME} package is used but not installed.')
    return _version
