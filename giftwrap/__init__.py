"""Giftwrap - Wrap/Unwrap conversion generator for newtype wrappers."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("giftwrap")
except PackageNotFoundError:
    __version__ = "(local)"
