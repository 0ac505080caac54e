from __future__ import annotations


class NoiseError(Exception):
    """Base class for errors raised by the noise and map utilities."""


class InvalidParamError(NoiseError, ValueError):
    """A parameter or precondition was invalid; nothing was modified."""


class NoModuleError(NoiseError, LookupError):
    """A source module was requested from an empty or missing slot."""


class OutOfMemoryError(NoiseError, MemoryError):
    """A raster buffer could not be allocated; the buffer was reset."""
