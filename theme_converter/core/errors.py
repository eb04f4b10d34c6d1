"""Exception types raised by theme-converter."""


class ThemeConverterError(Exception):
    """Base class for all theme-converter errors."""


class ThemeLoadError(ThemeConverterError):
    """A theme document or theme package could not be read."""


class DuplicateColorError(ThemeConverterError):
    """A colour identifier was registered twice on a strict registry."""


class RegistryFrozenError(ThemeConverterError):
    """register() was called after the registry was frozen."""
