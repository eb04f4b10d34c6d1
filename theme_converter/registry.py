"""Provider auto-discovery, lookup and conversion.

Scans theme_converter/providers/ for modules that define a `provider`
object of type Provider. Collects them into a dict keyed by name.

Falls back to the known module list when pkgutil.iter_modules returns
nothing (frozen binaries).
"""

import importlib
import pkgutil

from theme_converter.core.color_registry import ColorRegistry, default_registry
from theme_converter.core.resolver import ThemeOverlay
from theme_converter.core.types import Provider, Theme

_registry: dict[str, Provider] = {}

# Known provider module names, the fallback for frozen binaries
_PROVIDER_MODULES = [
    'docgen',
    'kate',
]


def discover() -> dict[str, Provider]:
    """Import all provider modules and return the registry."""
    if _registry:
        return _registry

    import theme_converter.providers as pkg

    found_modules = [
        modname for _importer, modname, _ispkg in pkgutil.iter_modules(pkg.__path__) if not modname.startswith('_')
    ]
    if not found_modules:
        found_modules = _PROVIDER_MODULES

    for modname in found_modules:
        module = importlib.import_module(f'theme_converter.providers.{modname}')
        prov = getattr(module, 'provider', None)
        if isinstance(prov, Provider):
            _registry[prov.name] = prov

    return _registry


def get(name: str) -> Provider:
    """Get a provider by name."""
    reg = discover()
    if name not in reg:
        raise KeyError(f'Unknown provider: {name}. Available: {", ".join(sorted(reg))}')
    return reg[name]


def all_providers() -> dict[str, Provider]:
    """Return all registered providers."""
    return discover()


def convert(theme: Theme, provider_name: str, colors: ColorRegistry | None = None) -> str:
    """Render *theme* with the named provider.

    Builds the theme's overlay (variant defaults from *colors*, or the stock
    registry, with the theme's overrides on top) and hands it to the provider.
    """
    prov = get(provider_name)
    table = colors if colors is not None else default_registry()
    overlay = ThemeOverlay.build(table, theme.variant, theme.colors)
    return prov.execute(theme, overlay)
