"""Default colour tables, one per appearance variant.

A ColorRegistry is filled by register() calls during startup, then frozen.
The stock tables come from colors.json (editor workbench colours with
their per-variant defaults); default_registry() builds them once per process.

Re-registering an identifier overwrites the earlier value for every variant
supplied (last registration wins). A strict registry rejects duplicates
instead.
"""

import json
import logging
import threading
from collections.abc import Mapping
from importlib import resources
from types import MappingProxyType
from typing import Any

from theme_converter.core.errors import DuplicateColorError, RegistryFrozenError
from theme_converter.core.types import ColorValue, Variant, value_from_json

logger = logging.getLogger(__name__)

DATA_FILE = 'colors.json'


class ColorRegistry:
    """Per-variant identifier -> colour value tables."""

    def __init__(self, strict: bool = False):
        self.strict = strict
        self._tables: dict[Variant, dict[str, ColorValue]] = {v: {} for v in Variant}
        self._descriptions: dict[str, str] = {}
        self._frozen = False

    def register(
        self,
        identifier: str,
        defaults: Mapping[Variant | str, ColorValue] | None,
        description: str = '',
    ) -> str:
        """Register default values for *identifier*. Returns the identifier.

        Variants missing from *defaults* or mapped to None get no default.
        """
        if self._frozen:
            raise RegistryFrozenError(f'Cannot register {identifier!r}: registry is frozen')
        if not identifier:
            raise ValueError('Colour identifier must be a non-empty string')
        if self.strict and identifier in self._descriptions:
            raise DuplicateColorError(f'Colour {identifier!r} is already registered')

        self._descriptions[identifier] = description
        if not defaults:
            return identifier

        for key, value in defaults.items():
            if value is None:
                continue
            self._tables[Variant(key)][identifier] = value
        return identifier

    def freeze(self) -> None:
        """End the registration phase. The tables are read-only afterwards."""
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def defaults(self, variant: Variant | str) -> Mapping[str, ColorValue]:
        """Read-only view of the default table for *variant*."""
        return MappingProxyType(self._tables[Variant(variant)])

    def description(self, identifier: str) -> str | None:
        return self._descriptions.get(identifier)

    def identifiers(self) -> list[str]:
        """All registered identifiers in registration order."""
        return list(self._descriptions)

    def __contains__(self, identifier: str) -> bool:
        return identifier in self._descriptions

    def __len__(self) -> int:
        return len(self._descriptions)

    def load(self, data: dict[str, Any]) -> None:
        """Register every record of a colors.json document, in order."""
        for record in data.get('registrations', []):
            defaults = record.get('defaults')
            parsed = None
            if defaults is not None:
                parsed = {key: value_from_json(raw) for key, raw in defaults.items()}
            self.register(record['id'], parsed, record.get('description', ''))

    @classmethod
    def from_data(cls, strict: bool = False) -> 'ColorRegistry':
        """Build a frozen registry from the packaged colors.json."""
        text = resources.files('theme_converter.core').joinpath(DATA_FILE).read_text(encoding='utf-8')
        registry = cls(strict=strict)
        registry.load(json.loads(text))
        registry.freeze()
        logger.debug('Loaded %d default colours from %s', len(registry), DATA_FILE)
        return registry


_default: ColorRegistry | None = None
_default_lock = threading.Lock()


def default_registry() -> ColorRegistry:
    """The process-wide stock registry, built on first use."""
    global _default
    if _default is not None:
        return _default

    with _default_lock:
        if _default is None:
            from theme_converter.core.env import load_settings

            settings = load_settings()
            _default = ColorRegistry.from_data(strict=settings.strict_registry)
    return _default
