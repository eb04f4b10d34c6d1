"""Colour resolution: turn a colour value into a final hex string or None.

resolve() follows identifier references through a lookup context, evaluates
transforms, and propagates None ("no colour") instead of raising. A chain of
references that loops back on itself is logged and resolves to None.

ThemeOverlay is the lookup context for one conversion: a variant's registry
defaults with the theme's literal overrides on top.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from theme_converter.core import palette
from theme_converter.core.types import (
    ColorValue,
    Darken,
    IfDefinedThenElse,
    LessProminent,
    Lighten,
    OneOf,
    Transparent,
    Variant,
    is_literal,
)

if TYPE_CHECKING:
    from theme_converter.core.color_registry import ColorRegistry

logger = logging.getLogger(__name__)

CycleHandler = Callable[[tuple[str, ...]], None]


def _log_cycle(chain: tuple[str, ...]) -> None:
    logger.warning('Colour reference cycle: %s', ' -> '.join(chain))


def resolve(value: ColorValue, context: Mapping[str, ColorValue]) -> str | None:
    """Resolve *value* against *context*. Returns a colour string or None."""
    return _resolve(value, context, (), _log_cycle)


def _resolve(
    value: ColorValue,
    context: Mapping[str, ColorValue],
    chain: tuple[str, ...],
    on_cycle: CycleHandler,
) -> str | None:
    if value is None:
        return None

    if isinstance(value, str):
        if is_literal(value):
            return value
        if value in chain:
            on_cycle(chain[chain.index(value) :] + (value,))
            return None
        if value not in context:
            return None
        return _resolve(context[value], context, chain + (value,), on_cycle)

    return _execute(value, context, chain, on_cycle)


def _execute(
    transform: object,
    context: Mapping[str, ColorValue],
    chain: tuple[str, ...],
    on_cycle: CycleHandler,
) -> str | None:
    def sub(v: ColorValue) -> str | None:
        return _resolve(v, context, chain, on_cycle)

    if isinstance(transform, (Darken, Lighten, Transparent)):
        resolved = sub(transform.value)
        if resolved is None:
            return None
        color = palette.parse_color(resolved)
        if color is None:
            return None
        if isinstance(transform, Darken):
            return palette.to_hex(palette.darken(color, transform.factor))
        if isinstance(transform, Lighten):
            return palette.to_hex(palette.lighten(color, transform.factor))
        return palette.to_hex(palette.with_alpha(color, transform.factor))

    if isinstance(transform, OneOf):
        for candidate in transform.values:
            resolved = sub(candidate)
            if resolved is not None:
                return resolved
        return None

    if isinstance(transform, IfDefinedThenElse):
        defined = context.get(transform.if_defined) is not None
        return sub(transform.then if defined else transform.otherwise)

    if isinstance(transform, LessProminent):
        resolved = sub(transform.value)
        if resolved is None:
            return None
        fg = palette.parse_color(resolved)
        if fg is None:
            return None

        bg_resolved = sub(transform.background)
        bg = palette.parse_color(bg_resolved) if bg_resolved is not None else None
        if bg is None:
            return palette.to_hex(palette.with_alpha(fg, transform.factor * transform.transparency))

        if palette.luminance(fg) < palette.luminance(bg):
            moved = palette.lighter_color(fg, bg, transform.factor)
        else:
            moved = palette.darker_color(fg, bg, transform.factor)
        return palette.to_hex(palette.with_alpha(moved, transform.transparency))

    raise TypeError(f'Invalid colour transform: {transform!r}')


class ThemeOverlay(Mapping):
    """Immutable lookup context for one theme conversion.

    Identifier lookups are memoized: the mapping never changes, so an
    identifier always resolves to the same colour. Results that ran into a
    reference cycle are not memoized because they depend on where the
    resolution started.
    """

    def __init__(self, colors: Mapping[str, ColorValue], variant: Variant | None = None):
        self._colors = MappingProxyType(dict(colors))
        self.variant = variant
        self.cycles: list[tuple[str, ...]] = []
        self._cache: dict[str, str | None] = {}

    @classmethod
    def build(
        cls,
        registry: ColorRegistry,
        variant: Variant | str,
        overrides: Mapping[str, str] | None = None,
    ) -> ThemeOverlay:
        """Variant defaults from *registry*, then every override on top."""
        variant = Variant(variant)
        colors: dict[str, ColorValue] = dict(registry.defaults(variant))
        colors.update(overrides or {})
        return cls(colors, variant)

    def __getitem__(self, identifier: str) -> ColorValue:
        return self._colors[identifier]

    def __iter__(self) -> Iterator[str]:
        return iter(self._colors)

    def __len__(self) -> int:
        return len(self._colors)

    def defines(self, identifier: str) -> bool:
        """True if the overlay holds a non-null entry for *identifier* (unresolved)."""
        return self._colors.get(identifier) is not None

    def resolve(self, value: ColorValue) -> str | None:
        """Resolve a colour value or identifier against this overlay.

        Each distinct cycle chain is recorded and logged once per overlay.
        """
        cacheable = isinstance(value, str) and not is_literal(value)
        if cacheable and value in self._cache:
            return self._cache[value]

        hit_cycle = False

        def on_cycle(chain: tuple[str, ...]) -> None:
            nonlocal hit_cycle
            hit_cycle = True
            if chain not in self.cycles:
                self.cycles.append(chain)
                _log_cycle(chain)

        result = _resolve(value, self, (), on_cycle)
        if cacheable and not hit_cycle:
            self._cache[value] = result
        return result

    def resolve_all(self, identifiers: Iterable[str]) -> dict[str, str | None]:
        return {identifier: self.resolve(identifier) for identifier in identifiers}
