"""Shared types for theme-converter: Variant, colour values, Theme, TokenRule, Provider."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Union

if TYPE_CHECKING:
    from theme_converter.core.resolver import ThemeOverlay


class Variant(str, Enum):
    """Appearance variant. Each one owns its own table of default colours."""

    LIGHT = 'light'
    DARK = 'dark'
    HC_DARK = 'hcDark'
    HC_LIGHT = 'hcLight'


# ---------------------------------------------------------------------------
# Colour values
#
# A colour value is a plain string, None or one of the transforms below.
# Strings starting with '#' are literals, any other string names another
# colour identifier.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Darken:
    value: ColorValue
    factor: float


@dataclass(frozen=True)
class Lighten:
    value: ColorValue
    factor: float


@dataclass(frozen=True)
class Transparent:
    value: ColorValue
    factor: float


@dataclass(frozen=True)
class OneOf:
    values: tuple[ColorValue, ...]


@dataclass(frozen=True)
class LessProminent:
    value: ColorValue
    background: ColorValue
    factor: float
    transparency: float


@dataclass(frozen=True)
class IfDefinedThenElse:
    if_defined: str
    then: ColorValue
    otherwise: ColorValue


Transform = Union[Darken, Lighten, Transparent, OneOf, LessProminent, IfDefinedThenElse]
ColorValue = Union[str, Transform, None]

TRANSFORM_TYPES = (Darken, Lighten, Transparent, OneOf, LessProminent, IfDefinedThenElse)


def is_literal(value: str) -> bool:
    """A string colour value is a literal iff it starts with '#'. Anything else is a reference."""
    return value.startswith('#')


def value_from_json(raw: Any) -> ColorValue:
    """Build a colour value from its JSON form (see colors.json).

    Raises ValueError for anything that is not a string, None or a known op.
    """
    if raw is None or isinstance(raw, str):
        return raw
    if not isinstance(raw, dict):
        raise ValueError(f'Invalid colour value: {raw!r}')

    op = raw.get('op')
    if op == 'darken':
        return Darken(value_from_json(raw['value']), float(raw['factor']))
    if op == 'lighten':
        return Lighten(value_from_json(raw['value']), float(raw['factor']))
    if op == 'transparent':
        return Transparent(value_from_json(raw['value']), float(raw['factor']))
    if op == 'oneOf':
        return OneOf(tuple(value_from_json(v) for v in raw['values']))
    if op == 'lessProminent':
        return LessProminent(
            value_from_json(raw['value']),
            value_from_json(raw['background']),
            float(raw['factor']),
            float(raw['transparency']),
        )
    if op == 'ifDefinedThenElse':
        return IfDefinedThenElse(raw['if'], value_from_json(raw['then']), value_from_json(raw['else']))
    raise ValueError(f'Unknown colour transform: {op!r}')


# ---------------------------------------------------------------------------
# Themes
# ---------------------------------------------------------------------------


@dataclass
class TokenSettings:
    """Style of a token rule. Flags come from bold/italic/underline keys or fontStyle."""

    foreground: str | None = None
    background: str | None = None
    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False


@dataclass
class TokenRule:
    """One entry of a theme's tokenColors list."""

    scope: list[str] = field(default_factory=list)
    settings: TokenSettings = field(default_factory=TokenSettings)
    name: str | None = None


@dataclass
class Theme:
    """A loaded theme: variant, literal colour overrides and token rules."""

    name: str
    variant: Variant = Variant.LIGHT
    colors: dict[str, str] = field(default_factory=dict)
    token_rules: list[TokenRule] = field(default_factory=list)
    include: str | None = None  # base theme path, already merged once loaded


# ---------------------------------------------------------------------------
# Providers
# ---------------------------------------------------------------------------


class Provider:
    """A self-registering output renderer.

    Usage in a provider module:

        provider = Provider(name='kate', help='KSyntaxHighlighting theme')

        @provider.render
        def render(theme, overlay):
            ...
    """

    def __init__(self, name: str, help: str = '', extension: str = 'theme'):
        self.name = name
        self.help = help
        self.extension = extension
        self._render_fn: Callable | None = None

    def render(self, fn: Callable) -> Callable:
        """Decorator to register the render function."""
        self._render_fn = fn
        return fn

    def execute(self, theme: Theme, overlay: ThemeOverlay) -> str:
        """Render *theme* using colours resolved against *overlay*."""
        if self._render_fn is None:
            raise RuntimeError(f'Provider {self.name} has no render function')
        return self._render_fn(theme, overlay)
