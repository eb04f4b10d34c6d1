"""Theme loading: theme documents, .vsix packages, and include merging.

Theme documents are JSON with comments and trailing commas, parsed with
json5. Only string colour overrides survive loading; anything else is
dropped with a warning. Whether a string is a literal or a reference is
decided later, by its '#' prefix.

Inheritance ("include"): the derived theme's colours win over the base's
on the same key, and its token rules come first, followed by the base's.
Renderers take the first matching token rule, so that order matters.

Callers own all I/O: documents come in as text, packages as bytes.
"""

import io
import json
import logging
import posixpath
import zipfile
from collections.abc import Callable
from typing import Any
from xml.etree import ElementTree

import json5

from theme_converter.core.errors import ThemeLoadError
from theme_converter.core.types import Theme, TokenRule, TokenSettings, Variant

logger = logging.getLogger(__name__)

VARIANT_ALIASES: dict[str, Variant] = {
    'light': Variant.LIGHT,
    'vs': Variant.LIGHT,
    'dark': Variant.DARK,
    'vs-dark': Variant.DARK,
    'hcDark': Variant.HC_DARK,
    'hc': Variant.HC_DARK,
    'hc-black': Variant.HC_DARK,
    'hc-dark': Variant.HC_DARK,
    'hcLight': Variant.HC_LIGHT,
    'hc-light': Variant.HC_LIGHT,
}

# uiTheme values from a package's contributes.themes
_UI_THEME_VARIANTS: dict[str, Variant] = {
    'vs-dark': Variant.DARK,
    'hc-black': Variant.HC_DARK,
    'hc-light': Variant.HC_LIGHT,
}

VSIX_MANIFEST = 'extension.vsixmanifest'
CODE_MANIFEST_ASSET = 'Microsoft.VisualStudio.Code.Manifest'

IncludeReader = Callable[[str], str]


def parse_theme(
    text: str,
    name: str | None = None,
    ui_theme: str | None = None,
    default_variant: Variant | None = None,
    read_include: IncludeReader | None = None,
) -> Theme:
    """Parse a theme document.

    If the document has an "include" and *read_include* is given, the base
    document is read through it (called with the include path) and merged.
    Without a reader the include is left unresolved on Theme.include.
    """
    theme = theme_from_document(_parse_document(text), name, ui_theme, default_variant)
    if theme.include and read_include is not None:
        theme = _merge_includes(theme, '', read_include, set())
    return theme


def _parse_document(text: str) -> dict[str, Any]:
    try:
        doc = json5.loads(text)
    except ValueError as exc:
        raise ThemeLoadError(f'Invalid theme document: {exc}') from exc
    if not isinstance(doc, dict):
        raise ThemeLoadError(f'Theme document must be an object, got {type(doc).__name__}')
    return doc


def theme_from_document(
    doc: dict[str, Any],
    name: str | None = None,
    ui_theme: str | None = None,
    default_variant: Variant | None = None,
) -> Theme:
    """Build a Theme from an already parsed theme document."""
    include = doc.get('include') or None
    if include is not None and not isinstance(include, str):
        raise ThemeLoadError(f'"include" must be a path, got {include!r}')
    doc_name = doc.get('name')
    return Theme(
        name=(doc_name if isinstance(doc_name, str) else None) or name or 'untitled',
        variant=_variant_for(doc.get('type'), ui_theme, default_variant),
        colors=_parse_colors(doc.get('colors')),
        token_rules=_parse_token_rules(doc.get('tokenColors')),
        include=include,
    )


def _variant_for(raw_type: Any, ui_theme: str | None, default_variant: Variant | None) -> Variant:
    if raw_type:
        if not isinstance(raw_type, str) or raw_type not in VARIANT_ALIASES:
            raise ThemeLoadError(f'Unknown theme type: {raw_type!r}')
        return VARIANT_ALIASES[raw_type]
    if isinstance(ui_theme, str) and ui_theme:
        return _UI_THEME_VARIANTS.get(ui_theme, Variant.LIGHT)
    if default_variant is not None:
        return default_variant

    from theme_converter.core.env import load_settings

    return load_settings().default_variant


def _parse_colors(raw: Any) -> dict[str, str]:
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ThemeLoadError('"colors" must be an object')
    colors: dict[str, str] = {}
    for key, value in raw.items():
        if isinstance(value, str):
            colors[key] = value
        else:
            logger.warning('Dropping colour %r: expected a string, got %r', key, value)
    return colors


def _parse_token_rules(raw: Any) -> list[TokenRule]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        # tokenColors may name a .tmTheme file; that format is not supported
        logger.warning('Ignoring tokenColors of type %s', type(raw).__name__)
        return []

    rules = []
    for entry in raw:
        if not isinstance(entry, dict):
            continue
        settings = entry.get('settings') or {}
        if not isinstance(settings, dict):
            logger.warning('Skipping token rule %r: settings must be an object, got %r', entry.get('name'), settings)
            continue
        rules.append(
            TokenRule(
                scope=_parse_scope(entry.get('scope')),
                settings=_parse_settings(settings),
                name=entry.get('name') if isinstance(entry.get('name'), str) else None,
            )
        )
    return rules


def _parse_scope(raw: Any) -> list[str]:
    if isinstance(raw, str):
        raw = raw.split(',')
    if not isinstance(raw, list):
        return []
    return [s.strip() for s in raw if isinstance(s, str) and s.strip()]


def _parse_settings(raw: dict[str, Any]) -> TokenSettings:
    styles = set(str(raw.get('fontStyle') or '').split())
    return TokenSettings(
        foreground=raw.get('foreground') if isinstance(raw.get('foreground'), str) else None,
        background=raw.get('background') if isinstance(raw.get('background'), str) else None,
        bold=bool(raw.get('bold')) or 'bold' in styles,
        italic=bool(raw.get('italic')) or 'italic' in styles,
        underline=bool(raw.get('underline')) or 'underline' in styles,
        strikethrough='strikethrough' in styles,
    )


def merge_include(derived: Theme, base: Theme) -> Theme:
    """Merge *base* (the included theme) under *derived*. Neither input is modified."""
    return Theme(
        name=derived.name,
        variant=derived.variant,
        colors={**base.colors, **derived.colors},
        token_rules=[*derived.token_rules, *base.token_rules],
        include=derived.include,
    )


def _merge_includes(theme: Theme, theme_path: str, read: IncludeReader, seen: set[str]) -> Theme:
    """Resolve theme.include (relative to *theme_path*) recursively and merge."""
    if not theme.include:
        return theme

    base_path = posixpath.normpath(posixpath.join(posixpath.dirname(theme_path), theme.include))
    if base_path in seen:
        raise ThemeLoadError(f'Include cycle at {base_path}')

    try:
        text = read(base_path)
    except (KeyError, OSError) as exc:
        raise ThemeLoadError(f'Included theme not found: {base_path}') from exc

    base = theme_from_document(_parse_document(text), default_variant=theme.variant)
    base = _merge_includes(base, base_path, read, seen | {base_path})
    return merge_include(theme, base)


# ---------------------------------------------------------------------------
# .vsix packages
# ---------------------------------------------------------------------------


def load_theme_package(data: bytes, default_variant: Variant | None = None) -> list[Theme]:
    """Read every theme contributed by a .vsix package held in memory."""
    try:
        archive = zipfile.ZipFile(io.BytesIO(data))
    except zipfile.BadZipFile as exc:
        raise ThemeLoadError(f'Not a theme package: {exc}') from exc

    with archive:
        names = set(archive.namelist())

        def read(path: str) -> str:
            if path not in names:
                raise KeyError(path)
            return archive.read(path).decode('utf-8-sig')

        package_json_path = _find_code_manifest(read)
        try:
            package = json.loads(read(package_json_path))
        except KeyError as exc:
            raise ThemeLoadError(f'package.json missing from package: {package_json_path}') from exc
        except ValueError as exc:
            raise ThemeLoadError(f'Invalid package.json: {exc}') from exc

        if not isinstance(package, dict):
            raise ThemeLoadError(f'package.json must be an object, got {type(package).__name__}')
        contributes = package.get('contributes') or {}
        if not isinstance(contributes, dict):
            raise ThemeLoadError('"contributes" in package.json must be an object')
        contributed = contributes.get('themes') or []
        if not isinstance(contributed, list):
            raise ThemeLoadError('"contributes.themes" in package.json must be a list')
        if not contributed:
            raise ThemeLoadError('Package contributes no themes')
        logger.debug('Found %d theme files in %s', len(contributed), package_json_path)

        themes = []
        for entry in contributed:
            if not isinstance(entry, dict):
                raise ThemeLoadError(f'Theme entry must be an object, got {entry!r}')
            if not entry.get('path') or not isinstance(entry['path'], str):
                raise ThemeLoadError(f'Theme entry without a path: {entry!r}')
            theme_path = posixpath.normpath(posixpath.join(posixpath.dirname(package_json_path), entry['path']))
            try:
                text = read(theme_path)
            except KeyError as exc:
                raise ThemeLoadError(f'Theme file missing from package: {theme_path}') from exc

            theme = theme_from_document(
                _parse_document(text),
                name=entry.get('label') if isinstance(entry.get('label'), str) else None,
                ui_theme=entry.get('uiTheme'),
                default_variant=default_variant,
            )
            theme = _merge_includes(theme, theme_path, read, {theme_path})
            logger.debug('Collected %s', theme.name)
            themes.append(theme)

    return themes


def _find_code_manifest(read: IncludeReader) -> str:
    """Return the archive path of package.json as named by extension.vsixmanifest."""
    try:
        root = ElementTree.fromstring(read(VSIX_MANIFEST))
    except KeyError as exc:
        raise ThemeLoadError(f'{VSIX_MANIFEST} missing from package') from exc
    except ElementTree.ParseError as exc:
        raise ThemeLoadError(f'Invalid {VSIX_MANIFEST}: {exc}') from exc

    for element in root.iter():
        # tags carry the vsx-schema namespace: '{...}Asset'
        if element.tag.rsplit('}', 1)[-1] == 'Asset' and element.get('Type') == CODE_MANIFEST_ASSET:
            path = element.get('Path')
            if path:
                return path
    raise ThemeLoadError(f'{VSIX_MANIFEST} names no {CODE_MANIFEST_ASSET} asset')
