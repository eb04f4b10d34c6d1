"""CSS custom properties for documentation sites.

Emits an `html.<variant>` block of CSS variables (--primary, --document-bg,
--link, --code-bg, ...) resolved from editor colours, then one rule per
token rule so highlighted code blocks pick up the theme:

    html.dark pre .keyword.control { color: #c586c0; }

Variables whose colours have no value are left out. `.N` scope segments
become `_N` because CSS class names cannot start with a digit.

Example:
    from theme_converter.registry import convert
    css = convert(theme, 'docgen')
"""

import re

from theme_converter.core.resolver import ThemeOverlay
from theme_converter.core.types import Provider, Theme, TokenSettings

provider = Provider(
    name='docgen',
    help='CSS variables and code-block rules for documentation sites.',
    extension='css',
)

PRIMARY = ('tab.activeBorder', 'focusBorder', 'statusBar.background')

# CSS variable -> editor colour identifiers, first with a value wins
VARIABLES: dict[str, tuple[str, ...]] = {
    '--primary': PRIMARY,
    '--page-bg': ('editorWidget.background',),
    '--document-bg': ('editor.background',),
    '--document-fg': ('editor.foreground',),
    '--heading': ('editor.foreground',),
    '--paragraph': ('editor.foreground',),
    '--link': ('textLink.foreground',),
    '--code-bg': ('textCodeBlock.background',),
    '--code-fg': ('editor.foreground',),
    '--blockquote-bg': ('textBlockQuote.background',),
    '--blockquote-fg': ('textBlockQuote.foreground',),
    '--blockquote-border': ('textBlockQuote.border',),
    '--input-bg': ('input.background',),
    '--input-fg': ('input.foreground', 'editor.foreground'),
    '--input-border': ('input.border', 'focusBorder'),
    '--input-placeholder': ('input.placeholderForeground',),
    '--hr': ('menu.separatorBackground',),
    '--selection-bg': ('selection.background', 'editor.selectionBackground'),
    '--header-fg': PRIMARY,
    '--border-color': ('input.border', 'dropdown.border'),
    '--fg': ('editor.foreground',),
    '--fg-dim': ('editorHint.foreground',),
    '--fg-dimmer': ('editorCodeLens.foreground',),
}

# Used when none of a variable's identifiers resolve
FALLBACKS: dict[str, str] = {
    '--input-bg': 'transparent',
    '--input-border': 'transparent',
}

_DIGIT_SEGMENT = re.compile(r'\.(\d+)')


def _first_color(overlay: ThemeOverlay, identifiers: tuple[str, ...]) -> str | None:
    for identifier in identifiers:
        color = overlay.resolve(identifier)
        if color:
            return color
    return None


def _css_class(scope: str) -> str:
    return _DIGIT_SEGMENT.sub(r'_\1', scope)


def _declarations(settings: TokenSettings) -> list[str]:
    props = []
    if settings.foreground:
        props.append(f'color: {settings.foreground};')
    if settings.bold:
        props.append('font-weight: bold;')
    if settings.italic:
        props.append('font-style: italic;')
    decorations = []
    if settings.underline:
        decorations.append('underline')
    if settings.strikethrough:
        decorations.append('line-through')
    if decorations:
        props.append(f'text-decoration-line: {" ".join(decorations)};')
    return props


def _block(selector: str, declarations: list[str]) -> str:
    body = '\n'.join(f'  {d}' for d in declarations)
    return f'{selector} {{\n{body}\n}}'


@provider.render
def render(theme: Theme, overlay: ThemeOverlay) -> str:
    variant = theme.variant.value

    variables = []
    for name, identifiers in VARIABLES.items():
        value = _first_color(overlay, identifiers) or FALLBACKS.get(name)
        if value:
            variables.append(f'{name}: {value};')

    token_blocks = []
    for rule in theme.token_rules:
        if not rule.scope:
            continue
        declarations = _declarations(rule.settings)
        if not declarations:
            continue
        selector = ',\n'.join(f'html.{variant} pre .{_css_class(scope)}' for scope in rule.scope)
        token_blocks.append(_block(selector, declarations))

    parts = [f'/* {theme.name} */', _block(f'html.{variant}', variables), *token_blocks]
    return '\n\n'.join(parts) + '\n'
