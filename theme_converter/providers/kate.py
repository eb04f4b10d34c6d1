"""KSyntaxHighlighting (Kate, KWrite, KDevelop) JSON theme.

editor-colors: 28 Kate roles, each mapped from an editor colour identifier
(e.g. BackgroundColor <- editor.background). Roles whose identifier has no
value in the theme keep Kate's stock colour for the light or dark palette.

text-styles: 31 Kate styles, each taken from the first token rule matching
a scope (e.g. Keyword <- keyword, Function <- entity.name.function).
Scopes with no rule fall back to the `variable` rule.

custom-styles: per-language overrides for TypeScript, JavaScript, TSX,
JSX and YAML.

Qt reads alpha colours as #AARRGGBB, so 8-digit colours are reordered.

Example:
    from theme_converter.registry import convert
    document = convert(theme, 'kate')
"""

import json
from typing import Any

from theme_converter.core.resolver import ThemeOverlay
from theme_converter.core.scopes import find_rule
from theme_converter.core.types import Provider, Theme, Variant

provider = Provider(
    name='kate',
    help='KSyntaxHighlighting JSON theme (Kate, KWrite, KDevelop).',
    extension='theme',
)

KATE_DEFAULT_COLORS: dict[str, dict[str, str]] = {
    'light': {
        'BackgroundColor': '#ffffff',
        'CodeFolding': '#94caef',
        'BracketMatching': '#ffff00',
        'CurrentLine': '#f8f7f6',
        'IconBorder': '#f0f0f0',
        'IndentationLine': '#d2d2d2',
        'LineNumbers': '#a0a0a0',
        'CurrentLineNumber': '#1e1e1e',
        'MarkBookmark': '#0000ff',
        'MarkBreakpointActive': '#ff0000',
        'MarkBreakpointReached': '#ffff00',
        'MarkBreakpointDisabled': '#ff00ff',
        'MarkExecution': '#a0a0a4',
        'MarkWarning': '#00ff00',
        'MarkError': '#ff0000',
        'ModifiedLines': '#fdbc4b',
        'ReplaceHighlight': '#00ff00',
        'SavedLines': '#2ecc71',
        'SearchHighlight': '#ffff00',
        'TextSelection': '#94caef',
        'Separator': '#d5d5d5',
        'SpellChecking': '#bf0303',
        'TabMarker': '#d2d2d2',
        'TemplateBackground': '#d6d2d0',
        'TemplatePlaceholder': '#baf8ce',
        'TemplateFocusedPlaceholder': '#76da98',
        'TemplateReadOnlyPlaceholder': '#f6e6e6',
        'WordWrapMarker': '#ededed',
    },
    'dark': {
        'BackgroundColor': '#232629',
        'CodeFolding': '#224e65',
        'BracketMatching': '#8e44ad',
        'CurrentLine': '#2a2e32',
        'IconBorder': '#31363b',
        'IndentationLine': '#3a3f44',
        'LineNumbers': '#7a7c7d',
        'CurrentLineNumber': '#a5a6a8',
        'MarkBookmark': '#0404bf',
        'MarkBreakpointActive': '#8b0607',
        'MarkBreakpointReached': '#6d6e07',
        'MarkBreakpointDisabled': '#820683',
        'MarkExecution': '#4d4e50',
        'MarkWarning': '#f67400',
        'MarkError': '#da4453',
        'ModifiedLines': '#c04900',
        'ReplaceHighlight': '#808021',
        'SavedLines': '#1c8042',
        'SearchHighlight': '#218058',
        'TextSelection': '#2d5c76',
        'Separator': '#3f4347',
        'SpellChecking': '#c0392b',
        'TabMarker': '#4d4d4d',
        'TemplateBackground': '#31363b',
        'TemplatePlaceholder': '#123723',
        'TemplateFocusedPlaceholder': '#123723',
        'TemplateReadOnlyPlaceholder': '#4d1f24',
        'WordWrapMarker': '#3a3f44',
    },
}

# Kate role -> editor colour identifiers, first one with a value wins
EDITOR_COLORS: dict[str, tuple[str, ...]] = {
    'BackgroundColor': ('editor.background',),
    'IndentationLine': ('editorIndentGuide.background',),
    'TextSelection': ('editor.selectionBackground',),
    'LineNumbers': ('editorLineNumber.foreground',),
    'CurrentLineNumber': ('editorLineNumber.activeForeground',),
    'CurrentLine': ('editor.lineHighlightBackground',),
    'SearchHighlight': ('editor.findMatchHighlightBackground',),
    'ReplaceHighlight': ('editor.findMatchBackground',),
    'BracketMatching': ('editorBracketMatch.background',),
    'CodeFolding': ('editor.foldBackground',),
    'SpellChecking': ('editorError.foreground',),
    'ModifiedLines': ('editorGutter.modifiedBackground', 'editorOverviewRuler.modifiedForeground'),
    'SavedLines': ('editorGutter.addedBackground', 'editorOverviewRuler.addedForeground'),
    'MarkError': ('editorOverviewRuler.errorForeground',),
    'MarkWarning': ('editorOverviewRuler.warningForeground',),
    'MarkBookmark': ('editorOverviewRuler.infoForeground',),
    'WordWrapMarker': ('editorGutter.foldingControlForeground',),
    'IconBorder': ('editorGutter.background',),
    'MarkBreakpointActive': ('debugIcon.breakpointForeground',),
    'MarkBreakpointDisabled': ('debugIcon.breakpointDisabledForeground',),
    'MarkBreakpointReached': ('debugIcon.breakpointCurrentStackframeForeground',),
    'Separator': ('menu.separatorBackground',),
    'TabMarker': ('editorWhitespace.foreground',),
}

# Kate text style -> token scopes, first matching rule wins
TEXT_STYLES: dict[str, tuple[str, ...]] = {
    'Normal': ('variable',),
    'Others': ('variable',),
    'Comment': ('comment',),
    'Keyword': ('keyword',),
    'ControlFlow': ('keyword.control', 'keyword'),
    'Function': ('entity.name.function',),
    'String': ('string',),
    'VerbatimString': ('markup.raw',),
    'SpecialString': ('string.regexp',),
    'SpecialChar': ('constant.character.escape', 'constant.character'),
    'Char': ('constant.character',),
    'Import': ('keyword.control', 'keyword'),
    'Constant': ('variable.other.constant',),
    'Float': ('constant.numeric',),
    'DecVal': ('constant.numeric',),
    'BaseN': ('constant.numeric',),
    'DataType': ('support.type',),
    'Operator': ('keyword.operator.*', 'keyword'),
    'Variable': ('variable',),
    'BuiltIn': ('variable',),
    'Extension': ('support.class',),
    'Preprocessor': ('meta.preprocessor',),
    'Attribute': ('variable',),
    'Error': ('invalid',),
    'Annotation': ('keyword',),
    'Warning': ('keyword',),
    'CommentVar': ('variable',),
    'Documentation': ('comment.block.documentation', 'comment.*'),
}

CUSTOM_STYLES: dict[str, dict[str, str]] = {
    'TypeScript': {'Objects': 'variable.other.constant'},
    'JavaScript': {'Objects': 'variable.other.constant'},
    'TypeScript React (TSX)': {'Component Tag': 'support.class', 'Attribute': 'entity.other.attribute-name'},
    'JavaScript React (JSX)': {'Component Tag': 'support.class', 'Attribute': 'entity.other.attribute-name'},
    'YAML': {
        'Key': 'entity.name.tag',
        'Attribute': 'string.unquoted.plain.out.yaml',
        'Literal/Folded Block': 'string.unquoted.block.yaml',
    },
}

INFORMATION_COLOR = '#6a737d'


def qt_color(color: str | None) -> str | None:
    """#RRGGBBAA -> #AARRGGBB. Other forms pass through."""
    if color is not None and len(color) == 9:
        return f'#{color[7:9]}{color[1:7]}'
    return color


def _text_style(theme: Theme, scope: str) -> dict[str, Any] | None:
    rule = find_rule(theme.token_rules, scope)
    if rule is None:
        if scope != 'variable':
            return _text_style(theme, 'variable')
        return None

    settings = rule.settings
    style: dict[str, Any] = {}
    foreground = qt_color(settings.foreground)
    if foreground:
        style['text-color'] = foreground
        style['selected-text-color'] = foreground
    if settings.bold:
        style['bold'] = True
    if settings.italic:
        style['italic'] = True
    if settings.underline:
        style['underline'] = True
    if settings.strikethrough:
        style['strike-through'] = True
    return style


def _first_style(theme: Theme, scopes: tuple[str, ...]) -> dict[str, Any] | None:
    for scope in scopes:
        style = _text_style(theme, scope)
        if style is not None:
            return style
    return None


def _editor_colors(theme: Theme, overlay: ThemeOverlay) -> dict[str, str]:
    stock = KATE_DEFAULT_COLORS['dark' if theme.variant in (Variant.DARK, Variant.HC_DARK) else 'light']
    colors = dict(stock)
    for role, identifiers in EDITOR_COLORS.items():
        for identifier in identifiers:
            resolved = qt_color(overlay.resolve(identifier))
            if resolved:
                colors[role] = resolved
                break
    return colors


def _marker_style(comment: dict[str, Any] | None) -> dict[str, Any]:
    style: dict[str, Any] = {'text-color': '#ffffff', 'selected-text-color': '#ffffff'}
    if comment and comment.get('text-color'):
        style['background-color'] = comment['text-color']
    return style


@provider.render
def render(theme: Theme, overlay: ThemeOverlay) -> str:
    text_styles: dict[str, Any] = {}
    for style_name, scopes in TEXT_STYLES.items():
        style = _first_style(theme, scopes)
        if style is not None:
            text_styles[style_name] = style

    comment = _text_style(theme, 'comment')
    text_styles['Information'] = {'selected-text-color': INFORMATION_COLOR, 'text-color': INFORMATION_COLOR}
    text_styles['Alert'] = _marker_style(comment)
    text_styles['RegionMarker'] = _marker_style(comment)

    custom_styles: dict[str, dict[str, Any]] = {}
    for language, mapping in CUSTOM_STYLES.items():
        styles = {}
        for style_name, scope in mapping.items():
            style = _text_style(theme, scope)
            if style is not None:
                styles[style_name] = style
        custom_styles[language] = styles

    document = {
        'metadata': {'name': theme.name, 'revision': 1},
        'editor-colors': _editor_colors(theme, overlay),
        'text-styles': text_styles,
        'custom-styles': custom_styles,
    }
    return json.dumps(document, indent=2)
