"""Integration test: pack the Harbour fixture extension as a .vsix, load it, and render every provider."""

import io
import json
import zipfile
from pathlib import Path

import pytest
from theme_converter.core.theme_loader import load_theme_package, parse_theme
from theme_converter.core.types import Theme, Variant
from theme_converter.registry import all_providers, convert

TESTS_DIR = Path(__file__).parent
FIXTURES_DIR = TESTS_DIR / 'fixtures'
THEMES_DIR = FIXTURES_DIR / 'themes'


def _pack_extension() -> bytes:
    """Zip the fixture extension the way vsce lays out a .vsix."""
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, 'w', zipfile.ZIP_DEFLATED) as zf:
        zf.write(FIXTURES_DIR / 'extension.vsixmanifest', 'extension.vsixmanifest')
        zf.write(FIXTURES_DIR / 'package.json', 'extension/package.json')
        for theme_file in sorted(THEMES_DIR.glob('*.json')):
            zf.write(theme_file, f'extension/themes/{theme_file.name}')
    return buf.getvalue()


@pytest.fixture(scope='module')
def harbour() -> list[Theme]:
    return load_theme_package(_pack_extension())


class TestPackage:
    def test_both_themes_loaded(self, harbour: list[Theme]):
        assert [t.name for t in harbour] == ['Harbour Night', 'Harbour Day']
        assert [t.variant for t in harbour] == [Variant.DARK, Variant.LIGHT]

    def test_base_merged_under_each_theme(self, harbour: list[Theme]):
        night, day = harbour
        assert night.colors['editor.lineHighlightBackground'] == '#ffffff10'
        assert day.colors['editor.lineHighlightBackground'] == '#0000000a'
        assert day.colors['focusBorder'] == '#3b8eea'
        assert night.token_rules[0].scope == ['keyword.control']
        assert [r.scope[0] for r in night.token_rules[1:]] == ['comment', 'string', 'keyword', 'variable']

    def test_same_result_from_disk(self, harbour: list[Theme]):
        text = (THEMES_DIR / 'harbour-night.json').read_text(encoding='utf-8')
        theme = parse_theme(text, read_include=lambda p: (THEMES_DIR / p).read_text(encoding='utf-8'))
        assert theme == harbour[0]


class TestRenderAll:
    @pytest.mark.parametrize('provider_name', ['kate', 'docgen'])
    def test_every_theme_renders(self, harbour: list[Theme], provider_name: str):
        for theme in harbour:
            output = convert(theme, provider_name)
            assert theme.name in output

    def test_providers_discovered(self):
        assert sorted(all_providers()) == ['docgen', 'kate']

    def test_kate_night(self, harbour: list[Theme]):
        doc = json.loads(convert(harbour[0], 'kate'))
        colors = doc['editor-colors']
        assert colors['BackgroundColor'] == '#1b2430'
        assert colors['CurrentLine'] == '#10ffffff'
        assert colors['TextSelection'] == '#553b8eea'

        styles = doc['text-styles']
        assert styles['ControlFlow'] == {'text-color': '#ff7b72', 'selected-text-color': '#ff7b72', 'bold': True}
        assert styles['Keyword']['text-color'] == '#c678dd'
        assert styles['Function']['text-color'] == '#e06c75'
        assert styles['String']['text-color'] == '#98c379'

    def test_docgen_night(self, harbour: list[Theme]):
        css = convert(harbour[0], 'docgen')
        assert '  --primary: #3b8eea;' in css
        assert '  --document-fg: #d0d7de;' in css
        assert 'html.dark pre .string,\nhtml.dark pre .string.quoted {\n  color: #98c379;\n}' in css

    def test_docgen_day(self, harbour: list[Theme]):
        css = convert(harbour[1], 'docgen')
        assert css.startswith('/* Harbour Day */\n\nhtml.light {\n')
        assert '  --document-bg: #fafbfc;' in css
