"""Tests for theme_converter.core.env: settings from the environment and .env files."""

import os
from pathlib import Path

import pytest
from theme_converter.core.env import (
    DEFAULT_VARIANT,
    STRICT_REGISTRY,
    Settings,
    find_dotenv,
    load_settings,
    read_dotenv,
)
from theme_converter.core.types import Variant


@pytest.fixture
def isolated(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    (tmp_path / '.git').mkdir()
    monkeypatch.chdir(tmp_path)
    for key in (STRICT_REGISTRY, DEFAULT_VARIANT):
        monkeypatch.delenv(key, raising=False)
    return tmp_path


class TestReadDotenv:
    def test_quotes_comments_and_blank_lines(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text(
            '# THEME_CONVERTER_DEFAULT_VARIANT=dark\n'
            '\n'
            'THEME_CONVERTER_DEFAULT_VARIANT="hcDark"\n'
            "THEME_CONVERTER_STRICT_REGISTRY = 'yes'\n"
            'THEME_CONVERTER_NO_VALUE\n'
        )
        assert read_dotenv(f) == {DEFAULT_VARIANT: 'hcDark', STRICT_REGISTRY: 'yes'}

    def test_other_keys_ignored(self, tmp_path: Path) -> None:
        f = tmp_path / '.env'
        f.write_text('API_TOKEN=secret\nTHEME_CONVERTER_STRICT_REGISTRY=1\n')
        assert read_dotenv(f) == {STRICT_REGISTRY: '1'}


class TestFindDotenv:
    def test_finds_in_parent(self, isolated: Path) -> None:
        subdir = isolated / 'themes' / 'dark'
        subdir.mkdir(parents=True)
        (isolated / '.env').write_text('THEME_CONVERTER_STRICT_REGISTRY=1\n')
        assert find_dotenv(subdir) == isolated / '.env'

    @pytest.mark.parametrize('git_is_file', [False, True])
    def test_stops_at_git_boundary(self, tmp_path: Path, git_is_file: bool) -> None:
        repo = tmp_path / 'repo'
        (repo / 'src').mkdir(parents=True)
        (tmp_path / '.env').write_text('THEME_CONVERTER_STRICT_REGISTRY=1\n')
        if git_is_file:
            (repo / '.git').write_text('gitdir: ../elsewhere\n')
        else:
            (repo / '.git').mkdir()
        assert find_dotenv(repo / 'src') is None


class TestLoadSettings:
    def test_defaults(self, isolated: Path) -> None:
        assert load_settings() == Settings(strict_registry=False, default_variant=Variant.LIGHT)

    @pytest.mark.parametrize('raw', ['1', 'true', 'YES', ' on '])
    def test_strict_truthy(self, isolated: Path, monkeypatch: pytest.MonkeyPatch, raw: str) -> None:
        monkeypatch.setenv(STRICT_REGISTRY, raw)
        assert load_settings().strict_registry

    def test_strict_falsy(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(STRICT_REGISTRY, '0')
        assert not load_settings().strict_registry

    def test_default_variant(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(DEFAULT_VARIANT, 'hcDark')
        assert load_settings().default_variant is Variant.HC_DARK

    def test_invalid_variant_falls_back(
        self, isolated: Path, monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
    ) -> None:
        monkeypatch.setenv(DEFAULT_VARIANT, 'sepia')
        assert load_settings().default_variant is Variant.LIGHT
        assert 'sepia' in caplog.text

    def test_reads_dotenv_in_parent(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (isolated / '.env').write_text('THEME_CONVERTER_DEFAULT_VARIANT=dark\nTHEME_CONVERTER_STRICT_REGISTRY=true\n')
        subdir = isolated / 'themes'
        subdir.mkdir()
        monkeypatch.chdir(subdir)
        assert load_settings() == Settings(strict_registry=True, default_variant=Variant.DARK)

    def test_environment_wins_over_dotenv(self, isolated: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (isolated / '.env').write_text('THEME_CONVERTER_DEFAULT_VARIANT=dark\n')
        monkeypatch.setenv(DEFAULT_VARIANT, 'hcLight')
        assert load_settings().default_variant is Variant.HC_LIGHT

    def test_dotenv_does_not_touch_environment(self, isolated: Path) -> None:
        (isolated / '.env').write_text('THEME_CONVERTER_DEFAULT_VARIANT=dark\n')
        assert load_settings().default_variant is Variant.DARK
        assert DEFAULT_VARIANT not in os.environ

    def test_explicit_env_file(self, isolated: Path) -> None:
        custom = isolated / 'settings.env'
        custom.write_text('THEME_CONVERTER_DEFAULT_VARIANT=hcLight\n')
        assert load_settings(env_file=str(custom)).default_variant is Variant.HC_LIGHT

    def test_missing_env_file_uses_defaults(self, isolated: Path) -> None:
        (isolated / '.env').write_text('THEME_CONVERTER_DEFAULT_VARIANT=dark\n')
        assert load_settings(env_file=str(isolated / 'missing.env')) == Settings()
