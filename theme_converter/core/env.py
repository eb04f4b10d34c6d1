"""Settings for theme-converter, read from the environment and .env files.

A THEME_CONVERTER_* variable set in the OS environment wins. Otherwise the
value comes from a .env file: the explicit env_file if given, else the
nearest .env at or above the current directory, never looking past a .git
boundary. The .env file is only read; os.environ is left untouched, and
keys without the THEME_CONVERTER_ prefix are ignored.

Recognised variables:
  THEME_CONVERTER_STRICT_REGISTRY   1/true/yes/on: reject duplicate colour ids
  THEME_CONVERTER_DEFAULT_VARIANT   variant for themes that declare no type
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from theme_converter.core.types import Variant

logger = logging.getLogger(__name__)

ENV_PREFIX = 'THEME_CONVERTER_'
STRICT_REGISTRY = f'{ENV_PREFIX}STRICT_REGISTRY'
DEFAULT_VARIANT = f'{ENV_PREFIX}DEFAULT_VARIANT'

_TRUTHY = {'1', 'true', 'yes', 'on'}


@dataclass(frozen=True)
class Settings:
    strict_registry: bool = False
    default_variant: Variant = Variant.LIGHT


def find_dotenv(start: Path) -> Path | None:
    """Nearest .env at or above *start*; None once a directory holding .git has been checked."""
    for directory in (start.resolve(), *start.resolve().parents):
        if (directory / '.env').is_file():
            return directory / '.env'
        # a worktree has a .git file rather than a directory
        if (directory / '.git').exists():
            break
    return None


def read_dotenv(path: Path) -> dict[str, str]:
    """THEME_CONVERTER_* entries of a .env file. Values may be quoted; # starts a comment line."""
    values: dict[str, str] = {}
    for line in path.read_text(encoding='utf-8').splitlines():
        key, sep, value = line.strip().partition('=')
        key = key.strip()
        if not sep or not key.startswith(ENV_PREFIX):
            continue
        values[key] = value.strip().strip('"').strip("'")
    return values


def load_settings(env_file: str | None = None) -> Settings:
    """Build Settings from the OS environment, falling back to .env values."""
    path = Path(env_file) if env_file else find_dotenv(Path.cwd())
    file_values = read_dotenv(path) if path is not None and path.is_file() else {}
    if path is not None and file_values:
        logger.debug('Read %d settings from %s', len(file_values), path)

    def lookup(name: str) -> str:
        return os.environ.get(name, file_values.get(name, '')).strip()

    strict = lookup(STRICT_REGISTRY).lower() in _TRUTHY

    variant = Variant.LIGHT
    raw_variant = lookup(DEFAULT_VARIANT)
    if raw_variant:
        try:
            variant = Variant(raw_variant)
        except ValueError:
            logger.warning(
                'Ignoring %s=%r (expected one of %s)',
                DEFAULT_VARIANT,
                raw_variant,
                ', '.join(v.value for v in Variant),
            )

    return Settings(strict_registry=strict, default_variant=variant)
