"""Configuration: persisted Immich credentials and per-run compare options.

Credentials live in $XDG_CONFIG_HOME/immprune/config.yaml:

    immich_url: https://immich.example.com
    immich_key: <api key>
    language: en

IMMPRUNE_URL, IMMPRUNE_API_KEY and IMMPRUNE_LANG override the file.
Nothing here is module-level mutable state: Settings and CompareOptions are
built once in the CLI and passed to each step.
"""
import logging
import os
import stat
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import yaml
from rich.console import Console
from rich.prompt import Prompt

from immprune.batching import YearBatch, build_year_batches
from immprune.errors import ConfigError, UserInputError
from immprune.i18n import DEFAULT_LANG, LANGUAGES, normalize_lang, t
from immprune.matcher import cutoff_from_date
from immprune.photos import BACKENDS, DEFAULT_BACKEND

logger = logging.getLogger(__name__)

APP_NAME = "immprune"
CONFIG_FILE_NAME = "config.yaml"
DEFAULT_OUTPUT = "safe_to_delete.txt"
DEFAULT_START_YEAR = 2018
DEFAULT_BATCH_YEARS = 2


def config_dir() -> Path:
    base = os.environ.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
    return Path(base) / APP_NAME


def default_config_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


@dataclass(frozen=True)
class Settings:
    immich_url: str
    immich_key: str
    language: str = DEFAULT_LANG

    def check(self) -> "Settings":
        if not self.immich_url:
            raise ConfigError("immich_url is not set")
        if not self.immich_key:
            raise ConfigError("immich_key is not set")
        return self


def _read_yaml(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def _apply_env(data: dict) -> dict:
    merged = dict(data)
    for env, key in (
        ("IMMPRUNE_URL", "immich_url"),
        ("IMMPRUNE_API_KEY", "immich_key"),
        ("IMMPRUNE_LANG", "language"),
    ):
        val = os.environ.get(env)
        if val:
            merged[key] = val
    return merged


def _settings_from(data: dict) -> Settings:
    return Settings(
        immich_url=str(data.get("immich_url") or "").strip(),
        immich_key=str(data.get("immich_key") or "").strip(),
        language=normalize_lang(str(data.get("language") or DEFAULT_LANG)),
    )


def save_settings(settings: Settings, path: Optional[Path] = None) -> Path:
    """Write credentials to `path`, readable by the owner only."""
    path = Path(path) if path else default_config_path()
    path.parent.mkdir(parents=True, exist_ok=True, mode=0o700)
    data = {
        "immich_url": settings.immich_url,
        "immich_key": settings.immich_key,
        "language": settings.language,
    }
    fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    # O_CREAT mode only applies to new files
    os.chmod(path, stat.S_IRUSR | stat.S_IWUSR)
    return path


def run_setup(
    path: Optional[Path] = None,
    lang: str = DEFAULT_LANG,
    console: Optional[Console] = None,
) -> Settings:
    """Ask for the Immich URL and API key and persist them."""
    console = console or Console()
    console.print(t(lang, "setup_title"), markup=False)
    console.print(t(lang, "setup_hint"), markup=False)
    url = Prompt.ask(t(lang, "setup_url"), console=console).strip()
    key = Prompt.ask(t(lang, "setup_key"), password=True, console=console).strip()
    settings = Settings(immich_url=url.rstrip("/"), immich_key=key, language=normalize_lang(lang)).check()
    written = save_settings(settings, path)
    console.print(t(lang, "setup_written", path=written), markup=False)
    return settings


def load_settings(
    path: Optional[Path] = None,
    interactive: bool = True,
    setup: Optional[Callable[..., Settings]] = None,
    lang: str = DEFAULT_LANG,
) -> Settings:
    """Load credentials, running the first-run setup when no file exists."""
    path = Path(path) if path else default_config_path()
    if path.exists():
        settings = _settings_from(_apply_env(_read_yaml(path)))
        logger.debug("Loaded config from %s", path)
        return settings.check()

    env_only = _settings_from(_apply_env({}))
    if env_only.immich_url and env_only.immich_key:
        return env_only
    if not interactive:
        raise ConfigError(f"no configuration at {path}; run `immprune setup` first")
    return (setup or run_setup)(path=path, lang=lang)


def parse_after(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError as e:
        raise UserInputError(f"invalid --after date {value!r}, expected YYYY-MM-DD") from e


@dataclass
class CompareOptions:
    only_videos: bool = False
    after: str = ""
    limit: int = 0
    output: str = DEFAULT_OUTPUT
    use_batch: bool = False
    start_year: int = DEFAULT_START_YEAR
    end_year: int = field(default_factory=lambda: date.today().year)
    batch_years: int = DEFAULT_BATCH_YEARS
    limit_per_batch: int = 0
    backend: str = DEFAULT_BACKEND
    verify_checksum: bool = False
    lang: str = DEFAULT_LANG

    def validate(self) -> "CompareOptions":
        """Raise UserInputError on any bad value, before anything is fetched."""
        parse_after(self.after)
        if self.limit < 0:
            raise UserInputError("limit must be >= 0")
        if not self.output:
            raise UserInputError("output path is empty")
        if self.backend not in BACKENDS:
            raise UserInputError(f"unknown backend {self.backend!r}, choose from {', '.join(BACKENDS)}")
        if self.lang not in LANGUAGES:
            raise UserInputError(f"unknown language {self.lang!r}")
        if self.use_batch:
            if self.end_year < self.start_year:
                raise UserInputError("end year must be >= start year")
            if self.batch_years <= 0:
                raise UserInputError("invalid years per batch")
            if self.limit_per_batch < 0:
                raise UserInputError("invalid batch limit")
        return self

    def after_cutoff(self) -> Optional[datetime]:
        day = parse_after(self.after)
        return cutoff_from_date(day) if day else None

    def year_range(self) -> Optional[Tuple[int, int]]:
        return (self.start_year, self.end_year) if self.use_batch else None

    def batches(self) -> Optional[List[YearBatch]]:
        if not self.use_batch:
            return None
        return build_year_batches(self.start_year, self.end_year, self.batch_years)
