import os
import stat
from datetime import datetime, timezone
from unittest import mock

import pytest

from immprune import config
from immprune.batching import YearBatch
from immprune.config import CompareOptions, Settings
from immprune.errors import ConfigError, UserInputError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for var in ("IMMPRUNE_URL", "IMMPRUNE_API_KEY", "IMMPRUNE_LANG"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))


def test_default_path_follows_xdg(tmp_path):
    assert config.default_config_path() == tmp_path / "xdg" / "immprune" / "config.yaml"


def test_save_then_load(tmp_path):
    path = tmp_path / "cfg" / "config.yaml"
    config.save_settings(Settings("https://immich.example.com", "k3y", "fr"), path)
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
    loaded = config.load_settings(path, interactive=False)
    assert loaded == Settings("https://immich.example.com", "k3y", "fr")


def test_env_overrides_file(tmp_path, monkeypatch):
    path = tmp_path / "config.yaml"
    config.save_settings(Settings("https://old", "old-key"), path)
    monkeypatch.setenv("IMMPRUNE_API_KEY", "new-key")
    loaded = config.load_settings(path, interactive=False)
    assert loaded.immich_url == "https://old"
    assert loaded.immich_key == "new-key"


def test_env_only_without_file(tmp_path, monkeypatch):
    monkeypatch.setenv("IMMPRUNE_URL", "https://env")
    monkeypatch.setenv("IMMPRUNE_API_KEY", "env-key")
    loaded = config.load_settings(tmp_path / "absent.yaml", interactive=False)
    assert loaded.immich_url == "https://env"


def test_missing_file_non_interactive_is_config_error(tmp_path):
    with pytest.raises(ConfigError):
        config.load_settings(tmp_path / "absent.yaml", interactive=False)


def test_missing_file_runs_setup(tmp_path):
    setup = mock.Mock(return_value=Settings("https://u", "k"))
    loaded = config.load_settings(tmp_path / "absent.yaml", interactive=True, setup=setup, lang="fr")
    assert loaded.immich_key == "k"
    setup.assert_called_once_with(path=tmp_path / "absent.yaml", lang="fr")


@pytest.mark.parametrize(
    "content",
    ["immich_url: [unclosed", "- just\n- a list\n", "immich_url: https://u\n"],
    ids=["bad-yaml", "not-mapping", "missing-key"],
)
def test_bad_file_is_config_error(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError):
        config.load_settings(path, interactive=False)


def test_run_setup_prompts_and_writes(tmp_path):
    path = tmp_path / "config.yaml"
    with mock.patch("immprune.config.Prompt.ask", side_effect=["https://immich.example.com/", "secret"]) as ask:
        settings = config.run_setup(path=path)
    assert settings.immich_url == "https://immich.example.com"
    assert ask.call_args_list[1].kwargs["password"] is True
    assert config.load_settings(path, interactive=False).immich_key == "secret"


def test_options_defaults_validate():
    opts = CompareOptions().validate()
    assert opts.after_cutoff() is None
    assert opts.year_range() is None
    assert opts.batches() is None


def test_after_cutoff_is_midnight_utc():
    opts = CompareOptions(after="2021-05-01").validate()
    assert opts.after_cutoff() == datetime(2021, 5, 1, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"after": "05/01/2021"},
        {"limit": -1},
        {"use_batch": True, "start_year": 2024, "end_year": 2020},
        {"use_batch": True, "start_year": 2020, "end_year": 2024, "batch_years": 0},
        {"use_batch": True, "start_year": 2020, "end_year": 2024, "limit_per_batch": -3},
        {"backend": "picasa"},
        {"output": ""},
    ],
    ids=["bad-date", "neg-limit", "reversed-years", "zero-batch", "neg-batch-limit", "backend", "output"],
)
def test_invalid_options(kwargs):
    with pytest.raises(UserInputError):
        CompareOptions(**kwargs).validate()


def test_batch_options():
    opts = CompareOptions(use_batch=True, start_year=2020, end_year=2023, batch_years=2).validate()
    assert opts.year_range() == (2020, 2023)
    assert opts.batches() == [YearBatch(2022, 2023), YearBatch(2020, 2021)]


def test_credentials_file_created_owner_only(tmp_path, monkeypatch):
    modes = []
    real_open = os.open

    def recording_open(path, flags, mode=0o777):
        modes.append(mode)
        return real_open(path, flags, mode)

    monkeypatch.setattr(config.os, "open", recording_open)
    path = tmp_path / "config.yaml"
    path.write_text("old: value\n", encoding="utf-8")
    os.chmod(path, 0o644)
    config.save_settings(Settings("https://u", "k"), path)
    assert modes == [0o600]
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
    assert "old" not in path.read_text(encoding="utf-8")
