"""Tests for config discovery and loading."""

from pathlib import Path

import pytest

from timedef.config.discovery import CONFIG_ENV_VAR, CONFIG_FILENAME, find_config, read_config


class TestFindConfig:
    def test_finds_in_current_dir(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[calendar]\nweek_start = "sunday"\n')
        assert find_config(tmp_path) == config_file

    def test_walks_up(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        child = tmp_path / "a" / "b" / "c"
        child.mkdir(parents=True)
        assert find_config(child) == config_file

    def test_returns_none_when_not_found(self, tmp_path: Path) -> None:
        child = tmp_path / "empty"
        child.mkdir()
        assert find_config(child) is None

    def test_env_var_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        config_file = tmp_path / "custom.toml"
        config_file.write_text("")
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config_file))
        assert find_config(tmp_path) == config_file

    def test_env_var_missing_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / CONFIG_FILENAME).write_text("")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "nope.toml"))
        assert find_config(tmp_path) is None


class TestReadConfig:
    def test_returns_sparse_overrides(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text('[calendar]\nweek_start = "sun"\n')
        assert read_config(config_file) == {"calendar": {"week_start": "sun"}}

    def test_empty_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("")
        assert read_config(config_file) == {}

    def test_bad_toml(self, tmp_path: Path) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text("[limits\n")
        with pytest.raises(ValueError, match="Invalid TOML"):
            read_config(config_file)

    @pytest.mark.parametrize(
        "text",
        ["[limits]\nmax_pieces = 0\n", "[calender]\nweek_start = 'sun'\n", "[calendar]\nweek_start = 'funday'\n"],
    )
    def test_rejects_bad_values(self, tmp_path: Path, text: str) -> None:
        config_file = tmp_path / CONFIG_FILENAME
        config_file.write_text(text)
        with pytest.raises(ValueError, match="Invalid config"):
            read_config(config_file)
