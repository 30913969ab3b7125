"""Tests for config module."""

from pathlib import Path

import pytest

from linediff.config import Config, HighlightConfig, LoaderConfig, load_config


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Create a temporary config file."""
    config_yaml = tmp_path / "config.yaml"
    config_yaml.write_text("""
view: unified

highlight:
  marker: del
  by_position: true

loader:
  timeout: 15
  retry_count: 2

reports:
  base_dir: "out/reports"
  base_url: "https://user.github.io/diffs"
""")
    return config_yaml


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LINEDIFF_VIEW", "LINEDIFF_REPORTS_DIR", "LINEDIFF_REPORTS_URL"):
        monkeypatch.delenv(name, raising=False)


class TestLoadConfig:
    def test_load_config_from_yaml(self, config_file: Path) -> None:
        config = load_config(config_file)

        assert config.view == "unified"
        assert config.highlight.marker == "del"
        assert config.highlight.by_position is True
        assert config.loader.timeout == 15
        assert config.loader.retry_count == 2
        assert config.reports_dir == Path("out/reports")
        assert config.reports_base_url == "https://user.github.io/diffs"

    def test_load_config_without_path_uses_defaults(self) -> None:
        config = load_config()

        assert config == Config()

    def test_load_config_empty_file(self, tmp_path: Path) -> None:
        config_yaml = tmp_path / "config.yaml"
        config_yaml.write_text("")

        assert load_config(config_yaml) == Config()

    def test_env_overrides_file(self, config_file: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LINEDIFF_VIEW", "side-by-side")
        monkeypatch.setenv("LINEDIFF_REPORTS_DIR", "elsewhere")
        monkeypatch.setenv("LINEDIFF_REPORTS_URL", "https://example.com")

        config = load_config(config_file)

        assert config.view == "side-by-side"
        assert config.reports_dir == Path("elsewhere")
        assert config.reports_base_url == "https://example.com"

    def test_load_config_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "nonexistent.yaml")

    def test_invalid_view(self, tmp_path: Path) -> None:
        config_yaml = tmp_path / "config.yaml"
        config_yaml.write_text("view: columns")

        with pytest.raises(ValueError, match="Unknown view"):
            load_config(config_yaml)


class TestDefaults:
    def test_config_defaults(self) -> None:
        config = Config()
        assert config.view == "side-by-side"
        assert config.reports_dir == Path("reports")
        assert config.reports_base_url == ""

    def test_loader_defaults(self) -> None:
        config = LoaderConfig()
        assert config.timeout == 30.0
        assert config.retry_count == 3

    def test_highlight_defaults(self) -> None:
        config = HighlightConfig()
        assert config.marker == "mark"
        assert config.by_position is False
