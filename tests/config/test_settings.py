"""Tests for PathSettings — unified settings with TOML source."""

from pathlib import Path

import pytest

from pathctl.config.settings import PathSettings


class TestPathSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = PathSettings.from_cli(root=tmp_path)
        assert settings.root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.graph.max_depth == 5
        assert settings.graph.pair_locking is True
        assert settings.database.filename == "pathctl.db"

    def test_frozen(self, tmp_path: Path) -> None:
        settings = PathSettings.from_cli(root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        (tmp_path / "pathctl.toml").write_text("[graph]\nmax_depth = 9\n")
        settings = PathSettings.from_cli(root=tmp_path)
        assert settings.graph.max_depth == 9
        assert settings.graph.pair_locking is True  # default preserved
        assert settings.config_path == tmp_path / "pathctl.toml"

    def test_root_from_config_parent(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pathctl.toml").write_text("")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = PathSettings.from_cli()
        assert settings.root == tmp_path.resolve()

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "my.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text("[database]\nfilename = \"other.db\"\n")
        settings = PathSettings.from_cli(config_path=str(custom), root=tmp_path)
        assert settings.database.filename == "other.db"
        assert settings.config_path == custom

    def test_invalid_toml(self, tmp_path: Path) -> None:
        import click

        (tmp_path / "pathctl.toml").write_text("[graph\n")
        with pytest.raises(click.ClickException):
            PathSettings.from_cli(root=tmp_path)

    def test_out_of_range_depth(self, tmp_path: Path) -> None:
        (tmp_path / "pathctl.toml").write_text("[graph]\nmax_depth = 0\n")
        with pytest.raises(Exception):
            PathSettings.from_cli(root=tmp_path)


class TestPriority:
    def test_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("PATHCTL_GRAPH__MAX_DEPTH", "7")
        settings = PathSettings.from_cli(root=tmp_path)
        assert settings.graph.max_depth == 7

    def test_cli_flags_win(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pathctl.toml").write_text("[graph]\nmax_depth = 9\n")
        settings = PathSettings.from_cli(root=tmp_path, graph={"max_depth": 2})
        assert settings.graph.max_depth == 2
