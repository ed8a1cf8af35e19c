"""Tests for the Settings class."""

import pathlib as _pathlib

import pydantic as _pydantic
import pytest as _pytest

import kdiff.config as config


def _write_project_config(workdir: _pathlib.Path, text: str) -> None:
    (workdir / ".kdiff").mkdir(exist_ok=True)
    (workdir / ".kdiff" / "config.yaml").write_text(text)


class TestDefaults:
    """Settings with nothing but the bundled defaults."""

    def test_defaults(self) -> None:
        settings = config.Settings()
        assert settings.version == 1
        assert settings.engine_command == ("kustomize", "build")
        assert settings.engine.timeout_seconds == 120
        assert settings.output.format == "text"
        assert settings.output.show_final is False
        assert settings.output.separator == " → "
        assert settings.logging.level == "warning"
        assert settings.collect_all_extra_fields() == {}


class TestLayers:
    """Precedence between constructor, env, and files."""

    def test_user_config(self, isolated_config: _pathlib.Path, monkeypatch: _pytest.MonkeyPatch, tmp_path: _pathlib.Path) -> None:
        (tmp_path / "config.yaml").write_text("output:\n  show_final: true\n")
        monkeypatch.setenv("KDIFF_CONFIG_DIR", str(tmp_path))
        assert config.Settings().output.show_final is True

    def test_project_config_from_working_directory(self, isolated_config: _pathlib.Path) -> None:
        _write_project_config(isolated_config, "output:\n  format: json\n")
        settings = config.Settings()
        assert settings.output.format == "json"
        assert settings.output.show_final is False

    def test_env_overrides_files(
        self,
        isolated_config: _pathlib.Path,
        monkeypatch: _pytest.MonkeyPatch,
    ) -> None:
        _write_project_config(isolated_config, "output:\n  format: json\n")
        monkeypatch.setenv("KDIFF_OUTPUT__FORMAT", "rich")
        assert config.Settings().output.format == "rich"

    def test_constructor_overrides_env(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KDIFF_OUTPUT__FORMAT", "rich")
        settings = config.Settings(output={"format": "json"})
        assert settings.output.format == "json"


class TestValidation:
    """Field validation."""

    def test_command_string_is_split(self, isolated_config: _pathlib.Path) -> None:
        _write_project_config(isolated_config, "engine:\n  command: kubectl kustomize\n")
        assert config.Settings().engine_command == ("kubectl", "kustomize")

    def test_invalid_format(self, isolated_config: _pathlib.Path) -> None:
        _write_project_config(isolated_config, "output:\n  format: html\n")
        with _pytest.raises(_pydantic.ValidationError):
            config.Settings()

    def test_empty_command_rejected(self) -> None:
        with _pytest.raises(_pydantic.ValidationError):
            config.Settings(engine={"command": []})

    def test_non_positive_timeout_rejected(self) -> None:
        with _pytest.raises(_pydantic.ValidationError):
            config.Settings(engine={"timeout_seconds": 0})

    def test_malformed_file(self, isolated_config: _pathlib.Path) -> None:
        _write_project_config(isolated_config, "output: [unclosed\n")
        with _pytest.raises(config.ConfigFileError):
            config.Settings()


class TestExtraFields:
    """Unknown keys are kept and reported."""

    def test_collect_all_extra_fields(self, isolated_config: _pathlib.Path) -> None:
        _write_project_config(
            isolated_config,
            "colour: true\noutput:\n  fromat: json\nengine:\n  comand: [kubectl]\n",
        )
        extras = config.Settings().collect_all_extra_fields()
        assert extras == {
            "colour": True,
            "output.fromat": "json",
            "engine.comand": ["kubectl"],
        }
