"""Tests for the layered YAML settings source."""

import pathlib as _pathlib
import typing as _typing

import pydantic_settings as _pydantic_settings
import pytest as _pytest

import kdiff.config.sources as sources


class MinimalSettings(_pydantic_settings.BaseSettings):
    """Minimal settings class for exercising the source directly."""

    model_config = _pydantic_settings.SettingsConfigDict(
        env_prefix="TEST_",
        extra="ignore",
    )

    version: int = 0


def _source(
    tmp_path: _pathlib.Path,
    *,
    builtin: str | None = "version: 1\noutput:\n  format: text\n  show_final: false\n",
    user: str | None = None,
    project: str | None = None,
) -> sources.YamlLayersSettingsSource:
    """Build a source from literal layer contents (None means the file is absent)."""
    tmp_path.mkdir(parents=True, exist_ok=True)
    builtin_path = tmp_path / "builtin.yaml"
    if builtin is not None:
        builtin_path.write_text(builtin)
    user_path = tmp_path / "user.yaml"
    if user is not None:
        user_path.write_text(user)
    project_root = tmp_path / "project"
    if project is not None:
        (project_root / ".kdiff").mkdir(parents=True)
        (project_root / ".kdiff" / "config.yaml").write_text(project)
    return sources.YamlLayersSettingsSource(
        MinimalSettings,
        project_root=project_root,
        user_config_path=user_path,
        builtin_config_path=builtin_path,
    )


class TestPaths:
    """Where the config files live."""

    def test_builtin_defaults_are_packaged(self) -> None:
        path = sources.builtin_defaults_path()
        assert path.parent.name == "defaults"
        assert path.is_file()

    def test_user_config_default(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("KDIFF_CONFIG_DIR", raising=False)
        expected = _pathlib.Path.home() / ".config" / "kdiff" / "config.yaml"
        assert sources.default_user_config_path() == expected

    def test_user_config_dir_from_env(self, monkeypatch: _pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("KDIFF_CONFIG_DIR", "/custom/config/dir")
        expected = _pathlib.Path("/custom/config/dir/config.yaml")
        assert sources.default_user_config_path() == expected

    def test_project_config_path(self) -> None:
        root = _pathlib.Path("/some/project")
        assert sources.project_config_path(root) == root / ".kdiff" / "config.yaml"


class TestBundledDefaults:
    """The bundled defaults file."""

    def test_loads(self) -> None:
        result = sources.YamlLayersSettingsSource(MinimalSettings)()
        assert result["version"] == 1
        assert result["engine"]["command"] == ["kustomize", "build"]
        assert result["output"]["format"] == "text"


class TestMergeOrder:
    """Higher layers override lower ones; maps merge."""

    def test_override_chain(self, tmp_path: _pathlib.Path) -> None:
        assert _source(tmp_path, user="version: 2\n")()["version"] == 2
        assert _source(tmp_path / "p", user="version: 2\n", project="version: 3\n")()["version"] == 3

    def test_nested_sections_merge(self, tmp_path: _pathlib.Path) -> None:
        """Setting one key of a section keeps the section's other keys."""
        source = _source(tmp_path, user="output:\n  format: json\n")
        assert source()["output"] == {"format": "json", "show_final": False}

    def test_lists_replace(self, tmp_path: _pathlib.Path) -> None:
        source = _source(
            tmp_path,
            builtin="engine:\n  command: [kustomize, build]\n",
            project="engine:\n  command: [kubectl, kustomize]\n",
        )
        assert source()["engine"]["command"] == ["kubectl", "kustomize"]

    def test_missing_and_empty_optional_layers(self, tmp_path: _pathlib.Path) -> None:
        assert _source(tmp_path)()["version"] == 1
        assert _source(tmp_path / "e", user="", project="")()["version"] == 1

    def test_field_value_lookup(self, tmp_path: _pathlib.Path) -> None:
        source = _source(tmp_path)
        field = MinimalSettings.model_fields["version"]
        assert source.get_field_value(field, "version") == (1, "version", False)
        assert source.get_field_value(field, "output")[2] is True

    def test_result_is_a_copy(self, tmp_path: _pathlib.Path) -> None:
        source = _source(tmp_path)
        source()["output"]["format"] = "changed"
        assert source()["output"]["format"] == "text"


class TestErrors:
    """Tests for ConfigFileError conditions."""

    def test_missing_builtin(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(sources.ConfigFileError, match="built-in defaults not found"):
            _source(tmp_path, builtin=None)

    def test_empty_builtin(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(sources.ConfigFileError, match="empty"):
            _source(tmp_path, builtin="")

    def test_malformed_yaml(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(sources.ConfigFileError, match="invalid YAML"):
            _source(tmp_path, user="output: [unclosed\n")

    def test_non_mapping(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(sources.ConfigFileError, match="got list") as exc_info:
            _source(tmp_path, project="- a\n- b\n")
        assert exc_info.value.path.name == "config.yaml"


class TestDeepMergeDicts:
    """Tests for deep_merge_dicts."""

    def test_inputs_not_modified(self) -> None:
        base: dict[str, _typing.Any] = {"a": {"x": 1}}
        override: dict[str, _typing.Any] = {"a": {"y": 2}}
        merged = sources.deep_merge_dicts(base, override)
        assert merged == {"a": {"x": 1, "y": 2}}
        assert base == {"a": {"x": 1}}
        assert override == {"a": {"y": 2}}
