"""Tests for overlay manifest loading."""

import pathlib as _pathlib

import pytest as _pytest

import kdiff.errors as errors
import kdiff.kustomize as kustomize


class TestKustomizationModel:
    """Tests for the Kustomization model."""

    def test_full_manifest(self) -> None:
        manifest = kustomize.Kustomization.model_validate(
            {
                "resources": ["../base", "service.yaml"],
                "components": ["../components/probes"],
                "patches": [
                    {"path": "replicas.yaml", "target": {"kind": "Deployment", "name": "web"}},
                ],
                "patchesJson6902": [
                    {"path": "image.yaml", "target": {"kind": "Deployment", "name": "web"}},
                ],
                "patchesStrategicMerge": ["labels.yaml"],
                "namePrefix": "prod-",
            }
        )
        assert manifest.resources == ["../base", "service.yaml"]
        assert manifest.components == ["../components/probes"]
        assert manifest.patches[0].path == "replicas.yaml"
        assert manifest.patches[0].target.kind == "Deployment"
        assert manifest.patches_json6902[0].path == "image.yaml"
        assert manifest.patches_strategic_merge == ["labels.yaml"]
        assert manifest.model_extra == {"namePrefix": "prod-"}

    def test_null_lists_become_empty(self) -> None:
        """A key written with no value (`resources:`) is an empty list."""
        manifest = kustomize.Kustomization.model_validate(
            {
                "resources": None,
                "components": None,
                "patches": None,
                "patchesJson6902": None,
                "patchesStrategicMerge": None,
            }
        )
        assert manifest.resources == []
        assert manifest.components == []
        assert manifest.patches == []
        assert manifest.patches_json6902 == []
        assert manifest.patches_strategic_merge == []

    def test_structured_inline_patch_serialized(self) -> None:
        """An inline patch written as YAML structure travels as text."""
        spec = kustomize.PatchSpec.model_validate(
            {
                "patch": [{"op": "replace", "path": "/spec/replicas", "value": 3}],
                "target": {"kind": "Deployment"},
            }
        )
        assert "op: replace" in spec.patch
        assert spec.path == ""
        assert spec.target.name == ""

    def test_missing_target_fields(self) -> None:
        spec = kustomize.PatchSpec.model_validate({"path": "p.yaml", "target": None})
        assert spec.target.kind == ""
        assert spec.target.name == ""

    def test_target_extra_selectors_kept(self) -> None:
        spec = kustomize.PatchSpec.model_validate(
            {"patch": "a: 1", "target": {"kind": "Deployment", "namespace": "prod"}}
        )
        assert spec.target.model_extra == {"namespace": "prod"}


class TestFindManifest:
    """Tests for find_manifest and is_overlay."""

    def test_finds_alternative_names(self, tmp_path: _pathlib.Path) -> None:
        (tmp_path / "kustomization.yml").write_text("resources: []\n")
        assert kustomize.find_manifest(tmp_path) == tmp_path / "kustomization.yml"
        assert kustomize.is_overlay(tmp_path)

    def test_yaml_preferred(self, tmp_path: _pathlib.Path) -> None:
        (tmp_path / "kustomization.yml").write_text("")
        (tmp_path / "kustomization.yaml").write_text("")
        assert kustomize.find_manifest(tmp_path) == tmp_path / "kustomization.yaml"

    def test_plain_directory_is_not_overlay(self, tmp_path: _pathlib.Path) -> None:
        assert kustomize.find_manifest(tmp_path) is None
        assert not kustomize.is_overlay(tmp_path)

    def test_file_is_not_overlay(self, tmp_path: _pathlib.Path) -> None:
        path = tmp_path / "deployment.yaml"
        path.write_text("kind: Deployment\n")
        assert not kustomize.is_overlay(path)


class TestLoadManifest:
    """Tests for load_manifest and load_overlay_manifest."""

    def test_load(self, tmp_path: _pathlib.Path) -> None:
        path = tmp_path / "kustomization.yaml"
        path.write_text("resources:\n- deployment.yaml\n")
        assert kustomize.load_manifest(path).resources == ["deployment.yaml"]

    def test_empty_file(self, tmp_path: _pathlib.Path) -> None:
        path = tmp_path / "kustomization.yaml"
        path.write_text("")
        assert kustomize.load_manifest(path) == kustomize.Kustomization()

    def test_invalid_yaml(self, tmp_path: _pathlib.Path) -> None:
        path = tmp_path / "kustomization.yaml"
        path.write_text("resources: [a\n")
        with _pytest.raises(errors.ManifestError, match="Error in kustomization"):
            kustomize.load_manifest(path)

    def test_not_a_mapping(self, tmp_path: _pathlib.Path) -> None:
        path = tmp_path / "kustomization.yaml"
        path.write_text("- a\n- b\n")
        with _pytest.raises(errors.ManifestError, match="must be a YAML mapping"):
            kustomize.load_manifest(path)

    def test_schema_violation(self, tmp_path: _pathlib.Path) -> None:
        path = tmp_path / "kustomization.yaml"
        path.write_text("resources: 5\n")
        with _pytest.raises(errors.ManifestError, match="invalid manifest"):
            kustomize.load_manifest(path)

    def test_unreadable(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(errors.ManifestError, match="cannot read file"):
            kustomize.load_manifest(tmp_path / "missing.yaml")

    def test_overlay_without_manifest(self, tmp_path: _pathlib.Path) -> None:
        with _pytest.raises(errors.ManifestError, match="no kustomization file found"):
            kustomize.load_overlay_manifest(tmp_path)
