"""
Shared pytest fixtures for kdiff tests.

This file is automatically loaded by pytest. Fixtures defined here are
available to all test files without explicit imports.
"""

import copy as _copy
import os as _os
import pathlib as _pathlib
import typing as _typing

import pytest as _pytest
import yaml as _yaml

import kdiff.kustomize as kustomize

# Environment keys that should be cleared for isolated tests
ENV_KEYS_TO_CLEAR = [
    "KDIFF_CONFIG_DIR",
    "KDIFF_ENGINE__COMMAND",
    "KDIFF_ENGINE__TIMEOUT_SECONDS",
    "KDIFF_OUTPUT__FORMAT",
    "KDIFF_OUTPUT__SHOW_FINAL",
    "KDIFF_OUTPUT__SEPARATOR",
    "KDIFF_LOGGING__LEVEL",
]


# =============================================================================
# Environment isolation
# =============================================================================


@_pytest.fixture(autouse=True)
def isolated_config(
    tmp_path_factory: _pytest.TempPathFactory,
    monkeypatch: _pytest.MonkeyPatch,
) -> _pathlib.Path:
    """
    Keep the developer's own kdiff config out of every test.

    Points KDIFF_CONFIG_DIR at an empty directory and runs the test from an
    empty working directory (no .kdiff/config.yaml). Returns that directory.
    """
    for key in ENV_KEYS_TO_CLEAR:
        monkeypatch.delenv(key, raising=False)
    user_dir = tmp_path_factory.mktemp("user-config")
    monkeypatch.setenv("KDIFF_CONFIG_DIR", str(user_dir))
    workdir = tmp_path_factory.mktemp("workdir")
    monkeypatch.chdir(workdir)
    return workdir


# =============================================================================
# Resource trees
# =============================================================================


def make_deployment(name: str = "test", image: str = "nginx:1.0", replicas: int = 1) -> dict[str, _typing.Any]:
    """A small Deployment tree, the usual patch target in these tests."""
    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": {"name": name},
        "spec": {
            "replicas": replicas,
            "template": {
                "spec": {
                    "containers": [
                        {"name": "app", "image": image},
                    ],
                },
            },
        },
    }


@_pytest.fixture
def deployment() -> dict[str, _typing.Any]:
    """Fresh Deployment/test tree."""
    return make_deployment()


@_pytest.fixture
def resource_index() -> kustomize.ResourceIndex:
    """Index holding Deployment/test and Service/test."""
    service = {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": {"name": "test"},
        "spec": {"ports": [{"port": 80}]},
    }
    return kustomize.ResourceIndex(
        [
            kustomize.Resource("Deployment", "test", make_deployment()),
            kustomize.Resource("Service", "test", service),
        ]
    )


# =============================================================================
# Overlay trees on disk
# =============================================================================


def write_yaml(path: _pathlib.Path, data: _typing.Any) -> _pathlib.Path:
    """Write data as YAML (a list of documents becomes a multi-document file)."""
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(data, str):
        path.write_text(data)
    else:
        path.write_text(_yaml.safe_dump(data, sort_keys=False))
    return path


def write_overlay(
    directory: _pathlib.Path,
    manifest: dict[str, _typing.Any],
    files: dict[str, _typing.Any] | None = None,
) -> _pathlib.Path:
    """
    Create an overlay directory with a kustomization.yaml and extra files.

    Args:
        directory: Overlay directory to create.
        manifest: Manifest contents.
        files: Relative path -> YAML data (or raw text) for other files.
    """
    directory.mkdir(parents=True, exist_ok=True)
    write_yaml(directory / "kustomization.yaml", manifest)
    for relative, data in (files or {}).items():
        write_yaml(directory / relative, data)
    return directory


@_pytest.fixture
def overlay_writer() -> _typing.Callable[..., _pathlib.Path]:
    """The write_overlay helper, for tests that build overlay trees."""
    return write_overlay


@_pytest.fixture
def yaml_writer() -> _typing.Callable[[_pathlib.Path, _typing.Any], _pathlib.Path]:
    """The write_yaml helper."""
    return write_yaml


# =============================================================================
# Fake engine
# =============================================================================


class FakeEngine(kustomize.OverlayEngine):
    """
    Engine that records build calls and returns canned resources.

    outputs maps an overlay directory to the trees its build returns;
    failures maps a directory to the exception its build raises.
    Directories with neither build to an empty list.
    """

    def __init__(self) -> None:
        self.outputs: dict[_pathlib.Path, list[dict[str, _typing.Any]]] = {}
        self.failures: dict[_pathlib.Path, Exception] = {}
        self.calls: list[_pathlib.Path] = []

    @staticmethod
    def _key(directory: _pathlib.Path) -> _pathlib.Path:
        return _pathlib.Path(_os.path.normpath(directory))

    def set_output(self, directory: _pathlib.Path, trees: list[dict[str, _typing.Any]]) -> None:
        self.outputs[self._key(directory)] = trees

    def set_failure(self, directory: _pathlib.Path, error: Exception) -> None:
        self.failures[self._key(directory)] = error

    def build(self, directory: _pathlib.Path) -> list[kustomize.Resource]:
        key = self._key(directory)
        self.calls.append(key)
        if key in self.failures:
            raise self.failures[key]
        return [
            kustomize.Resource.from_tree(_copy.deepcopy(tree), directory)
            for tree in self.outputs.get(key, [])
        ]


@_pytest.fixture
def fake_engine() -> FakeEngine:
    """A fresh FakeEngine."""
    return FakeEngine()


@_pytest.fixture
def simple_overlay(tmp_path: _pathlib.Path) -> _pathlib.Path:
    """
    Root overlay over one base.

    root/
      kustomization.yaml   resources: [../base], inline JSON patch on the image
    base/
      kustomization.yaml   resources: [deployment.yaml], patches: [replicas.yaml]
      deployment.yaml      Deployment/test
      replicas.yaml        merge patch: spec.replicas = 3
    """
    write_overlay(
        tmp_path / "base",
        {
            "resources": ["deployment.yaml"],
            "patches": [
                {"path": "replicas.yaml", "target": {"kind": "Deployment", "name": "test"}},
            ],
        },
        {
            "deployment.yaml": make_deployment(),
            "replicas.yaml": {
                "apiVersion": "apps/v1",
                "kind": "Deployment",
                "metadata": {"name": "test"},
                "spec": {"replicas": 3},
            },
        },
    )
    return write_overlay(
        tmp_path / "root",
        {
            "resources": ["../base"],
            "patchesJson6902": [
                {
                    "target": {"kind": "Deployment", "name": "test"},
                    "patch": (
                        "- op: replace\n"
                        "  path: /spec/template/spec/containers/0/image\n"
                        "  value: nginx:2.0\n"
                    ),
                },
            ],
        },
    )
