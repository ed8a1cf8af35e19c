"""
Shared constants for kdiff.

This module provides a single source of truth for values used across
multiple modules.
"""

# Overlay manifests
MANIFEST_FILENAMES = ("kustomization.yaml", "kustomization.yml", "Kustomization")
"""File names tried, in order, to decide whether a directory is an overlay."""

# External engine
DEFAULT_ENGINE_COMMAND = ("kustomize", "build")
"""Command the overlay directory is appended to for a full build."""

DEFAULT_ENGINE_TIMEOUT_SECONDS = 120.0
"""Default timeout for one engine build."""

# Reporting
DEFAULT_PATH_SEPARATOR = " → "
"""Separator between field path segments in reports."""

INLINE_SOURCE_LABEL = "inline patch"
"""Label shown in reports for patches without a source file."""
