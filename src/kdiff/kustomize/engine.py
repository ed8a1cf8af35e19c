"""
External overlay-build engine.

kdiff does not reimplement kustomize. Full builds (the final merged output,
and the backstop build of every nested overlay) are delegated to an engine.
The default engine shells out to the `kustomize build` command; tests
substitute their own OverlayEngine.
"""

from __future__ import annotations

import abc as _abc
import logging as _logging
import pathlib as _pathlib
import subprocess as _subprocess
import typing as _typing

import kdiff.codec as codec
import kdiff.constants as constants
import kdiff.errors as errors
import kdiff.kustomize.resources as resources

_logger = _logging.getLogger(__name__)


class OverlayEngine(_abc.ABC):
    """Builds an overlay directory into its fully-merged resources."""

    @_abc.abstractmethod
    def build(self, directory: _pathlib.Path) -> list[resources.Resource]:
        """
        Build an overlay directory.

        Returns:
            The resources of the build output, in output order.

        Raises:
            EngineError: If the build fails.
        """
        ...


class KustomizeEngine(OverlayEngine):
    """
    Engine backed by the kustomize CLI.

    Runs `<command> <directory>` (default `kustomize build <directory>`) and
    parses the multi-document YAML it prints. `kubectl kustomize` works too:
    pass command=("kubectl", "kustomize").
    """

    def __init__(
        self,
        command: _typing.Sequence[str] = constants.DEFAULT_ENGINE_COMMAND,
        *,
        timeout: float | None = constants.DEFAULT_ENGINE_TIMEOUT_SECONDS,
    ) -> None:
        """
        Initialize the engine.

        Args:
            command: Command prefix; the overlay directory is appended.
            timeout: Seconds before a build is abandoned (None for no limit).
        """
        if not command:
            raise ValueError("engine command must not be empty")
        self._command = tuple(command)
        self._timeout = timeout

    @property
    def command(self) -> tuple[str, ...]:
        """The command prefix used for builds."""
        return self._command

    def run(self, directory: _pathlib.Path) -> str:
        """
        Run the build command and return its stdout.

        Raises:
            EngineError: On a missing executable, timeout, or non-zero exit.
        """
        argv = [*self._command, str(directory)]
        _logger.debug("Running %s", " ".join(argv))
        try:
            result = _subprocess.run(
                argv,
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except FileNotFoundError as e:
            raise errors.EngineError(
                directory, f"'{self._command[0]}' not found in PATH"
            ) from e
        except _subprocess.TimeoutExpired as e:
            raise errors.EngineError(directory, f"timed out after {self._timeout}s") from e
        except OSError as e:
            raise errors.EngineError(directory, str(e)) from e

        if result.returncode != 0:
            message = result.stderr.strip() or f"exit code {result.returncode}"
            raise errors.EngineError(directory, message)
        return result.stdout

    def build(self, directory: _pathlib.Path) -> list[resources.Resource]:
        """Build an overlay directory and parse the output into resources."""
        output = self.run(directory)
        try:
            documents = codec.load_documents(output)
        except errors.CodecError as e:
            raise errors.EngineError(directory, f"unparseable output: {e}") from e

        built: list[resources.Resource] = []
        for document in documents:
            try:
                built.append(resources.Resource.from_tree(document, directory))
            except errors.ResourceLoadError as e:
                raise errors.EngineError(directory, f"invalid resource in output: {e}") from e
        _logger.debug("Built %d resources from %s", len(built), directory)
        return built
