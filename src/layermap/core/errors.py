"""Exception types raised by layermap."""

from __future__ import annotations


class InputFormatError(ValueError):
    """Textual graph input could not be parsed."""


class MissingInputError(FileNotFoundError):
    """A single-file input does not exist."""


class GraphStructureError(ValueError):
    """A container tree or edge invariant would be broken."""


class EmptyGraphError(RuntimeError):
    """Ingestion produced no nodes, so there is nothing to lay out."""


class DependencyCommandError(RuntimeError):
    """An external dependency listing command failed.

    Args:
        command: The command line that was executed.
        returncode: Its exit status.
        stderr: Captured standard error, decoded.
    """

    def __init__(self, command: str, returncode: int, stderr: str = "") -> None:
        message = f"{command!r} exited with status {returncode}"
        if stderr.strip():
            message += f": {stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
