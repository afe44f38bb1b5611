"""Error types raised by pipeline stages.

Every fatal error carries the name of the stage that raised it so the CLI
can report where the run stopped. ``UnparseablePositionWarning`` is the only
non-fatal condition and is emitted once per table as a summary count.
"""

from pathlib import Path


class PipelineError(Exception):
    """Base class for fatal pipeline errors.

    Attributes:
        stage: Pipeline stage that raised the error (e.g. "reference_loader")
    """

    def __init__(self, message: str, stage: str):
        self.stage = stage
        super().__init__(f"[{stage}] {message}")


class MissingFileError(PipelineError):
    """Input path does not exist or cannot be read."""

    def __init__(self, path: Path | str, stage: str):
        self.path = Path(path)
        super().__init__(f"Input file not found or unreadable: {self.path}", stage)


class SchemaError(PipelineError):
    """Parsed table does not have the expected columns."""

    def __init__(self, message: str, stage: str, path: Path | str | None = None):
        self.path = Path(path) if path is not None else None
        if self.path is not None:
            message = f"{message} (file: {self.path})"
        super().__init__(message, stage)


class EmptyCohortError(PipelineError):
    """A cohort filter produced zero rows."""

    def __init__(self, cohort: str, stage: str):
        self.cohort = cohort
        super().__init__(f"Cohort '{cohort}' is empty after filtering", stage)


class InsufficientDataError(PipelineError):
    """A stage requested more data than is available."""


class UnparseablePositionWarning(UserWarning):
    """Variant names without an amino-acid position (reported as a count)."""
