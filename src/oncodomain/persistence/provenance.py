"""Run provenance: what went in, which settings were used, what each step kept."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from oncodomain.config.schema import PipelineConfig

# Step detail keys that describe a row-count filter
COUNT_KEYS = ("input_count", "output_count", "criteria")


def describe_input(path: Path) -> dict:
    """Path, size and modification time of an input file (None fields if absent)."""
    path = Path(path)
    if not path.exists():
        return {"path": str(path), "size_bytes": None, "modified": None}
    stat = path.stat()
    return {
        "path": str(path),
        "size_bytes": stat.st_size,
        "modified": datetime.fromtimestamp(stat.st_mtime, timezone.utc).isoformat(),
    }


class ProvenanceTracker:
    """
    Collects the metadata needed to reproduce one analysis run.

    A tracker is created from the configuration before any input is read,
    so input files are described as they were when the run started. Stages
    append steps in order; ``run_analysis`` records one per stage.

    Attributes:
        pipeline_version: oncodomain version that produced the run
        config_hash: SHA-256 of the validated configuration
        analysis_settings: Cohort and analysis parameters
        input_files: Input name -> describe_input() record
        processing_steps: Recorded steps, oldest first
    """

    def __init__(self, pipeline_version: str, config: PipelineConfig):
        self.pipeline_version = pipeline_version
        self.config_hash = config.config_hash()
        self.analysis_settings = config.analysis.model_dump()
        self.input_files = {
            name: describe_input(path)
            for name, path in config.inputs.model_dump().items()
        }
        self.processing_steps: list[dict] = []
        self.created_at = datetime.now(timezone.utc)

    @classmethod
    def from_config(
        cls,
        config: PipelineConfig,
        version: Optional[str] = None
    ) -> "ProvenanceTracker":
        """Tracker for a config, stamped with ``oncodomain.__version__`` unless given."""
        if version is None:
            from oncodomain import __version__
            version = __version__
        return cls(version, config)

    def record_step(self, step_name: str, details: Optional[dict] = None) -> None:
        """
        Append a processing step.

        Args:
            step_name: Stage identifier, e.g. "select_oncogenic"
            details: Free-form values. Steps that filter rows should set
                input_count, output_count and criteria (see filtering_steps).
        """
        step = {
            "step_name": step_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            step["details"] = details
        self.processing_steps.append(step)

    def get_steps(self) -> list[dict]:
        return self.processing_steps

    def filtering_steps(self) -> list[dict]:
        """Steps that report an output row count, reduced to the count fields."""
        steps = []
        for step in self.processing_steps:
            details = step.get("details", {})
            if "output_count" not in details:
                continue
            steps.append({
                "step_name": step["step_name"],
                **{key: details.get(key) for key in COUNT_KEYS},
            })
        return steps

    def create_metadata(self) -> dict:
        return {
            "pipeline_version": self.pipeline_version,
            "config_hash": self.config_hash,
            "created_at": self.created_at.isoformat(),
            "analysis_settings": self.analysis_settings,
            "input_files": self.input_files,
            "processing_steps": self.processing_steps,
        }

    def save_sidecar(self, output_path: Path) -> Path:
        """
        Write the metadata next to an output as ``<output>.provenance.json``.

        Returns:
            Path of the written sidecar
        """
        sidecar_path = Path(output_path).with_suffix(".provenance.json")
        sidecar_path.parent.mkdir(parents=True, exist_ok=True)
        sidecar_path.write_text(json.dumps(self.create_metadata(), indent=2, default=str))
        return sidecar_path

    @staticmethod
    def load_sidecar(sidecar_path: Path) -> dict:
        """Read metadata written by save_sidecar."""
        return json.loads(Path(sidecar_path).read_text())
