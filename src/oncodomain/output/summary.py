"""Analysis summary (JSON + Markdown) for a pipeline run."""

import json
import sys
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path

import polars as pl
import scipy
import sklearn
import statsmodels

from oncodomain.config.schema import PipelineConfig
from oncodomain.persistence.provenance import ProvenanceTracker
from oncodomain.pipeline import AnalysisResult


@dataclass
class FilteringStep:
    """Record of a data filtering/processing step."""

    step_name: str
    input_count: int | None
    output_count: int | None
    criteria: str


@dataclass
class AnalysisSummary:
    """
    Summary of a pipeline run.

    Contains what is needed to reproduce and read the analysis:
    - Pipeline version, parameters and input files
    - Software environment
    - Filtering steps with row counts
    - Contingency table, chi-squared test, GLM and AUC
    """

    run_id: str
    timestamp: str
    pipeline_version: str
    parameters: dict
    input_files: dict
    software_environment: dict
    filtering_steps: list[FilteringStep] = field(default_factory=list)
    contingency: list[dict] = field(default_factory=list)
    statistics: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        """
        Convert summary to dictionary.

        Returns:
            Dictionary representation of the summary
        """
        return {
            "run_id": self.run_id,
            "timestamp": self.timestamp,
            "pipeline_version": self.pipeline_version,
            "parameters": self.parameters,
            "input_files": self.input_files,
            "software_environment": self.software_environment,
            "filtering_steps": [
                {
                    "step_name": step.step_name,
                    "input_count": step.input_count,
                    "output_count": step.output_count,
                    "criteria": step.criteria,
                }
                for step in self.filtering_steps
            ],
            "contingency": self.contingency,
            "statistics": self.statistics,
        }

    def to_json(self, path: Path) -> Path:
        """
        Write summary as JSON file.

        Args:
            path: Output path for JSON file

        Returns:
            Path to the written file
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2, default=str)

        return path

    def to_markdown(self, path: Path) -> Path:
        """
        Write summary as human-readable Markdown file.

        Args:
            path: Output path for Markdown file

        Returns:
            Path to the written file
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        lines = [
            "# Domain Localisation Analysis Summary",
            "",
            f"**Run ID:** `{self.run_id}`",
            f"**Timestamp:** {self.timestamp}",
            f"**Pipeline Version:** {self.pipeline_version}",
            "",
            "## Parameters",
            "",
        ]

        for key, value in self.parameters.items():
            lines.append(f"- **{key}:** {value}")

        lines.extend(["", "## Input Files", ""])
        for key, value in self.input_files.items():
            lines.append(f"- **{key}:** `{value['path']}`")

        lines.extend(["", "## Software Environment", ""])
        for key, value in self.software_environment.items():
            lines.append(f"- **{key}:** {value}")

        lines.append("")

        if self.filtering_steps:
            lines.extend([
                "## Filtering Steps",
                "",
                "| Step | Input Count | Output Count | Criteria |",
                "|------|-------------|--------------|----------|",
            ])

            for step in self.filtering_steps:
                lines.append(
                    f"| {step.step_name} | {step.input_count if step.input_count is not None else ''} | "
                    f"{step.output_count if step.output_count is not None else ''} | {step.criteria} |"
                )

            lines.append("")

        if self.contingency:
            lines.extend([
                "## Contingency Table",
                "",
                "| Cohort | Outside Domain | Inside Domain |",
                "|--------|----------------|---------------|",
            ])
            for row in self.contingency:
                lines.append(
                    f"| {row['cohort']} | {row['outside_domain']} | {row['inside_domain']} |"
                )
            lines.append("")

        if self.statistics:
            lines.extend(["## Statistics", ""])
            for key, value in self.statistics.items():
                if isinstance(value, float):
                    lines.append(f"- **{key}:** {value:.4g}")
                else:
                    lines.append(f"- **{key}:** {value}")
            lines.append("")

        with open(path, "w") as f:
            f.write("\n".join(lines))

        return path


def generate_analysis_summary(
    config: PipelineConfig,
    result: AnalysisResult,
    provenance: ProvenanceTracker,
) -> AnalysisSummary:
    """
    Build the summary of a completed run.

    Args:
        config: Pipeline configuration
        result: Output of run_analysis
        provenance: Provenance tracker with processing steps

    Returns:
        AnalysisSummary instance

    Notes:
        - Filtering steps come from provenance steps that report counts
        - Captures software versions (Python, polars, scipy, statsmodels, scikit-learn)
        - Generates unique run ID
    """
    filtering_steps = [
        FilteringStep(
            step_name=step["step_name"],
            input_count=step["input_count"],
            output_count=step["output_count"],
            criteria=step["criteria"] or "",
        )
        for step in provenance.filtering_steps()
    ]

    regression = result.regression
    statistics = {
        "chi_squared_statistic": result.chi_squared.statistic,
        "chi_squared_p_value": result.chi_squared.p_value,
        "chi_squared_dof": result.chi_squared.dof,
        "glm_intercept": regression.coefficients.get("Intercept"),
        "glm_oncogenic_coefficient": regression.coefficients.get("is_oncogenic"),
        "glm_oncogenic_p_value": regression.p_values.get("is_oncogenic"),
        "glm_odds_ratio": regression.odds_ratio,
        "glm_aic": regression.aic,
        "glm_n_obs": regression.n_obs,
        "roc_auc": result.roc.auc,
    }
    for cohort, count in result.unparseable_positions.items():
        statistics[f"unparseable_positions_{cohort}"] = count

    return AnalysisSummary(
        run_id=str(uuid.uuid4()),
        timestamp=datetime.now(timezone.utc).isoformat(),
        pipeline_version=provenance.pipeline_version,
        parameters=config.analysis.model_dump(),
        input_files=provenance.input_files,
        software_environment={
            "python": sys.version.split()[0],
            "polars": pl.__version__,
            "scipy": scipy.__version__,
            "statsmodels": statsmodels.__version__,
            "scikit-learn": sklearn.__version__,
        },
        filtering_steps=filtering_steps,
        contingency=result.contingency.to_dicts(),
        statistics=statistics,
    )
