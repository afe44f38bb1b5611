"""Pydantic models for pipeline configuration."""

import hashlib
import json
from pathlib import Path

from pydantic import BaseModel, Field, field_validator


class InputFiles(BaseModel):
    """Paths to the reference and variant input tables."""

    gene_uniprot: Path = Field(
        ...,
        description="Gene symbol to UniProt accession cross-reference (TSV with header)",
    )
    uniprot_pfam: Path = Field(
        ...,
        description="PDB/UniProt/Pfam mapping (TSV, no usable header)",
    )
    domain_catalog: Path = Field(
        ...,
        description="Pfam clan catalog, e.g. Pfam-A.clans.tsv (TSV, no header)",
    )
    domain_regions: Path = Field(
        ...,
        description="Pfam domain regions, e.g. Pfam-A.regions.uniprot.tsv.gz",
    )
    variant_summary: Path = Field(
        ...,
        description="ClinVar variant_summary.txt.gz",
    )


class AnalysisSettings(BaseModel):
    """Cohort definition and analysis parameters."""

    assembly: str = Field(
        default="GRCh38",
        min_length=1,
        description="Genome assembly retained from the variant table",
    )
    not_applicable_label: str = Field(
        default="not applicable",
        description="Oncogenicity value marking variants without an oncogenicity call",
    )
    batch_size: int = Field(
        default=3000,
        ge=1,
        description="Rows per batch for the domain-region fan-out join",
    )
    top_n_domains: int = Field(
        default=8,
        ge=1,
        description="Number of domain symbols kept in the domain/type breakdown",
    )
    seed: int = Field(
        default=42,
        ge=0,
        description="Random seed for downsampling the germline cohort",
    )


class PipelineConfig(BaseModel):
    """Main pipeline configuration."""

    inputs: InputFiles = Field(
        ...,
        description="Input table locations",
    )
    output_dir: Path = Field(
        default=Path("results"),
        description="Directory for tables, figures and the analysis summary",
    )
    analysis: AnalysisSettings = Field(
        default_factory=AnalysisSettings,
        description="Analysis parameters",
    )

    @field_validator("analysis", mode="before")
    @classmethod
    def default_analysis(cls, v):
        """Treat an empty ``analysis:`` block as all defaults."""
        return {} if v is None else v

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        useful for tying output files back to the settings that produced them.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
