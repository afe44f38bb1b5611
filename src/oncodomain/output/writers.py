"""TSV table writer with provenance sidecar."""

from datetime import datetime, timezone
from pathlib import Path

import polars as pl
import yaml


def write_analysis_tables(
    tables: dict[str, pl.DataFrame | pl.LazyFrame],
    output_dir: Path,
    sidecar_name: str = "tables",
) -> dict:
    """
    Write summary tables as TSV files with a YAML provenance sidecar.

    Args:
        tables: File base name -> DataFrame or LazyFrame
        output_dir: Directory to write output files (created if doesn't exist)
        sidecar_name: Base name of the sidecar file

    Returns:
        Dictionary with one path per table name plus "provenance"

    Notes:
        - Collects LazyFrames if needed
        - TSV uses tab separator with header
        - Provenance YAML lists every file with its row and column counts
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    paths = {}
    files = []

    for name, df in tables.items():
        if isinstance(df, pl.LazyFrame):
            df = df.collect()

        tsv_path = output_dir / f"{name}.tsv"
        df.write_csv(tsv_path, separator="\t", include_header=True)
        paths[name] = tsv_path

        files.append({
            "file": tsv_path.name,
            "rows": df.height,
            "column_count": len(df.columns),
            "column_names": df.columns,
        })

    provenance_path = output_dir / f"{sidecar_name}.provenance.yaml"
    provenance = {
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "output_files": files,
    }

    with open(provenance_path, "w") as f:
        yaml.dump(provenance, f, default_flow_style=False, sort_keys=False)

    paths["provenance"] = provenance_path
    return paths
