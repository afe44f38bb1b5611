"""Run command: execute the analysis and write tables, figures and summary.

Orchestrates the full run:
- Loads config and applies CLI overrides
- Runs the analysis pipeline
- Writes TSV tables with provenance
- Generates figures
- Writes the JSON + Markdown analysis summary
"""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from oncodomain.config.loader import load_config_with_overrides
from oncodomain.errors import PipelineError
from oncodomain.output import (
    generate_all_plots,
    generate_analysis_summary,
    write_analysis_tables,
)
from oncodomain.persistence import ProvenanceTracker
from oncodomain.pipeline import run_analysis

logger = logging.getLogger(__name__)


@click.command('run')
@click.option(
    '--gene-uniprot',
    type=click.Path(path_type=Path),
    default=None,
    help='Gene symbol -> UniProt cross-reference (overrides config)'
)
@click.option(
    '--uniprot-pfam',
    type=click.Path(path_type=Path),
    default=None,
    help='UniProt -> Pfam mapping file (overrides config)'
)
@click.option(
    '--domain-catalog',
    type=click.Path(path_type=Path),
    default=None,
    help='Pfam clan/domain catalog (overrides config)'
)
@click.option(
    '--domain-regions',
    type=click.Path(path_type=Path),
    default=None,
    help='Pfam domain regions file (overrides config)'
)
@click.option(
    '--variant-summary',
    type=click.Path(path_type=Path),
    default=None,
    help='ClinVar variant_summary file (overrides config)'
)
@click.option(
    '--seed',
    type=int,
    default=None,
    help='Random seed for the balanced regression sample'
)
@click.option(
    '--assembly',
    type=str,
    default=None,
    help='Genome assembly to analyse (default from config: GRCh38)'
)
@click.option(
    '--batch-size',
    type=int,
    default=None,
    help='Rows per domain-region join batch'
)
@click.option(
    '--top-n',
    type=int,
    default=None,
    help='Number of domain symbols in the domain/type breakdown'
)
@click.option(
    '--output-dir',
    type=click.Path(path_type=Path),
    default=None,
    help='Output directory (overrides config)'
)
@click.option(
    '--skip-plots',
    is_flag=True,
    help='Skip figure generation'
)
@click.pass_context
def run(ctx, gene_uniprot, uniprot_pfam, domain_catalog, domain_regions,
        variant_summary, seed, assembly, batch_size, top_n, output_dir, skip_plots):
    """Run the domain localisation analysis.

    Loads the reference and variant tables, builds the oncogenic and
    germline cohorts, classifies variants against Pfam domain regions and
    compares the cohorts (chi-squared test, binomial GLM, ROC/AUC).

    Exits with status 1 if an input is missing or malformed, a cohort is
    empty, or there is too little data for a test.

    Examples:

        # Run with the paths in the config file
        oncodomain run

        # Override inputs and the sampling seed
        oncodomain run --variant-summary data/variant_summary.txt.gz --seed 7
    """
    config_path = ctx.obj['config_path']

    click.echo(click.style("=== Domain Localisation Analysis ===", bold=True))
    click.echo()

    overrides = {
        'inputs.gene_uniprot': gene_uniprot,
        'inputs.uniprot_pfam': uniprot_pfam,
        'inputs.domain_catalog': domain_catalog,
        'inputs.domain_regions': domain_regions,
        'inputs.variant_summary': variant_summary,
        'analysis.seed': seed,
        'analysis.assembly': assembly,
        'analysis.batch_size': batch_size,
        'analysis.top_n_domains': top_n,
        'output_dir': output_dir,
    }

    click.echo("Loading configuration...")
    try:
        config = load_config_with_overrides(config_path, overrides)
    except (FileNotFoundError, ValidationError) as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        sys.exit(1)
    click.echo(click.style(f"  Config loaded: {config_path}", fg='green'))
    click.echo()

    provenance = ProvenanceTracker.from_config(config)

    # Step 1: Analysis
    click.echo(click.style("Step 1: Running analysis pipeline...", bold=True))
    try:
        result = run_analysis(config, provenance)
    except PipelineError as e:
        click.echo(click.style(f"  Analysis failed: {e}", fg='red'), err=True)
        logger.error(f"Analysis failed in stage {e.stage}")
        sys.exit(1)

    for cohort, rows in result.classified.heights().items():
        click.echo(click.style(f"  {cohort}: {rows} variant-region rows", fg='green'))
    click.echo(f"  Chi-squared p-value: {result.chi_squared.p_value:.3g}")
    click.echo(f"  GLM odds ratio:      {result.regression.odds_ratio:.3f}")
    click.echo(f"  ROC AUC:             {result.roc.auc:.3f}")
    click.echo()

    output_dir = Path(config.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    # Step 2: Tables
    click.echo(click.style("Step 2: Writing summary tables...", bold=True))
    try:
        table_paths = write_analysis_tables(result.tables(), output_dir)
    except OSError as e:
        click.echo(click.style(f"  Error writing tables: {e}", fg='red'), err=True)
        logger.exception("Failed to write tables")
        sys.exit(1)
    for name, path in table_paths.items():
        click.echo(click.style(f"  {name}: {path}", fg='green'))
    click.echo()

    # Step 3: Figures (unless --skip-plots)
    if not skip_plots:
        click.echo(click.style("Step 3: Generating figures...", bold=True))
        plot_paths = generate_all_plots(
            result.domain_counts,
            result.membership_counts,
            result.roc,
            output_dir / "plots",
        )
        for name, path in plot_paths.items():
            click.echo(click.style(f"  {name}: {path}", fg='green'))
        provenance.record_step('generate_figures', {'plot_count': len(plot_paths)})
    else:
        click.echo(click.style("Step 3: Skipping figures (--skip-plots)", fg='yellow'))
    click.echo()

    # Step 4: Summary
    click.echo(click.style("Step 4: Writing analysis summary...", bold=True))
    summary = generate_analysis_summary(config, result, provenance)
    json_path = summary.to_json(output_dir / "summary.json")
    md_path = summary.to_markdown(output_dir / "summary.md")
    click.echo(click.style(f"  JSON:     {json_path}", fg='green'))
    click.echo(click.style(f"  Markdown: {md_path}", fg='green'))

    provenance_path = provenance.save_sidecar(output_dir / "run")
    click.echo(click.style(f"  Provenance: {provenance_path}", fg='green'))
    click.echo()

    click.echo(click.style("Analysis complete!", fg='green', bold=True))
