"""Main CLI entry point for oncodomain.

Provides command group with global options and subcommands for pipeline operations.
"""

import logging
from pathlib import Path

import click
import structlog

from oncodomain import __version__
from oncodomain.config.loader import load_config, missing_inputs
from oncodomain.cli.run_cmd import run


def configure_logging(verbose: bool = False) -> None:
    """Set the level for stdlib logging (CLI, output) and structlog (data stages)."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    logging.getLogger().setLevel(level)
    structlog.configure(wrapper_class=structlog.make_filtering_bound_logger(level))


@click.group()
@click.option(
    '--config',
    type=click.Path(exists=True, path_type=Path),
    default='config/default.yaml',
    help='Path to pipeline configuration YAML file'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.version_option(__version__, prog_name='oncodomain')
@click.pass_context
def cli(ctx, config, verbose):
    """oncodomain: where do oncogenic variants fall relative to Pfam domains?

    Joins ClinVar variants to Pfam domain coordinates through UniProt and
    compares somatic oncogenic variants with germline controls in the same genes.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    configure_logging(verbose)
    if verbose:
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display pipeline information and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"oncodomain v{__version__}")
    click.echo(f"Config: {config_path}")
    click.echo()

    try:
        config = load_config(config_path)
    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)

    click.echo(f"Config Hash: {config.config_hash()[:16]}...")
    click.echo()

    missing = missing_inputs(config)
    click.echo(click.style("Input Files:", bold=True))
    for name, path in config.inputs.model_dump().items():
        status = click.style("missing", fg='red') if name in missing else click.style("found", fg='green')
        click.echo(f"  {name:<16} {path} [{status}]")
    click.echo()

    click.echo(click.style("Analysis Settings:", bold=True))
    for name, value in config.analysis.model_dump().items():
        click.echo(f"  {name:<21} {value}")
    click.echo()

    click.echo(f"Output Directory: {config.output_dir}")

    if missing:
        click.echo()
        click.echo(click.style(
            f"{len(missing)} input file(s) missing; 'oncodomain run' will fail",
            fg='yellow',
        ))


cli.add_command(run)


if __name__ == '__main__':
    cli()
