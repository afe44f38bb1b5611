"""Integration tests for the CLI using CliRunner.

Tests:
- --help for the group and the run command
- info with a valid config
- Full run writes tables, figures, summary and provenance
- --skip-plots
- Option overrides (--seed, --output-dir, --top-n)
- Missing input file error handling
"""

import json

import pytest
from click.testing import CliRunner

from oncodomain.cli.main import cli


@pytest.fixture
def runner():
    return CliRunner()


def test_cli_help(runner):
    result = runner.invoke(cli, ['--help'])

    assert result.exit_code == 0
    assert 'run' in result.output
    assert 'info' in result.output


def test_run_help(runner, config_file):
    """Test run --help shows all options."""
    result = runner.invoke(cli, ['--config', str(config_file), 'run', '--help'])

    assert result.exit_code == 0
    for option in [
        '--gene-uniprot',
        '--uniprot-pfam',
        '--domain-catalog',
        '--domain-regions',
        '--variant-summary',
        '--seed',
        '--assembly',
        '--batch-size',
        '--top-n',
        '--output-dir',
        '--skip-plots',
    ]:
        assert option in result.output


def test_info(runner, config_file):
    result = runner.invoke(cli, ['--config', str(config_file), 'info'])

    assert result.exit_code == 0
    assert 'Config Hash:' in result.output
    assert 'variant_summary' in result.output
    assert 'GRCh38' in result.output


def test_run_generates_files(runner, config_file, tmp_path):
    result = runner.invoke(cli, ['--config', str(config_file), 'run'])

    assert result.exit_code == 0, result.output
    assert 'Analysis complete!' in result.output

    output_dir = tmp_path / "results"
    for name in [
        "domain_type_counts.tsv",
        "membership_type_counts.tsv",
        "contingency_table.tsv",
        "regression_coefficients.tsv",
        "tables.provenance.yaml",
        "summary.json",
        "summary.md",
        "run.provenance.json",
    ]:
        assert (output_dir / name).exists(), name

    plots_dir = output_dir / "plots"
    assert (plots_dir / "domain_type_counts.png").exists()
    assert (plots_dir / "membership_by_type.png").exists()
    assert (plots_dir / "roc_curve.png").exists()


def test_run_skip_plots(runner, config_file, tmp_path):
    custom_output = tmp_path / "no_plots"

    result = runner.invoke(cli, [
        '--config', str(config_file),
        'run',
        '--output-dir', str(custom_output),
        '--skip-plots',
    ])

    assert result.exit_code == 0, result.output
    assert 'Skipping figures' in result.output
    assert not (custom_output / "plots").exists()
    assert (custom_output / "summary.json").exists()


def test_run_seed_override(runner, config_file, tmp_path):
    custom_output = tmp_path / "seeded"

    result = runner.invoke(cli, [
        '--config', str(config_file),
        'run',
        '--output-dir', str(custom_output),
        '--seed', '123',
        '--skip-plots',
    ])

    assert result.exit_code == 0, result.output
    with open(custom_output / "summary.json") as f:
        summary = json.load(f)
    assert summary["parameters"]["seed"] == 123


def test_run_missing_input(runner, config_file, tmp_path):
    """A missing input file stops the run with a non-zero exit code."""
    result = runner.invoke(cli, [
        '--config', str(config_file),
        'run',
        '--variant-summary', str(tmp_path / "missing.txt.gz"),
    ])

    assert result.exit_code != 0
    assert 'missing.txt.gz' in result.output
    assert 'variant_loader' in result.output


def test_run_too_many_domains(runner, config_file):
    result = runner.invoke(cli, ['--config', str(config_file), 'run', '--top-n', '20'])

    assert result.exit_code != 0
    assert 'aggregator' in result.output


def test_info_reports_missing_input(runner, config_file, input_dir):
    (input_dir / "variant_summary.txt.gz").unlink()

    result = runner.invoke(cli, ['--config', str(config_file), 'info'])

    assert result.exit_code == 0
    assert 'missing' in result.output
    assert "1 input file(s) missing" in result.output
