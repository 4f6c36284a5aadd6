"""Main CLI entry point for cazyme-pipeline.

Provides command group with global options and subcommands for pipeline operations.
"""

import logging
from pathlib import Path

import click

from cazyme_pipeline import __version__
from cazyme_pipeline.config.loader import load_config_with_overrides
from cazyme_pipeline.cli.detect_cmd import detect


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


@click.group()
@click.version_option(__version__, prog_name="cazyme-pipeline")
@click.option(
    '--config',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='Path to pipeline configuration YAML file (defaults built in)'
)
@click.option(
    '--verbose',
    is_flag=True,
    help='Enable verbose logging (DEBUG level)'
)
@click.pass_context
def cli(ctx, config, verbose):
    """Cazyme-pipeline: CAZyme gene cluster tracks from genome annotation tables.

    Collapses transcript isoforms, classifies signature genes (CAZyme,
    transcription factor, transporter) and reports CAZyme gene clusters
    alongside antiSMASH secondary-metabolite clusters.
    """
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config
    ctx.obj['verbose'] = verbose

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.debug("Verbose logging enabled")


@cli.command()
@click.pass_context
def info(ctx):
    """Display pipeline information and configuration summary."""
    config_path = ctx.obj['config_path']

    click.echo(f"Cazyme Pipeline v{__version__}")
    click.echo(f"Config: {config_path or '(built-in defaults)'}")
    click.echo()

    try:
        config = load_config_with_overrides(config_path, {})

        config_hash = config.config_hash()
        click.echo(f"Config Hash: {config_hash[:16]}...")
        click.echo()

        click.echo(click.style("Input:", bold=True))
        click.echo(f"  CAZyme Column: {config.input.cazyme_column}")
        click.echo()

        click.echo(click.style("Signatures:", bold=True))
        tf_path = config.signatures.tf_signatures_path
        click.echo(f"  TF List: {tf_path if tf_path else '(none)'}")
        click.echo(f"  Transporter Keyword: {config.signatures.transporter_keyword}")
        click.echo()

        click.echo(click.style("Cluster Definition:", bold=True))
        click.echo(f"  Min CAZymes: {config.clusters.min_caz}")
        click.echo(f"  Max Non-signature: {config.clusters.max_non_signature}")
        click.echo(f"  Definition: {config.clusters.definition}")

    except Exception as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        ctx.exit(1)


# Register commands
cli.add_command(detect)


if __name__ == '__main__':
    cli()
