"""Detect command: build the CAZyme cluster track from an annotation table."""

import logging
import sys
from pathlib import Path

import click
from pydantic import ValidationError

from cazyme_pipeline.config.loader import load_config_with_overrides
from cazyme_pipeline.errors import ClusterPipelineError
from cazyme_pipeline.pipeline import run_pipeline

logger = logging.getLogger(__name__)


@click.command('detect')
@click.argument('input_path', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument('output_path', type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    '--min-caz',
    type=int,
    default=None,
    help='Minimum CAZyme genes per cluster (overrides config, default: 3)'
)
@click.option(
    '--max-ns',
    'max_non_signature',
    type=int,
    default=None,
    help='Non-signature gene interruption budget (overrides config, default: 2)'
)
@click.option(
    '--cazyme-column',
    type=str,
    default=None,
    help='Raw header of the CAZyme column (overrides config, default: dbCAN)'
)
@click.option(
    '--tf-list',
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help='Transcription factor signature list (one InterPro signature per line)'
)
@click.option(
    '--definition',
    type=click.Choice(['standard', 'strict']),
    default=None,
    help='Cluster acceptance rule (overrides config, default: standard)'
)
@click.option(
    '--classification-table',
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help='Also write per-gene signature classification TSV to this path'
)
@click.option(
    '--no-provenance',
    is_flag=True,
    help='Do not write the {output}.provenance.json sidecar'
)
@click.pass_context
def detect(
    ctx,
    input_path,
    output_path,
    min_caz,
    max_non_signature,
    cazyme_column,
    tf_list,
    definition,
    classification_table,
    no_provenance,
):
    """Detect CAZyme gene clusters and write a genome track.

    INPUT_PATH is a tab-separated annotation table with GeneID, TranscriptID,
    Contig, Start, Stop, InterPro, GO Terms, antiSMASH and CAZyme columns.
    OUTPUT_PATH receives the track lines (antiSMASH clusters, CAZyme clusters,
    CAZyme genes).

    Examples:

        # Default thresholds (min 3 CAZymes, 2 interruptions)
        cazyme-pipeline detect annotations.txt track.txt --tf-list TFs.txt

        # Looser clusters, CAZyme calls in a "CAZyme" column
        cazyme-pipeline detect annotations.txt track.txt --min-caz 2 --max-ns 3 --cazyme-column CAZyme
    """
    config_path = ctx.obj['config_path']

    click.echo(click.style("=== CAZyme Cluster Detection ===", bold=True))
    click.echo()

    try:
        config = load_config_with_overrides(config_path, {
            'clusters.min_caz': min_caz,
            'clusters.max_non_signature': max_non_signature,
            'clusters.definition': definition,
            'input.cazyme_column': cazyme_column,
            'signatures.tf_signatures_path': tf_list,
        })
    except (FileNotFoundError, ValidationError) as e:
        click.echo(click.style(f"Error loading config: {e}", fg='red'), err=True)
        sys.exit(1)

    click.echo(f"Input:  {input_path}")
    click.echo(f"Output: {output_path}")
    click.echo(
        f"Parameters: min_caz={config.clusters.min_caz}, "
        f"max_ns={config.clusters.max_non_signature}, "
        f"definition={config.clusters.definition}"
    )
    click.echo()

    try:
        summary = run_pipeline(
            config,
            input_path,
            output_path,
            classification_path=classification_table,
            write_provenance=not no_provenance,
        )
    except ClusterPipelineError as e:
        click.echo(click.style(f"Data integrity error: {e}", fg='red'), err=True)
        logger.exception("Cluster detection aborted")
        sys.exit(1)

    click.echo(click.style("=== Summary ===", bold=True))
    click.echo(f"Annotation records: {summary.record_count}")
    click.echo(f"Merged genes: {summary.gene_count}")
    click.echo(f"Contigs: {summary.contig_count}")
    click.echo(f"antiSMASH clusters: {summary.secondary_metabolite_clusters}")
    click.echo(f"CAZyme clusters: {summary.cazyme_clusters}")
    click.echo(f"CAZyme genes: {summary.cazyme_genes}")
    click.echo()
    for kind, path in summary.output_files.items():
        click.echo(f"  {kind}: {path}")
    click.echo()
    click.echo(click.style("Detection complete", fg='green'))
