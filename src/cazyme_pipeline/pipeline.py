"""End-to-end CAZyme cluster track generation.

Composes: read table -> normalize -> merge isoforms -> antiSMASH groups ->
cluster scan -> track sections (+ optional classification table and
provenance sidecar).
"""

from dataclasses import dataclass, field
from pathlib import Path

import structlog

from cazyme_pipeline.annotation import (
    build_header_mapping,
    load_tf_signatures,
    merge_isoforms,
    normalize_table,
    read_annotation_table,
)
from cazyme_pipeline.clusters import SignatureClassifier, find_clusters
from cazyme_pipeline.config.schema import PipelineConfig
from cazyme_pipeline.persistence import ProvenanceTracker
from cazyme_pipeline.tracks import (
    TrackWriter,
    build_classification_table,
    cazyme_cluster_lines,
    cazyme_gene_lines,
    group_secondary_metabolites,
    secondary_metabolite_lines,
    write_classification_table,
)

logger = structlog.get_logger()


@dataclass
class PipelineSummary:
    """Counts reported at the end of a run."""

    record_count: int = 0
    gene_count: int = 0
    contig_count: int = 0
    secondary_metabolite_clusters: int = 0
    cazyme_clusters: int = 0
    cazyme_genes: int = 0
    output_files: dict[str, Path] = field(default_factory=dict)
    processing_steps: list[str] = field(default_factory=list)


def build_classifier(config: PipelineConfig) -> SignatureClassifier:
    """Signature classifier from the configured TF list and transporter keyword."""
    tf_path = config.signatures.tf_signatures_path
    if tf_path is None:
        logger.warning(
            "tf_signatures_not_configured",
            message="No transcription factor list; TF evidence disabled",
        )
        tf_signatures = []
    else:
        tf_signatures = load_tf_signatures(tf_path)

    return SignatureClassifier(
        tf_signatures=tf_signatures,
        transporter_keyword=config.signatures.transporter_keyword,
    )


def run_pipeline(
    config: PipelineConfig,
    input_path: Path | str,
    output_path: Path | str,
    classification_path: Path | str | None = None,
    write_provenance: bool = True,
) -> PipelineSummary:
    """Generate the CAZyme cluster track for one annotation table.

    Args:
        config: Validated pipeline configuration
        input_path: Annotation table (TSV)
        output_path: Track file to write
        classification_path: Optional per-gene classification TSV
        write_provenance: Write {output}.provenance.json next to the track

    Returns:
        PipelineSummary with counts and written file paths

    Raises:
        GroupingInvariantViolation: On an isoform grouping defect
        ContigHomogeneityViolation: If a cluster or antiSMASH group spans contigs
    """
    input_path = Path(input_path)
    output_path = Path(output_path)
    summary = PipelineSummary()

    provenance = ProvenanceTracker.from_config(config)
    provenance.record_input("annotation_table", input_path)
    if config.signatures.tf_signatures_path is not None:
        provenance.record_input("tf_signatures", config.signatures.tf_signatures_path)

    logger.info("pipeline_start", input=str(input_path), output=str(output_path))

    classifier = build_classifier(config)

    # Load and normalize
    raw = read_annotation_table(input_path)
    header_mapping = build_header_mapping(config.input.cazyme_column)
    records = normalize_table(raw, header_mapping)
    summary.record_count = len(records)
    provenance.record_step("normalize_records", {
        "row_count": raw.height,
        "record_count": len(records),
        "cazyme_column": config.input.cazyme_column,
    })

    # Collapse isoforms
    genes = merge_isoforms(records)
    summary.gene_count = len(genes)
    summary.contig_count = len({g.contig for g in genes})
    provenance.record_step("merge_isoforms", {
        "gene_count": summary.gene_count,
        "contig_count": summary.contig_count,
    })

    with TrackWriter(output_path) as writer:
        sm_groups = group_secondary_metabolites(genes)
        writer.write_section("cluster", secondary_metabolite_lines(sm_groups))
        summary.secondary_metabolite_clusters = len(sm_groups)

        clusters = find_clusters(
            genes,
            classifier,
            min_caz=config.clusters.min_caz,
            max_non_signature=config.clusters.max_non_signature,
            definition=config.clusters.definition,
        )
        writer.write_section("CAZyme-cluster", cazyme_cluster_lines(clusters))
        summary.cazyme_clusters = len(clusters)

        gene_lines = cazyme_gene_lines(genes)
        writer.write_section("gene", gene_lines)
        summary.cazyme_genes = len(gene_lines)

    summary.output_files["track"] = output_path
    provenance.record_step("write_track", {
        "secondary_metabolite_clusters": summary.secondary_metabolite_clusters,
        "cazyme_clusters": summary.cazyme_clusters,
        "cazyme_genes": summary.cazyme_genes,
    })

    if classification_path is not None:
        table = build_classification_table(genes, classifier)
        summary.output_files["classification"] = write_classification_table(
            table, classification_path
        )
        provenance.record_step("write_classification_table", {"row_count": table.height})

    summary.processing_steps = [step["step_name"] for step in provenance.get_steps()]

    if write_provenance:
        summary.output_files["provenance"] = provenance.save_sidecar(output_path)

    logger.info(
        "pipeline_complete",
        record_count=summary.record_count,
        gene_count=summary.gene_count,
        contig_count=summary.contig_count,
        secondary_metabolite_clusters=summary.secondary_metabolite_clusters,
        cazyme_clusters=summary.cazyme_clusters,
        cazyme_genes=summary.cazyme_genes,
        processing_steps=summary.processing_steps,
    )

    return summary
