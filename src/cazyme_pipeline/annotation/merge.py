"""Collapse transcript isoforms into one genomic interval per gene."""

from typing import Iterable

import structlog

from cazyme_pipeline.annotation.models import ANNOTATION_SEPARATOR, GeneRecord, MergedGene
from cazyme_pipeline.errors import GroupingInvariantViolation

logger = structlog.get_logger()


def order_coordinates(record: GeneRecord) -> GeneRecord:
    """Return the record with start <= stop, swapping them if needed."""
    if record.start > record.stop:
        return record.model_copy(update={"start": record.stop, "stop": record.start})
    return record


def genomic_sort_key(item: GeneRecord | MergedGene) -> tuple[str, int, int]:
    return (item.contig, item.start, item.stop)


def distinct_non_empty(values: Iterable[str]) -> list[str]:
    """Distinct non-empty values in order of first appearance."""
    return [v for v in dict.fromkeys(values) if v]


def group_isoforms(records: list[GeneRecord]) -> dict[tuple[str, str], list[GeneRecord]]:
    """Group records by (gene_id, contig), keeping order of first appearance."""
    groups: dict[tuple[str, str], list[GeneRecord]] = {}
    for record in records:
        groups.setdefault((record.gene_id, record.contig), []).append(record)
    return groups


def merge_group(key: tuple[str, str], isoforms: list[GeneRecord]) -> MergedGene:
    """Merge one isoform group into a MergedGene.

    Args:
        key: (gene_id, contig) merge key, used for error reporting
        isoforms: Coordinate-ordered records sharing the key

    Returns:
        MergedGene spanning the envelope of all isoforms

    Raises:
        GroupingInvariantViolation: If the group is empty
    """
    if not isoforms:
        raise GroupingInvariantViolation(key)

    first = isoforms[0]

    if len(isoforms) == 1:
        return MergedGene(
            gene_id=first.gene_id,
            transcript_ids=first.transcript_id,
            contig=first.contig,
            start=first.start,
            stop=first.stop,
            strand=first.strand,
            feature=first.feature,
            interpro=first.interpro,
            go_terms=first.go_terms,
            cazyme=first.cazyme,
            antismash=first.antismash,
        )

    def union(field: str) -> str:
        return ANNOTATION_SEPARATOR.join(
            distinct_non_empty(getattr(iso, field) for iso in isoforms)
        )

    return MergedGene(
        gene_id=first.gene_id,
        transcript_ids=union("transcript_id"),
        contig=first.contig,
        start=min(iso.start for iso in isoforms),
        stop=max(iso.stop for iso in isoforms),
        strand=first.strand,
        feature=first.feature,
        interpro=union("interpro"),
        go_terms=union("go_terms"),
        cazyme=union("cazyme"),
        antismash=first.antismash,
        isoform_count=len(isoforms),
    )


def merge_isoforms(records: Iterable[GeneRecord]) -> list[MergedGene]:
    """Collapse isoform records into one MergedGene per (gene_id, contig).

    Steps:
    1. Order each record's coordinates (start <= stop)
    2. Stable sort by (contig, start, stop)
    3. Group by (gene_id, contig) in order of first appearance
    4. Merge each group: coordinate envelope, union of annotation values

    Args:
        records: GeneRecords as produced by the normalizer

    Returns:
        MergedGene list sorted by (contig, start, stop)

    Raises:
        GroupingInvariantViolation: If grouping produced an empty group
    """
    ordered = sorted((order_coordinates(r) for r in records), key=genomic_sort_key)

    logger.info("merge_isoforms_start", record_count=len(ordered))

    groups = group_isoforms(ordered)
    merged = [merge_group(key, isoforms) for key, isoforms in groups.items()]

    # A widened stop can reorder genes sharing a start; the scanner relies on
    # (contig, start, stop) order.
    merged.sort(key=genomic_sort_key)

    multi_isoform = sum(1 for gene in merged if gene.isoform_count > 1)
    logger.info(
        "merge_isoforms_complete",
        record_count=len(ordered),
        gene_count=len(merged),
        multi_isoform_genes=multi_isoform,
    )

    return merged
