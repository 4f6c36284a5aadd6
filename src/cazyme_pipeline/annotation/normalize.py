"""Map raw annotation rows onto canonical GeneRecord fields."""

from typing import Mapping

import polars as pl
import structlog

from cazyme_pipeline.annotation.models import (
    BASE_HEADER_MAPPING,
    DEFAULT_CAZYME_COLUMN,
    GeneRecord,
)

logger = structlog.get_logger()

COORDINATE_FIELDS = ("start", "stop")


def build_header_mapping(cazyme_column: str = DEFAULT_CAZYME_COLUMN) -> dict[str, str]:
    """Header mapping for a table whose CAZyme calls live in `cazyme_column`."""
    mapping = dict(BASE_HEADER_MAPPING)
    mapping[cazyme_column] = "cazyme"
    return mapping


def parse_coordinate(value: str | None) -> int:
    """Parse a genomic coordinate, treating missing or non-numeric values as 0."""
    if value is None:
        return 0
    value = str(value).strip()
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return int(float(value))
    except (ValueError, OverflowError):
        return 0


def normalize_record(
    row: Mapping[str, str | None],
    header_mapping: Mapping[str, str],
) -> GeneRecord:
    """Build a GeneRecord from one raw row.

    Only recognized headers are copied; everything else is ignored. Missing
    fields keep their defaults (empty string / 0) instead of raising.

    Args:
        row: Raw header name -> cell value
        header_mapping: Raw header name -> canonical field name

    Returns:
        GeneRecord with coordinates parsed as integers
    """
    fields: dict[str, str | int] = {}
    for raw_header, value in row.items():
        canonical = header_mapping.get(raw_header)
        if canonical is None:
            continue
        if canonical in COORDINATE_FIELDS:
            fields[canonical] = parse_coordinate(value)
        else:
            fields[canonical] = "" if value is None else str(value)
    return GeneRecord(**fields)


def normalize_table(
    df: pl.DataFrame,
    header_mapping: Mapping[str, str],
) -> list[GeneRecord]:
    """Normalize every row of a raw annotation table.

    Args:
        df: Raw table as read by read_annotation_table()
        header_mapping: Raw header name -> canonical field name

    Returns:
        One GeneRecord per row, in table order
    """
    recognized = [col for col in df.columns if col in header_mapping]
    missing = sorted(
        set(header_mapping.values()) - {header_mapping[col] for col in recognized}
    )

    logger.info(
        "normalize_table_start",
        row_count=df.height,
        recognized_columns=recognized,
    )
    if missing:
        logger.warning("normalize_table_missing_columns", missing=missing)

    records = [
        normalize_record(row, header_mapping)
        for row in df.select(recognized).iter_rows(named=True)
    ]

    # Rows without a contig or gene id cannot be placed or merged
    placeable = [r for r in records if r.contig and r.gene_id]
    if len(placeable) < len(records):
        logger.warning(
            "normalize_table_dropped_rows",
            dropped=len(records) - len(placeable),
            reason="missing GeneID or Contig",
        )

    logger.info("normalize_table_complete", record_count=len(placeable))

    return placeable
