"""Annotation table loading, record normalization and isoform merging."""

from cazyme_pipeline.annotation.models import (
    ANNOTATION_SEPARATOR,
    BASE_HEADER_MAPPING,
    DEFAULT_CAZYME_COLUMN,
    GeneRecord,
    MergedGene,
)
from cazyme_pipeline.annotation.reader import (
    deduplicate_headers,
    load_tf_signatures,
    read_annotation_table,
)
from cazyme_pipeline.annotation.normalize import (
    build_header_mapping,
    normalize_record,
    normalize_table,
    parse_coordinate,
)
from cazyme_pipeline.annotation.merge import merge_group, merge_isoforms

__all__ = [
    "ANNOTATION_SEPARATOR",
    "BASE_HEADER_MAPPING",
    "DEFAULT_CAZYME_COLUMN",
    "GeneRecord",
    "MergedGene",
    "deduplicate_headers",
    "load_tf_signatures",
    "read_annotation_table",
    "build_header_mapping",
    "normalize_record",
    "normalize_table",
    "parse_coordinate",
    "merge_group",
    "merge_isoforms",
]
