"""Track output: chromosome labels, antiSMASH groups and file writers."""

from cazyme_pipeline.tracks.labels import chromosome_label, contig_label
from cazyme_pipeline.tracks.secondary_metabolites import (
    SecondaryMetaboliteGroup,
    group_secondary_metabolites,
    secondary_metabolite_id,
)
from cazyme_pipeline.tracks.writers import (
    CLASSIFICATION_COLUMNS,
    TrackLine,
    TrackWriter,
    build_classification_table,
    cazyme_cluster_lines,
    cazyme_gene_lines,
    secondary_metabolite_lines,
    write_classification_table,
)

__all__ = [
    "chromosome_label",
    "contig_label",
    "SecondaryMetaboliteGroup",
    "group_secondary_metabolites",
    "secondary_metabolite_id",
    "CLASSIFICATION_COLUMNS",
    "TrackLine",
    "TrackWriter",
    "build_classification_table",
    "cazyme_cluster_lines",
    "cazyme_gene_lines",
    "secondary_metabolite_lines",
    "write_classification_table",
]
