"""Data models for per-gene functional annotation records."""

from pydantic import BaseModel, ConfigDict

# Raw table header -> canonical field name. The CAZyme column header varies
# between annotation tools and is added by build_header_mapping().
BASE_HEADER_MAPPING = {
    "GeneID": "gene_id",
    "TranscriptID": "transcript_id",
    "Contig": "contig",
    "Start": "start",
    "Stop": "stop",
    "Strand": "strand",
    "Feature": "feature",
    "InterPro": "interpro",
    "GO Terms": "go_terms",
    "antiSMASH": "antismash",
}

DEFAULT_CAZYME_COLUMN = "dbCAN"

# Separator used when joining distinct annotation values of merged isoforms
ANNOTATION_SEPARATOR = ";"


class GeneRecord(BaseModel):
    """One annotation row (a single transcript/isoform).

    Attributes:
        gene_id: Gene identifier, merge key together with contig
        transcript_id: Transcript identifier (may be empty)
        contig: Contig/scaffold identifier
        start: Start coordinate, may exceed stop in raw input
        stop: Stop coordinate
        strand: Strand as reported by the annotation tool
        feature: Feature type (mRNA, tRNA, ...)
        interpro: InterPro domain descriptions, possibly ';'-joined
        go_terms: GO term descriptions, possibly ';'-joined
        cazyme: CAZyme family call, empty if none
        antismash: antiSMASH cluster tag, empty if none

    Missing values are empty strings / zero: absence is "no evidence".
    """

    model_config = ConfigDict(frozen=True)

    gene_id: str = ""
    transcript_id: str = ""
    contig: str = ""
    start: int = 0
    stop: int = 0
    strand: str = ""
    feature: str = ""
    interpro: str = ""
    go_terms: str = ""
    cazyme: str = ""
    antismash: str = ""


class MergedGene(BaseModel):
    """One biological gene after isoform collapse.

    start/stop are the envelope over all isoforms' ordered coordinates.
    interpro, go_terms, cazyme and transcript_ids are the distinct non-empty
    union of the isoform values joined with ';'. antismash, strand and feature
    come from the first isoform of the group.
    """

    model_config = ConfigDict(frozen=True)

    gene_id: str
    transcript_ids: str = ""
    contig: str
    start: int
    stop: int
    strand: str = ""
    feature: str = ""
    interpro: str = ""
    go_terms: str = ""
    cazyme: str = ""
    antismash: str = ""
    isoform_count: int = 1

    @property
    def display_id(self) -> str:
        """Transcript ids when known, otherwise the gene id."""
        return self.transcript_ids or self.gene_id
