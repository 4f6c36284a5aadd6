"""Track file and classification table writers.

Track lines are tab-separated:

    kind  chromosome  name  start  end  color  label  color2  [gene_ids]

Three sections are written in order: antiSMASH clusters ("cluster"),
CAZyme gene clusters ("CAZyme-cluster") and CAZyme genes ("gene").
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

import polars as pl
import structlog

from cazyme_pipeline.annotation.models import ANNOTATION_SEPARATOR, MergedGene
from cazyme_pipeline.clusters.classify import SignatureClassifier
from cazyme_pipeline.clusters.scanner import Cluster
from cazyme_pipeline.tracks.labels import chromosome_label
from cazyme_pipeline.tracks.secondary_metabolites import SecondaryMetaboliteGroup

logger = structlog.get_logger()

SM_CLUSTER_COLOR = "#FF0000"
CAZYME_CLUSTER_COLOR = "#00EEFF"
CAZYME_CLUSTER_EDGE_COLOR = "#0000FF"
CAZYME_GENE_COLOR = "#7F7F7F"
CAZYME_GENE_EDGE_COLOR = "#000000"

CLASSIFICATION_COLUMNS = [
    "GeneID", "TranscriptID", "Contig", "Start", "Stop", "CAZyme", "TF", "TC", "Type",
]


@dataclass(frozen=True)
class TrackLine:
    """One line of the track file."""

    kind: str
    chromosome: str
    name: str
    start: int
    end: int
    color: str
    label: str
    color2: str
    gene_ids: str | None = None

    def to_fields(self) -> list[str]:
        fields = [
            self.kind,
            self.chromosome,
            self.name,
            str(self.start),
            str(self.end),
            self.color,
            self.label,
            self.color2,
        ]
        if self.gene_ids is not None:
            fields.append(self.gene_ids)
        return fields

    def format(self) -> str:
        return "\t".join(self.to_fields())


def secondary_metabolite_lines(groups: Iterable[SecondaryMetaboliteGroup]) -> list[TrackLine]:
    return [
        TrackLine(
            kind="cluster",
            chromosome=chromosome_label(group.genes),
            name=group.sm_id,
            start=group.start,
            end=group.end,
            color=SM_CLUSTER_COLOR,
            label=str(len(group.genes)),
            color2=SM_CLUSTER_COLOR,
            gene_ids=ANNOTATION_SEPARATOR.join(g.gene_id for g in group.genes),
        )
        for group in groups
    ]


def cazyme_cluster_lines(clusters: Iterable[Cluster]) -> list[TrackLine]:
    """Cluster lines named "<chromosome>.<n>", n counting from 1 per chromosome."""
    serials: dict[str, int] = {}
    lines = []
    for cluster in clusters:
        chromosome = chromosome_label(cluster.genes)
        serials[chromosome] = serials.get(chromosome, 0) + 1
        lines.append(TrackLine(
            kind="CAZyme-cluster",
            chromosome=chromosome,
            name=f"{chromosome}.{serials[chromosome]}",
            start=cluster.start,
            end=cluster.end,
            color=CAZYME_CLUSTER_COLOR,
            label=str(len(cluster)),
            color2=CAZYME_CLUSTER_EDGE_COLOR,
            gene_ids=cluster.gene_ids,
        ))
    return lines


def cazyme_gene_lines(genes: Iterable[MergedGene]) -> list[TrackLine]:
    """One line per gene with a CAZyme call, cluster membership notwithstanding."""
    return [
        TrackLine(
            kind="gene",
            chromosome=chromosome_label([gene]),
            name=gene.cazyme,
            start=gene.start,
            end=gene.stop,
            color=CAZYME_GENE_COLOR,
            label="",
            color2=CAZYME_GENE_EDGE_COLOR,
        )
        for gene in genes
        if gene.cazyme
    ]


class TrackWriter:
    """Writes track sections to one file, flushing after each section.

    Usage:
        with TrackWriter(path) as writer:
            writer.write_section("cluster", lines)
    """

    def __init__(self, output_path: Path | str):
        self.output_path = Path(output_path)
        self.line_counts: dict[str, int] = {}
        self._handle = None

    def __enter__(self) -> "TrackWriter":
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self._handle = open(self.output_path, "w", encoding="utf-8", newline="\n")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def close(self) -> None:
        if self._handle is not None:
            self._handle.close()
            self._handle = None

    def write_section(self, section: str, lines: list[TrackLine]) -> None:
        """Write one section; empty sections write nothing."""
        if self._handle is None:
            raise RuntimeError("TrackWriter is not open")
        for line in lines:
            self._handle.write(line.format())
            self._handle.write("\n")
        self._handle.flush()
        self.line_counts[section] = len(lines)
        logger.info("track_section_written", section=section, line_count=len(lines))


def build_classification_table(
    genes: Iterable[MergedGene],
    classifier: SignatureClassifier,
) -> pl.DataFrame:
    """Per-gene evidence table.

    TF and TC columns report the independent evidence checks, so a CAZyme with
    a transporter domain shows both; Type holds the priority-resolved category.
    """
    rows = []
    for gene in genes:
        evidence = classifier.evidence(gene)
        rows.append({
            "GeneID": gene.gene_id,
            "TranscriptID": gene.transcript_ids,
            "Contig": gene.contig,
            "Start": gene.start,
            "Stop": gene.stop,
            "CAZyme": gene.cazyme if evidence.is_cazyme else "",
            "TF": "TF" if evidence.is_transcription_factor else "",
            "TC": "TC" if evidence.is_transporter else "",
            "Type": classifier.classify(gene).value,
        })

    schema = {
        "GeneID": pl.Utf8,
        "TranscriptID": pl.Utf8,
        "Contig": pl.Utf8,
        "Start": pl.Int64,
        "Stop": pl.Int64,
        "CAZyme": pl.Utf8,
        "TF": pl.Utf8,
        "TC": pl.Utf8,
        "Type": pl.Utf8,
    }
    return pl.DataFrame(rows, schema=schema)


def write_classification_table(df: pl.DataFrame, output_path: Path | str) -> Path:
    """Write the per-gene classification table as TSV."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    df.write_csv(output_path, separator="\t", include_header=True)

    type_counts = df.group_by("Type").len().sort("Type")
    logger.info(
        "classification_table_written",
        path=str(output_path),
        row_count=df.height,
        type_distribution=type_counts.to_dicts(),
    )

    return output_path
