"""Single-pass CAZyme gene cluster detection.

ClusterScanner walks merged genes in (contig, start) order and keeps one open
candidate cluster. Signature genes (CAZyme, TF, TC) extend the candidate;
non-signature genes consume an interruption budget, and the candidate is
closed once the budget is exceeded, at a contig change, or at end of input.
A closed candidate loses its trailing non-signature genes and is kept only if
the acceptance predicate holds for its signature counts.

The non-signature counter is decremented (not reset) by each signature gene,
so a cluster may contain more than max_non_signature interruptions in total
as long as signature genes are interspersed.
"""

from dataclasses import dataclass, field, replace
from typing import Iterable

import structlog

from cazyme_pipeline.annotation.models import ANNOTATION_SEPARATOR, MergedGene
from cazyme_pipeline.clusters.acceptance import (
    AcceptancePredicate,
    SignatureCounts,
    accept,
    get_predicate,
)
from cazyme_pipeline.clusters.classify import GeneType, SignatureClassifier

logger = structlog.get_logger()


@dataclass(frozen=True)
class SignatureGene:
    """A merged gene as placed inside a candidate cluster."""

    id: str
    gene_id: str
    contig: str
    start: int
    stop: int
    gene_type: GeneType

    @classmethod
    def from_merged(cls, gene: MergedGene, gene_type: GeneType) -> "SignatureGene":
        start, stop = sorted((gene.start, gene.stop))
        return cls(
            id=gene.display_id,
            gene_id=gene.gene_id,
            contig=gene.contig,
            start=start,
            stop=stop,
            gene_type=gene_type,
        )


@dataclass
class Cluster:
    """An accepted run of genes on one contig with its signature tally."""

    genes: list[SignatureGene]
    counts: SignatureCounts = field(default_factory=SignatureCounts)

    @property
    def contig(self) -> str:
        return self.genes[0].contig

    @property
    def start(self) -> int:
        return min(g.start for g in self.genes)

    @property
    def end(self) -> int:
        return max(g.stop for g in self.genes)

    @property
    def gene_ids(self) -> str:
        return ANNOTATION_SEPARATOR.join(g.id for g in self.genes)

    def __len__(self) -> int:
        return len(self.genes)


class ClusterScanner:
    """Explicit state machine over genomically ordered genes.

    State:
        current: genes of the open candidate cluster (empty if none)
        counts: signature tally of the open candidate
        clusters: accepted clusters so far

    Usage:
        scanner = ClusterScanner(classifier, min_caz=3, max_non_signature=2)
        for gene in genes:
            scanner.step(gene)
        clusters = scanner.finish()
    """

    def __init__(
        self,
        classifier: SignatureClassifier,
        min_caz: int = 3,
        max_non_signature: int = 2,
        predicate: AcceptancePredicate = accept,
    ):
        self.classifier = classifier
        self.min_caz = min_caz
        self.max_non_signature = max_non_signature
        self.predicate = predicate

        self.current: list[SignatureGene] = []
        self.counts = SignatureCounts()
        self.clusters: list[Cluster] = []
        self.closed_count = 0
        self._last_contig: str | None = None

    def step(self, gene: MergedGene) -> GeneType:
        """Consume one gene and return the type it was classified as."""
        if self._last_contig is not None and gene.contig != self._last_contig:
            self.close()
        self._last_contig = gene.contig

        gene_type = self.classifier.classify(gene)
        self.counts.add(gene_type)

        if gene_type.is_signature:
            self.current.append(SignatureGene.from_merged(gene, gene_type))
        elif self.current and self.counts.non_signature <= self.max_non_signature:
            self.current.append(SignatureGene.from_merged(gene, gene_type))
        else:
            # Budget exceeded, or no candidate open: non-signature genes
            # never open a candidate and never carry budget into one
            self.close()

        return gene_type

    def close(self) -> Cluster | None:
        """Close the open candidate and keep it if it is accepted.

        Trailing non-signature genes are dropped first. State is reset
        whatever the outcome.

        Returns:
            The accepted Cluster, or None if rejected or empty
        """
        genes = self.current
        while genes and genes[-1].gene_type is GeneType.NON_SIGNATURE:
            genes.pop()

        accepted = None
        if genes:
            self.closed_count += 1
            if self.predicate(self.counts, self.min_caz):
                accepted = Cluster(genes=genes, counts=replace(self.counts))
                self.clusters.append(accepted)
                logger.debug(
                    "cluster_accepted",
                    contig=accepted.contig,
                    start=accepted.start,
                    end=accepted.end,
                    counts=self.counts.as_dict(),
                )

        self.current = []
        self.counts.reset()
        return accepted

    def finish(self) -> list[Cluster]:
        """Close any open candidate and return all accepted clusters."""
        if self.current:
            self.close()
        return self.clusters


def find_clusters(
    genes: Iterable[MergedGene],
    classifier: SignatureClassifier,
    min_caz: int = 3,
    max_non_signature: int = 2,
    definition: str = "standard",
) -> list[Cluster]:
    """Detect CAZyme gene clusters in genomically ordered merged genes.

    Args:
        genes: MergedGenes sorted by contig, then start position
        classifier: Signature classifier (TF list, transporter keyword)
        min_caz: Minimum CAZyme gene count
        max_non_signature: Interruption budget
        definition: Acceptance rule name ("standard" or "strict")

    Returns:
        Accepted clusters in scan order
    """
    scanner = ClusterScanner(
        classifier,
        min_caz=min_caz,
        max_non_signature=max_non_signature,
        predicate=get_predicate(definition),
    )

    gene_count = 0
    for gene in genes:
        scanner.step(gene)
        gene_count += 1
    clusters = scanner.finish()

    logger.info(
        "find_clusters_complete",
        gene_count=gene_count,
        candidates_closed=scanner.closed_count,
        clusters_accepted=len(clusters),
        min_caz=min_caz,
        max_non_signature=max_non_signature,
        definition=definition,
    )

    return clusters
