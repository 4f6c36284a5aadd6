"""Signature gene classification.

A gene can carry evidence for several signature categories (a CAZyme with a
transporter domain, for instance) but is filed under exactly one. The
categories are checked top to bottom in CLASSIFICATION_RULES and the first
match wins:

1. CAZyme  - a CAZyme family call is present
2. TF      - InterPro matches a transcription-factor signature
3. TC      - InterPro or GO terms mention the transporter keyword
4. NS      - non-signature gene
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from cazyme_pipeline.annotation.models import MergedGene

DEFAULT_TRANSPORTER_KEYWORD = "transporter"


class GeneType(str, Enum):
    """Signature category of a gene."""

    CAZYME = "CAZyme"
    TRANSCRIPTION_FACTOR = "TF"
    TRANSPORTER = "TC"
    NON_SIGNATURE = "NS"

    @property
    def is_signature(self) -> bool:
        return self is not GeneType.NON_SIGNATURE


@dataclass(frozen=True)
class GeneEvidence:
    """Independent evidence flags for one gene, before priority resolution."""

    is_cazyme: bool
    is_transcription_factor: bool
    is_transporter: bool


class SignatureClassifier:
    """Assigns each gene a GeneType from its annotation evidence."""

    def __init__(
        self,
        tf_signatures: Iterable[str] = (),
        transporter_keyword: str = DEFAULT_TRANSPORTER_KEYWORD,
    ):
        self.tf_signatures = tuple(s for s in tf_signatures if s)
        self.transporter_keyword = transporter_keyword

    def is_cazyme(self, gene: MergedGene) -> bool:
        return bool(gene.cazyme)

    def is_transcription_factor(self, gene: MergedGene) -> bool:
        return any(tf in gene.interpro for tf in self.tf_signatures)

    def is_transporter(self, gene: MergedGene) -> bool:
        return (
            self.transporter_keyword in gene.interpro
            or self.transporter_keyword in gene.go_terms
        )

    @property
    def rules(self) -> list[tuple[Callable[[MergedGene], bool], GeneType]]:
        """Ordered predicate -> category rules; first match wins."""
        return [
            (self.is_cazyme, GeneType.CAZYME),
            (self.is_transcription_factor, GeneType.TRANSCRIPTION_FACTOR),
            (self.is_transporter, GeneType.TRANSPORTER),
        ]

    def classify(self, gene: MergedGene) -> GeneType:
        for predicate, gene_type in self.rules:
            if predicate(gene):
                return gene_type
        return GeneType.NON_SIGNATURE

    def evidence(self, gene: MergedGene) -> GeneEvidence:
        return GeneEvidence(
            is_cazyme=self.is_cazyme(gene),
            is_transcription_factor=self.is_transcription_factor(gene),
            is_transporter=self.is_transporter(gene),
        )
