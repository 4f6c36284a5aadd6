"""Acceptance rules for closed candidate clusters."""

from dataclasses import dataclass
from typing import Callable

from cazyme_pipeline.clusters.classify import GeneType


@dataclass
class SignatureCounts:
    """Per-category gene tally of the open candidate cluster."""

    cazyme: int = 0
    transcription_factor: int = 0
    transporter: int = 0
    non_signature: int = 0

    def add(self, gene_type: GeneType) -> None:
        """Count one gene.

        Signature genes give back one unit of interruption budget, floored at 0.
        """
        if gene_type is GeneType.CAZYME:
            self.cazyme += 1
        elif gene_type is GeneType.TRANSCRIPTION_FACTOR:
            self.transcription_factor += 1
        elif gene_type is GeneType.TRANSPORTER:
            self.transporter += 1
        else:
            self.non_signature += 1
            return
        self.non_signature = max(0, self.non_signature - 1)

    def reset(self) -> None:
        self.cazyme = 0
        self.transcription_factor = 0
        self.transporter = 0
        self.non_signature = 0

    def as_dict(self) -> dict[str, int]:
        return {
            GeneType.CAZYME.value: self.cazyme,
            GeneType.TRANSCRIPTION_FACTOR.value: self.transcription_factor,
            GeneType.TRANSPORTER.value: self.transporter,
            GeneType.NON_SIGNATURE.value: self.non_signature,
        }


AcceptancePredicate = Callable[[SignatureCounts, int], bool]


def accept(counts: SignatureCounts, min_caz: int) -> bool:
    """Standard CAZyme cluster definition.

    Accepted when either:
    - at least min_caz CAZymes and no TF/TC genes (pure CAZyme cluster), or
    - at least min_caz - 1 CAZymes rescued by at least one TF or TC gene.
    """
    pure = (
        counts.cazyme >= min_caz
        and counts.transcription_factor == 0
        and counts.transporter == 0
    )
    rescued = (
        counts.cazyme >= min_caz - 1
        and counts.transcription_factor + counts.transporter >= 1
    )
    return pure or rescued


def strict_accept(counts: SignatureCounts, min_caz: int) -> bool:
    """Strict definition: min_caz CAZymes plus at least one TF and one TC gene."""
    return (
        counts.cazyme >= min_caz
        and counts.transcription_factor >= 1
        and counts.transporter >= 1
    )


ACCEPTANCE_PREDICATES: dict[str, AcceptancePredicate] = {
    "standard": accept,
    "strict": strict_accept,
}


def get_predicate(definition: str) -> AcceptancePredicate:
    """Look up an acceptance predicate by name.

    Raises:
        ValueError: If the definition name is unknown
    """
    try:
        return ACCEPTANCE_PREDICATES[definition]
    except KeyError:
        raise ValueError(
            f"Unknown cluster definition: {definition}. "
            f"Must be one of {sorted(ACCEPTANCE_PREDICATES)}"
        ) from None
