"""Chromosome labels for track lines."""

import re
from typing import Iterable, Protocol

from cazyme_pipeline.errors import ContigHomogeneityViolation

TRAILING_DIGITS = re.compile(r"\d+$")


class Located(Protocol):
    contig: str


def contig_label(contig: str) -> str:
    """Trailing digit run of a contig id ("scaffold_7" -> "7"), else the id itself."""
    match = TRAILING_DIGITS.search(contig)
    return match.group(0) if match else contig


def chromosome_label(genes: Iterable[Located]) -> str:
    """Chromosome label shared by a group of genes.

    Args:
        genes: Non-empty group of genes expected to lie on one contig

    Returns:
        Label derived from the common contig

    Raises:
        ContigHomogeneityViolation: If the genes come from more than one contig
        ValueError: If the group is empty
    """
    contigs = [g.contig for g in genes]
    if not contigs:
        raise ValueError("Cannot derive a chromosome label from an empty gene group")
    if any(c != contigs[0] for c in contigs):
        raise ContigHomogeneityViolation(contigs)
    return contig_label(contigs[0])
