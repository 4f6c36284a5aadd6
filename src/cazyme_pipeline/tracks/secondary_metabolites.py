"""Group genes into antiSMASH secondary-metabolite clusters."""

import re
from dataclasses import dataclass, field

import structlog

from cazyme_pipeline.annotation.models import MergedGene

logger = structlog.get_logger()

CLUSTER_NUMBER = re.compile(r"\d+")


@dataclass
class SecondaryMetaboliteGroup:
    """Genes sharing one antiSMASH cluster id, with their bounding box."""

    sm_id: str
    genes: list[MergedGene] = field(default_factory=list)

    @property
    def start(self) -> int:
        return min(g.start for g in self.genes)

    @property
    def end(self) -> int:
        return max(g.stop for g in self.genes)


def secondary_metabolite_id(tag: str) -> str:
    """Cluster id embedded in an antiSMASH tag ("Cluster_12;..." -> "12")."""
    match = CLUSTER_NUMBER.search(tag)
    return match.group(0) if match else tag


def group_secondary_metabolites(genes: list[MergedGene]) -> list[SecondaryMetaboliteGroup]:
    """Group genes carrying an antiSMASH tag by the tag's cluster id.

    Groups are ordered by numeric id; ids without digits (tag used verbatim)
    follow in order of first appearance.

    Args:
        genes: Merged genes (any order)

    Returns:
        One SecondaryMetaboliteGroup per distinct cluster id
    """
    groups: dict[str, SecondaryMetaboliteGroup] = {}
    for gene in genes:
        if not gene.antismash:
            continue
        sm_id = secondary_metabolite_id(gene.antismash)
        if sm_id == gene.antismash and not sm_id.isdigit():
            logger.warning(
                "antismash_tag_without_number",
                gene_id=gene.gene_id,
                tag=gene.antismash,
            )
        groups.setdefault(sm_id, SecondaryMetaboliteGroup(sm_id=sm_id)).genes.append(gene)

    numeric = sorted((k for k in groups if k.isdigit()), key=int)
    other = [k for k in groups if not k.isdigit()]
    ordered = [groups[k] for k in numeric + other]

    logger.info("group_secondary_metabolites_complete", group_count=len(ordered))

    return ordered
