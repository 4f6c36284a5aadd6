"""Fatal invariant violations raised by the clustering pipeline."""


class ClusterPipelineError(Exception):
    """Base class for non-recoverable pipeline errors."""


class GroupingInvariantViolation(ClusterPipelineError):
    """An isoform merge key resolved to an empty group.

    This can only happen through a grouping defect, never through bad input.
    """

    def __init__(self, key: tuple[str, str]):
        self.key = key
        gene_id, contig = key
        super().__init__(
            f"Isoform group for gene '{gene_id}' on contig '{contig}' is empty"
        )


class ContigHomogeneityViolation(ClusterPipelineError):
    """Genes asked to report a single chromosome label span several contigs."""

    def __init__(self, contigs: list[str]):
        self.contigs = sorted(set(contigs))
        super().__init__(
            f"Expected genes from a single contig, found: {', '.join(self.contigs)}"
        )
