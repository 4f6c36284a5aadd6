"""Signature classification and CAZyme gene cluster detection."""

from cazyme_pipeline.clusters.classify import (
    DEFAULT_TRANSPORTER_KEYWORD,
    GeneEvidence,
    GeneType,
    SignatureClassifier,
)
from cazyme_pipeline.clusters.acceptance import (
    ACCEPTANCE_PREDICATES,
    SignatureCounts,
    accept,
    get_predicate,
    strict_accept,
)
from cazyme_pipeline.clusters.scanner import (
    Cluster,
    ClusterScanner,
    SignatureGene,
    find_clusters,
)

__all__ = [
    "DEFAULT_TRANSPORTER_KEYWORD",
    "GeneEvidence",
    "GeneType",
    "SignatureClassifier",
    "ACCEPTANCE_PREDICATES",
    "SignatureCounts",
    "accept",
    "get_predicate",
    "strict_accept",
    "Cluster",
    "ClusterScanner",
    "SignatureGene",
    "find_clusters",
]
