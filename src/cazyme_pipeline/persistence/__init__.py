"""Provenance tracking for pipeline outputs."""

from cazyme_pipeline.persistence.provenance import ProvenanceTracker

__all__ = ["ProvenanceTracker"]
