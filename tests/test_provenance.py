"""Tests for provenance tracking."""

import pytest

from cazyme_pipeline import __version__
from cazyme_pipeline.config import load_config_with_overrides
from cazyme_pipeline.persistence import ProvenanceTracker


@pytest.fixture
def test_config():
    """Config with non-default thresholds."""
    return load_config_with_overrides(None, {
        "clusters.min_caz": 4,
        "clusters.max_non_signature": 1,
    })


def test_provenance_metadata_structure(test_config):
    """Test that provenance metadata has all required keys."""
    tracker = ProvenanceTracker("0.1.0", test_config)

    metadata = tracker.create_metadata()

    assert metadata["pipeline_version"] == "0.1.0"
    assert metadata["parameters"]["clusters"] == {
        "min_caz": 4,
        "max_non_signature": 1,
        "definition": "standard",
    }
    assert metadata["config_hash"] == test_config.config_hash()
    assert metadata["input_files"] == {}
    assert "created_at" in metadata
    assert metadata["processing_steps"] == []


def test_provenance_records_steps(test_config):
    """Test that processing steps are recorded with timestamps."""
    tracker = ProvenanceTracker("0.1.0", test_config)

    tracker.record_step("normalize_records")
    tracker.record_step("merge_isoforms", {"gene_count": 12000})

    steps = tracker.get_steps()

    assert len(steps) == 2
    assert steps[0]["step_name"] == "normalize_records"
    assert "details" not in steps[0]
    assert "timestamp" in steps[0]
    assert steps[1]["details"]["gene_count"] == 12000


def test_provenance_records_inputs(test_config, tmp_path):
    tracker = ProvenanceTracker("0.1.0", test_config)

    tracker.record_input("annotation_table", tmp_path / "annotations.txt")

    assert tracker.create_metadata()["input_files"] == {
        "annotation_table": str(tmp_path / "annotations.txt"),
    }


def test_provenance_sidecar_roundtrip(test_config, tmp_path):
    """Test saving and loading provenance sidecar next to a track file."""
    tracker = ProvenanceTracker("0.1.0", test_config)
    tracker.record_step("write_track", {"cazyme_clusters": 3})

    sidecar_path = tracker.save_sidecar(tmp_path / "track.txt")

    assert sidecar_path == tmp_path / "track.txt.provenance.json"
    loaded = ProvenanceTracker.load_sidecar(sidecar_path)
    assert loaded["pipeline_version"] == "0.1.0"
    assert loaded["config_hash"] == test_config.config_hash()
    assert loaded["processing_steps"][0]["details"] == {"cazyme_clusters": 3}


def test_provenance_from_config_uses_package_version(test_config):
    tracker = ProvenanceTracker.from_config(test_config)

    assert tracker.pipeline_version == __version__
