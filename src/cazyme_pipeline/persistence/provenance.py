"""Provenance tracking for pipeline reproducibility."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from cazyme_pipeline.config.schema import PipelineConfig


class ProvenanceTracker:
    """
    Tracks provenance metadata for pipeline runs.

    Records pipeline version, cluster parameters, config hash, input files
    and processing steps so a track file can be traced back to its run.
    """

    def __init__(self, pipeline_version: str, config: PipelineConfig):
        """
        Initialize provenance tracker.

        Args:
            pipeline_version: Pipeline version string (e.g., "0.1.0")
            config: PipelineConfig instance
        """
        self.pipeline_version = pipeline_version
        self.config_hash = config.config_hash()
        self.parameters = config.model_dump(mode="json")
        self.input_files: dict[str, str] = {}
        self.processing_steps = []
        self.created_at = datetime.now(timezone.utc)

    def record_input(self, role: str, path: Path) -> None:
        """
        Record an input file used by the run.

        Args:
            role: What the file is used for (e.g. "annotation_table")
            path: Path to the file
        """
        self.input_files[role] = str(path)

    def record_step(self, step_name: str, details: Optional[dict] = None) -> None:
        """
        Record a processing step.

        Args:
            step_name: Name of the processing step
            details: Optional dictionary of additional details
        """
        step = {
            "step_name": step_name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        if details:
            step["details"] = details
        self.processing_steps.append(step)

    def get_steps(self) -> list[dict]:
        """Recorded processing steps, oldest first."""
        return self.processing_steps

    def create_metadata(self) -> dict:
        """
        Create full provenance metadata dictionary.

        Returns:
            Dictionary with all provenance information
        """
        return {
            "pipeline_version": self.pipeline_version,
            "parameters": self.parameters,
            "config_hash": self.config_hash,
            "input_files": self.input_files,
            "created_at": self.created_at.isoformat(),
            "processing_steps": self.processing_steps,
        }

    def save_sidecar(self, output_path: Path) -> Path:
        """
        Save provenance metadata as a JSON sidecar file.

        Args:
            output_path: Path to the main output file.
                         Sidecar will be saved as {path}.provenance.json

        Returns:
            Path to the sidecar file
        """
        output_path = Path(output_path)
        sidecar_path = output_path.with_name(output_path.name + ".provenance.json")
        sidecar_path.parent.mkdir(parents=True, exist_ok=True)

        metadata = self.create_metadata()
        with open(sidecar_path, "w") as f:
            json.dump(metadata, f, indent=2, default=str)

        return sidecar_path

    @staticmethod
    def load_sidecar(sidecar_path: Path) -> dict:
        """
        Load provenance metadata from a sidecar file.

        Args:
            sidecar_path: Path to the .provenance.json file

        Returns:
            Provenance metadata dictionary
        """
        with open(sidecar_path) as f:
            return json.load(f)

    @classmethod
    def from_config(
        cls,
        config: PipelineConfig,
        version: Optional[str] = None
    ) -> "ProvenanceTracker":
        """
        Create ProvenanceTracker from a PipelineConfig.

        Args:
            config: PipelineConfig instance
            version: Pipeline version string. If None, uses cazyme_pipeline.__version__

        Returns:
            ProvenanceTracker instance
        """
        if version is None:
            from cazyme_pipeline import __version__
            version = __version__

        return cls(version, config)
