"""Pydantic models for pipeline configuration."""

import hashlib
import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator


class InputConfig(BaseModel):
    """Layout of the input annotation table."""

    cazyme_column: str = Field(
        default="dbCAN",
        min_length=1,
        description="Raw header of the column holding CAZyme family calls",
    )


class SignatureConfig(BaseModel):
    """Sources of transcription-factor and transporter evidence."""

    tf_signatures_path: Path | None = Field(
        default=None,
        description="Line-oriented list of transcription-factor InterPro signatures",
    )
    transporter_keyword: str = Field(
        default="transporter",
        min_length=1,
        description="Substring marking transporter genes in InterPro or GO terms",
    )

    @field_validator("tf_signatures_path")
    @classmethod
    def check_signatures_exist(cls, v: Path | None) -> Path | None:
        """Fail early if a configured TF list is missing."""
        if v is not None and not v.is_file():
            raise ValueError(f"Transcription factor list not found: {v}")
        return v


class ClusterDefinition(BaseModel):
    """Thresholds for CAZyme gene cluster detection."""

    min_caz: int = Field(
        default=3,
        ge=1,
        description="Minimum number of CAZyme genes in a cluster",
    )
    max_non_signature: int = Field(
        default=2,
        ge=0,
        description="Interruption budget of non-signature genes",
    )
    definition: Literal["standard", "strict"] = Field(
        default="standard",
        description="Acceptance rule: standard (pure or rescued) or strict (CAZyme + TF + TC)",
    )


class PipelineConfig(BaseModel):
    """Main pipeline configuration."""

    input: InputConfig = Field(
        default_factory=InputConfig,
        description="Input table settings",
    )
    signatures: SignatureConfig = Field(
        default_factory=SignatureConfig,
        description="Signature gene evidence settings",
    )
    clusters: ClusterDefinition = Field(
        default_factory=ClusterDefinition,
        description="Cluster detection thresholds",
    )

    def config_hash(self) -> str:
        """
        Compute SHA-256 hash of the configuration.

        Returns a deterministic hash based on all config values,
        recorded in provenance sidecars to tell runs apart.
        """
        config_dict = self.model_dump(mode="python")
        config_json = json.dumps(
            config_dict,
            sort_keys=True,
            default=str,
        )
        return hashlib.sha256(config_json.encode()).hexdigest()
