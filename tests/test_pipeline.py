"""Integration tests for the end-to-end pipeline and the CLI.

Synthetic genome:
- scaffold_7: three CAZymes (g2 has two isoforms, one reversed), three
  non-signature genes, then a lone CAZyme -> one pure cluster "7.1"
- scaffold_12: antiSMASH Cluster_2 (g8, g9), CAZyme/TF/CAZyme/NS run
  -> one rescued cluster "12.1"
"""

import json

import polars as pl
import pytest
from click.testing import CliRunner

from cazyme_pipeline.cli.main import cli
from cazyme_pipeline.config import PipelineConfig, load_config_with_overrides
from cazyme_pipeline.errors import ContigHomogeneityViolation
from cazyme_pipeline.persistence import ProvenanceTracker
from cazyme_pipeline.pipeline import run_pipeline


HEADER = [
    "GeneID", "TranscriptID", "Feature", "Contig", "Start", "Stop", "Strand",
    "Name", "Product", "InterPro", "GO Terms", "antiSMASH", "dbCAN",
]

TF_NAME = "Zn(2)-C6 fungal-type DNA-binding domain"

ROWS = [
    # GeneID, TranscriptID, Contig, Start, Stop, InterPro, GO Terms, antiSMASH, dbCAN
    ("g1", "g1-T1", "scaffold_7", "1000", "2000", "", "", "", "GH5"),
    ("g2", "g2-T1", "scaffold_7", "3000", "3900", "", "", "", "GH7"),
    ("g2", "g2-T2", "scaffold_7", "4100", "3050", "IPR001722 Glycoside hydrolase family 7", "", "", "GH7"),
    ("g3", "g3-T1", "scaffold_7", "5000", "6000", "", "", "", "AA9"),
    ("g4", "g4-T1", "scaffold_7", "7000", "8000", "", "", "", ""),
    ("g5", "g5-T1", "scaffold_7", "9000", "10000", "", "", "", ""),
    ("g6", "g6-T1", "scaffold_7", "11000", "12000", "", "", "", ""),
    ("g7", "g7-T1", "scaffold_7", "13000", "14000", "", "", "", "CE1"),
    ("g8", "g8-T1", "scaffold_12", "100", "900", "", "", "Cluster_2", ""),
    ("g9", "g9-T1", "scaffold_12", "1000", "1900", "", "", "Cluster_2", "GH3"),
    ("g10", "g10-T1", "scaffold_12", "2000", "2900", f"IPR001138 {TF_NAME}", "", "", ""),
    ("g11", "g11-T1", "scaffold_12", "3000", "3900", "", "", "", "GH18"),
    ("g12", "g12-T1", "scaffold_12", "4000", "4900", "", "GO:0005515 protein binding", "", ""),
]


def write_table(path, rows):
    lines = ["\t".join(HEADER)]
    for gene_id, tx, contig, start, stop, interpro, go, antismash, dbcan in rows:
        lines.append("\t".join([
            gene_id, tx, "mRNA", contig, start, stop, "+",
            "", "hypothetical protein", interpro, go, antismash, dbcan,
        ]))
    path.write_text("\n".join(lines) + "\n")
    return path


@pytest.fixture
def annotation_table(tmp_path):
    return write_table(tmp_path / "annotations.txt", ROWS)


@pytest.fixture
def tf_list(tmp_path):
    path = tmp_path / "TFs.txt"
    path.write_text(f"{TF_NAME}\tIPR001138\nHomeobox\n")
    return path


@pytest.fixture
def config(tf_list):
    return load_config_with_overrides(None, {"signatures.tf_signatures_path": tf_list})


def test_run_pipeline_track(annotation_table, config, tmp_path):
    """Test the full track file for the synthetic genome."""
    output = tmp_path / "track.txt"

    summary = run_pipeline(config, annotation_table, output)

    assert summary.record_count == 13
    assert summary.gene_count == 12
    assert summary.contig_count == 2
    assert summary.secondary_metabolite_clusters == 1
    assert summary.cazyme_clusters == 2
    assert summary.cazyme_genes == 6

    lines = [line.split("\t") for line in output.read_text().splitlines()]

    assert lines[0] == [
        "cluster", "12", "2", "100", "1900", "#FF0000", "2", "#FF0000", "g8;g9",
    ]
    # scaffold_12 sorts before scaffold_7
    assert lines[1] == [
        "CAZyme-cluster", "12", "12.1", "1000", "3900", "#00EEFF", "3", "#0000FF",
        "g9-T1;g10-T1;g11-T1",
    ]
    assert lines[2] == [
        "CAZyme-cluster", "7", "7.1", "1000", "6000", "#00EEFF", "3", "#0000FF",
        "g1-T1;g2-T1;g2-T2;g3-T1",
    ]

    gene_lines = [line for line in lines if line[0] == "gene"]
    assert [line[2] for line in gene_lines] == ["GH3", "GH18", "GH5", "GH7", "AA9", "CE1"]
    # g2 isoforms merged into one envelope
    assert gene_lines[3][3:5] == ["3000", "4100"]
    assert all(len(line) == 8 for line in gene_lines)


def test_run_pipeline_without_tf_list(annotation_table, tmp_path):
    """Test that without TF evidence the scaffold_12 run is not rescued."""
    summary = run_pipeline(PipelineConfig(), annotation_table, tmp_path / "track.txt")

    assert summary.cazyme_clusters == 1


def test_run_pipeline_strict_definition(annotation_table, tf_list, tmp_path):
    config = load_config_with_overrides(None, {
        "signatures.tf_signatures_path": tf_list,
        "clusters.definition": "strict",
    })

    summary = run_pipeline(config, annotation_table, tmp_path / "track.txt")

    assert summary.cazyme_clusters == 0


def test_run_pipeline_provenance(annotation_table, config, tmp_path):
    output = tmp_path / "track.txt"

    summary = run_pipeline(config, annotation_table, output)

    sidecar = summary.output_files["provenance"]
    assert sidecar.name == "track.txt.provenance.json"

    metadata = ProvenanceTracker.load_sidecar(sidecar)
    assert metadata["config_hash"] == config.config_hash()
    assert metadata["parameters"]["clusters"]["min_caz"] == 3
    assert metadata["input_files"]["annotation_table"] == str(annotation_table)
    steps = [step["step_name"] for step in metadata["processing_steps"]]
    assert steps == ["normalize_records", "merge_isoforms", "write_track"]


def test_run_pipeline_no_provenance(annotation_table, config, tmp_path):
    output = tmp_path / "track.txt"

    summary = run_pipeline(config, annotation_table, output, write_provenance=False)

    assert "provenance" not in summary.output_files
    assert not (tmp_path / "track.txt.provenance.json").exists()


def test_run_pipeline_summary_lists_steps(annotation_table, config, tmp_path):
    summary = run_pipeline(
        config, annotation_table, tmp_path / "track.txt",
        classification_path=tmp_path / "genes.tsv", write_provenance=False,
    )

    assert summary.processing_steps == [
        "normalize_records", "merge_isoforms", "write_track", "write_classification_table",
    ]


def test_run_pipeline_classification_table(annotation_table, config, tmp_path):
    classification = tmp_path / "genes.tsv"

    run_pipeline(config, annotation_table, tmp_path / "track.txt", classification_path=classification)

    df = pl.read_csv(classification, separator="\t", infer_schema=False)
    assert df.height == 12
    types = dict(zip(df["GeneID"].to_list(), df["Type"].to_list()))
    assert types["g2"] == "CAZyme"
    assert types["g10"] == "TF"
    assert types["g12"] == "NS"


def test_run_pipeline_mixed_contig_antismash_group(tmp_path, config):
    """Test that an antiSMASH id shared across contigs aborts the run."""
    rows = [
        ("g1", "g1-T1", "scaffold_1", "1", "10", "", "", "Cluster_1", ""),
        ("g2", "g2-T1", "scaffold_2", "1", "10", "", "", "Cluster_1", ""),
    ]
    table = write_table(tmp_path / "bad.txt", rows)

    with pytest.raises(ContigHomogeneityViolation):
        run_pipeline(config, table, tmp_path / "track.txt")


def test_run_pipeline_empty_table(tmp_path):
    table = tmp_path / "empty.txt"
    table.write_text("\t".join(HEADER) + "\n")
    output = tmp_path / "track.txt"

    summary = run_pipeline(PipelineConfig(), table, output)

    assert summary.gene_count == 0
    assert output.read_text() == ""


def test_cli_detect(annotation_table, tf_list, tmp_path):
    """Test the detect command end to end."""
    output = tmp_path / "track.txt"
    runner = CliRunner()

    result = runner.invoke(cli, [
        "detect", str(annotation_table), str(output), "--tf-list", str(tf_list),
    ])

    assert result.exit_code == 0, result.output
    assert "CAZyme clusters: 2" in result.output
    assert "Merged genes: 12" in result.output
    assert "Detection complete" in result.output
    assert output.exists()
    assert (tmp_path / "track.txt.provenance.json").exists()


def test_cli_detect_options(annotation_table, tmp_path):
    """Test threshold overrides and the classification table option."""
    output = tmp_path / "track.txt"
    classification = tmp_path / "genes.tsv"
    runner = CliRunner()

    result = runner.invoke(cli, [
        "detect", str(annotation_table), str(output),
        "--min-caz", "2", "--max-ns", "0",
        "--classification-table", str(classification),
        "--no-provenance",
    ])

    assert result.exit_code == 0, result.output
    assert "min_caz=2, max_ns=0" in result.output
    assert classification.exists()
    assert not (tmp_path / "track.txt.provenance.json").exists()


def test_cli_detect_custom_cazyme_column(tmp_path):
    table = tmp_path / "annotations.txt"
    table.write_text(
        "GeneID\tContig\tStart\tStop\tCAZyme\n"
        "g1\tchr1\t1\t10\tGH5\n"
        "g2\tchr1\t20\t30\tGH7\n"
        "g3\tchr1\t40\t50\tAA9\n"
    )
    runner = CliRunner()

    result = runner.invoke(cli, [
        "detect", str(table), str(tmp_path / "track.txt"), "--cazyme-column", "CAZyme",
    ])

    assert result.exit_code == 0, result.output
    assert "CAZyme clusters: 1" in result.output


def test_cli_detect_integrity_error(tmp_path):
    rows = [
        ("g1", "g1-T1", "scaffold_1", "1", "10", "", "", "Cluster_1", ""),
        ("g2", "g2-T1", "scaffold_2", "1", "10", "", "", "Cluster_1", ""),
    ]
    table = write_table(tmp_path / "bad.txt", rows)
    runner = CliRunner()

    result = runner.invoke(cli, ["detect", str(table), str(tmp_path / "track.txt")])

    assert result.exit_code == 1
    assert "Data integrity error" in result.output


def test_cli_detect_invalid_override(annotation_table, tmp_path):
    runner = CliRunner()

    result = runner.invoke(cli, [
        "detect", str(annotation_table), str(tmp_path / "track.txt"), "--min-caz", "0",
    ])

    assert result.exit_code == 1
    assert "Error loading config" in result.output


def test_cli_detect_missing_input(tmp_path):
    runner = CliRunner()

    result = runner.invoke(cli, ["detect", str(tmp_path / "nope.txt"), str(tmp_path / "out.txt")])

    assert result.exit_code == 2


def test_cli_info():
    runner = CliRunner()

    result = runner.invoke(cli, ["--config", "config/default.yaml", "info"])

    assert result.exit_code == 0, result.output
    assert "Min CAZymes: 3" in result.output
    assert "CAZyme Column: dbCAN" in result.output


def test_cli_help():
    runner = CliRunner()

    result = runner.invoke(cli, ["detect", "--help"])

    assert result.exit_code == 0
    assert "--min-caz" in result.output
    assert "--tf-list" in result.output
