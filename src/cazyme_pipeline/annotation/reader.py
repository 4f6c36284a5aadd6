"""Read tab-separated annotation tables and signature lists."""

from pathlib import Path

import polars as pl
import structlog

logger = structlog.get_logger()


def deduplicate_headers(headers: list[str]) -> list[str]:
    """Rename repeated header names to NAME_2, NAME_3, ...

    The first occurrence keeps its name so recognized columns are never lost.

    Args:
        headers: Raw header names in column order

    Returns:
        Header names with duplicates disambiguated
    """
    seen: dict[str, int] = {}
    result = []
    for name in headers:
        if name in seen:
            seen[name] += 1
            result.append(f"{name}_{seen[name]}")
        else:
            seen[name] = 1
            result.append(name)
    return result


def read_annotation_table(path: Path | str, separator: str = "\t") -> pl.DataFrame:
    """Read an annotation table with every column as a trimmed string.

    Quoted fields are unquoted, rows shorter or longer than the header are
    tolerated (missing cells become empty strings), and blank rows dropped.

    Args:
        path: Path to the annotation table (funannotate-style TSV)
        separator: Field separator (default: tab)

    Returns:
        DataFrame whose columns are the (deduplicated) header names.
        Empty DataFrame if the file has no content.
    """
    path = Path(path)
    logger.info("read_annotation_table_start", path=str(path))

    if path.stat().st_size == 0:
        logger.warning("read_annotation_table_empty", path=str(path))
        return pl.DataFrame()

    raw = pl.read_csv(
        path,
        separator=separator,
        has_header=False,
        infer_schema=False,
        quote_char='"',
        truncate_ragged_lines=True,
        encoding="utf8-lossy",
    )

    if raw.height == 0:
        logger.warning("read_annotation_table_empty", path=str(path))
        return pl.DataFrame()

    headers = [
        (value or "").strip() for value in raw.row(0)
    ]
    headers = deduplicate_headers(headers)

    df = raw.slice(1)
    df.columns = headers

    df = df.with_columns(pl.all().fill_null("").str.strip_chars())

    # Drop rows with no content at all
    df = df.filter(~pl.all_horizontal(pl.all() == ""))

    logger.info(
        "read_annotation_table_complete",
        row_count=df.height,
        column_count=len(df.columns),
    )

    return df


def load_tf_signatures(path: Path | str) -> list[str]:
    """Load transcription-factor signatures from a line-oriented list.

    The first tab-separated field of every line is used. Blank entries are
    skipped because an empty signature would match every InterPro value.

    Args:
        path: Path to the signature list

    Returns:
        Signature strings in file order
    """
    path = Path(path)

    signatures = []
    with open(path, "r", encoding="utf-8") as f:
        for line in f:
            field = line.split("\t", 1)[0].strip().strip('"').strip()
            if field:
                signatures.append(field)

    logger.info("load_tf_signatures_complete", path=str(path), signature_count=len(signatures))

    return signatures
