"""
Delimited-text ingestion.

Turns uploaded bytes into the record list the profiling engine consumes and
offers a quick, threshold-based column type preview for the upload screen.
The preview heuristic is deliberately looser than
core.profiling.detect_column_type and never replaces it.
"""

import io
import logging
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from core.values import is_missing, to_datetime, to_number

logger = logging.getLogger(__name__)

DEFAULT_DELIMITERS = (",", "\t", "|", ";")


class IngestionError(ValueError):
    """Raised when uploaded content cannot be turned into records."""


def _decode(content: Union[bytes, str]) -> str:
    if isinstance(content, str):
        return content
    for encoding in ("utf-8-sig", "latin-1"):
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise IngestionError("Unable to decode file content")


def guess_delimiter(text: str, delimiters: Sequence[str] = DEFAULT_DELIMITERS) -> str:
    """
    Pick the delimiter that splits the first lines most consistently.

    Args:
        text: Decoded file content
        delimiters: Candidates, in preference order for ties

    Returns:
        The best candidate (the first one when nothing matches)
    """
    lines = [line for line in text.splitlines() if line.strip()][:10]
    if not lines:
        return delimiters[0]

    best, best_score = delimiters[0], 0
    for delimiter in delimiters:
        counts = [line.count(delimiter) for line in lines]
        if counts[0] == 0:
            continue
        # Fields per line that agree with the header line
        consistent = sum(1 for c in counts if c == counts[0])
        score = consistent * counts[0]
        if score > best_score:
            best, best_score = delimiter, score
    return best


def convert_cell(text: Any) -> Any:
    """Dynamic typing of a parsed cell: numbers, true/false, empty -> None."""
    if is_missing(text):
        return None
    if not isinstance(text, str):
        return text

    stripped = text.strip()
    lowered = stripped.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False

    number = to_number(stripped)
    if number is None:
        return text
    if number.is_integer() and not any(ch in lowered for ch in ".e"):
        return int(number)
    return number


def rows_from_csv(
    content: Union[bytes, str],
    delimiters: Sequence[str] = DEFAULT_DELIMITERS,
) -> List[Dict[str, Any]]:
    """
    Parse delimited text with a header row into records.

    Args:
        content: Raw upload (bytes) or decoded text
        delimiters: Candidate delimiters to guess from

    Returns:
        One dict per data row, keyed by header label

    Raises:
        IngestionError: Undecodable input, or no header / no data rows
    """
    text = _decode(content)
    if not text.strip():
        raise IngestionError("The uploaded file appears to be empty or has no valid data.")

    delimiter = guess_delimiter(text, delimiters)
    skipped = []

    def _skip_bad_line(fields: List[str]) -> None:
        skipped.append(fields)
        return None

    try:
        frame = pd.read_csv(
            io.StringIO(text),
            sep=delimiter,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            engine="python",
            on_bad_lines=_skip_bad_line,
        )
    except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise IngestionError(f"Failed to parse file: {exc}") from exc

    if skipped:
        logger.warning("Skipped %d malformed rows", len(skipped))

    frame.columns = [str(c).strip() for c in frame.columns]
    if frame.empty:
        raise IngestionError("The uploaded file appears to be empty or has no valid data.")

    records = frame.to_dict(orient="records")
    return [{key: convert_cell(value) for key, value in record.items()} for record in records]


def sniff_column_type(values: Sequence[Any]) -> str:
    """
    Quick majority-vote type for previews.

    Returns:
        "numeric" when over 80% of present values are numbers, "categorical"
        for few distinct values, "datetime" when over 80% parse as dates,
        otherwise "text"
    """
    present = [v for v in values if v is not None and v != ""]
    distinct = Counter(str(v) for v in present)

    numeric = sum(1 for v in present if to_number(v) is not None)
    if numeric > len(present) * 0.8:
        return "numeric"
    if len(distinct) <= min(20, len(present) * 0.5):
        return "categorical"

    dates = sum(1 for v in present if to_datetime(v) is not None)
    if dates > len(present) * 0.8:
        return "datetime"
    return "text"


def preview_column_types(rows: Sequence[Mapping[str, Any]], columns: Optional[Sequence[str]] = None) -> Dict[str, str]:
    """Sniffed type per column, for display before analysis."""
    if columns is None:
        columns = list(rows[0].keys()) if rows else []
    return {col: sniff_column_type([row.get(col) for row in rows]) for col in columns}
