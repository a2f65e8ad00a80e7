"""
CSV Codec - Decodes uploaded time series and encodes stored results.

Decoding is lenient per row and strict per file: rows whose value does not
parse are skipped, but the surviving series must reach the minimum length.
Encoding is deterministic so a stored record always downloads byte-identical.
"""

import io
import logging

import numpy as np
import pandas as pd

from rnseanomaly.common.dataclasses import AnalysisRecord, TimeSeries
from rnseanomaly.common.exceptions import InsufficientData, MalformedInput

logger = logging.getLogger(__name__)

DOWNLOAD_COLUMNS = ["index", "value", "is_anomaly", "confidence"]
DEFAULT_MIN_LENGTH = 10
DEFAULT_VALUE_COLUMN = 1


def decode_bytes(raw: bytes) -> str:
    """Decode an uploaded payload as UTF-8, tolerating a byte order mark."""
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedInput(f"Upload is not valid UTF-8 text: {e.reason}") from e


def decode_series(
    text: str,
    value_column: int = DEFAULT_VALUE_COLUMN,
    min_length: int = DEFAULT_MIN_LENGTH,
) -> TimeSeries:
    """
    Parse CSV text into a TimeSeries.

    Args:
        text: CSV with a header row and at least ``value_column + 1`` columns
        value_column: Zero-based position of the value column
        min_length: Minimum number of usable samples

    Raises:
        MalformedInput: not CSV, or too few columns
        InsufficientData: fewer than ``min_length`` usable samples
    """
    try:
        frame = pd.read_csv(
            io.StringIO(text),
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            on_bad_lines="skip",
        )
    except pd.errors.EmptyDataError as e:
        raise MalformedInput("Upload is empty") from e
    except pd.errors.ParserError as e:
        raise MalformedInput(f"Upload is not valid CSV: {e}") from e

    if frame.shape[1] <= value_column:
        raise MalformedInput(
            f"Expected at least {value_column + 1} columns, found {frame.shape[1]}"
        )

    values = pd.to_numeric(frame.iloc[:, value_column].str.strip(), errors="coerce")
    usable = values.notna() & np.isfinite(values.fillna(0.0))

    skipped = int((~usable).sum())
    if skipped:
        logger.debug(f"Skipped {skipped} row(s) with a non-numeric value")

    kept = values[usable].astype(float)
    if len(kept) < min_length:
        raise InsufficientData(
            f"Series has {len(kept)} usable sample(s), at least {min_length} required"
        )

    labels = None
    if value_column > 0:
        labels = tuple(frame.iloc[:, 0][usable].fillna("").astype(str).str.strip())

    return TimeSeries(values=tuple(kept.tolist()), labels=labels)


def encode_record(record: AnalysisRecord) -> str:
    """
    Serialize a record as ``index,value,is_anomaly,confidence`` CSV.

    One row per sample; unflagged rows carry confidence 0.0.
    """
    confidence_by_index = {flag.index: flag.confidence for flag in record.flags}
    indices = range(1, len(record.series) + 1)

    frame = pd.DataFrame({
        "index": list(indices),
        "value": pd.Series(record.series.values, dtype="float64"),
        "is_anomaly": ["true" if i in confidence_by_index else "false" for i in indices],
        "confidence": pd.Series(
            [confidence_by_index.get(i, 0.0) for i in indices], dtype="float64"
        ),
    }, columns=DOWNLOAD_COLUMNS)

    return frame.to_csv(index=False, lineterminator="\n")
