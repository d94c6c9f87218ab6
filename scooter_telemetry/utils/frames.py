"""Conversion of parsed packet records to pandas DataFrames."""

from typing import Any, Dict, List, Sequence
import pandas as pd

# Columns every device and error record carries, in output order
BASE_COLUMNS = ["imei", "time"]


def records_to_dataframe(records: Sequence[Dict[str, Any]]) -> pd.DataFrame:
    """Tabulate parsed records.

    One row per record. Error names become their own columns, so rows of other
    packet types hold NaN there.

    Args:
        records: Records as returned by PacketParser.parse

    Returns:
        DataFrame with base columns first, then the remaining keys in first-seen order
    """
    if not records:
        return pd.DataFrame(columns=BASE_COLUMNS)

    columns: List[str] = list(BASE_COLUMNS)
    for record in records:
        for key in record:
            if key not in columns:
                columns.append(key)

    df = pd.DataFrame.from_records(list(records), columns=columns)

    # Mixed local offsets (DST) only fit one column as UTC
    df["time"] = pd.to_datetime(df["time"], utc=True)
    return df
