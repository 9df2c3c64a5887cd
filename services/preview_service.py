from typing import Dict, Any, List, Tuple
import pandas as pd

from models.common_models import FileSheet


def sheet_to_dataframe(sheet: FileSheet) -> pd.DataFrame:
    """
    Build a DataFrame from a parsed sheet (header row + row data).
    Ragged rows are padded / cut to the header width, numeric-looking
    columns are converted.
    """
    width = len(sheet.headers)
    rows = [(list(row) + [None] * width)[:width] for row in sheet.data]
    df = pd.DataFrame(rows, columns=sheet.headers)

    for col in df.columns:
        converted = pd.to_numeric(df[col], errors="coerce")
        non_null = df[col].notna().sum()
        # keep as text unless every present value parsed
        if non_null > 0 and converted.notna().sum() == non_null:
            df[col] = converted
    return df


def get_preview_rows(sheet: FileSheet, n_rows: int = 20) -> Dict[str, Any]:
    preview_df = sheet_to_dataframe(sheet).head(n_rows)
    return {
        "columns": list(preview_df.columns),
        "rows": preview_df.astype(object).where(preview_df.notna(), None).to_dict(orient="records")
    }


def _parses_as_dates(series: pd.Series) -> bool:
    values = series.dropna()
    if values.empty:
        return False
    try:
        parsed = pd.to_datetime(values.astype(str), errors="coerce", format="mixed")
    except (TypeError, ValueError):
        return False
    return bool(parsed.notna().all())


def column_kinds(df: pd.DataFrame) -> Dict[str, str]:
    """Classify each column as numerical, datetime or categorical."""
    kinds = {}
    for col in df.columns:
        series = df[col]
        if pd.api.types.is_numeric_dtype(series):
            kinds[col] = "numerical"
        elif pd.api.types.is_datetime64_any_dtype(series) or _parses_as_dates(series):
            kinds[col] = "datetime"
        else:
            kinds[col] = "categorical"
    return kinds


def axis_options(sheet: FileSheet) -> Tuple[List[str], List[str]]:
    """
    Columns offered for chart axes: any column on X, numerical ones on Y.
    Falls back to every column for Y when the sheet has no numbers.
    """
    df = sheet_to_dataframe(sheet)
    kinds = column_kinds(df)
    x_options = [str(c) for c in df.columns]
    y_options = [str(c) for c in df.columns if kinds[c] == "numerical"]
    return x_options, y_options or x_options
