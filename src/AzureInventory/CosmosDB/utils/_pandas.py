# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Internal pandas helpers"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

import pandas as pd


def rows_to_dataframe(rows: Iterable[Dict[str, Any]], columns: Sequence[str]) -> pd.DataFrame:
    """Build a DataFrame from table rows, keeping the declared column order.

    JSON-typed values (lists, dicts) are kept as Python objects. Integer
    columns containing nulls use pandas' nullable ``Int64`` dtype.

    :param rows: Rows keyed by column name.
    :param columns: Declared column names, in output order.
    """
    records: List[Dict[str, Any]] = list(rows)
    df = pd.DataFrame.from_records(records, columns=list(columns))
    for name in df.columns:
        values = [r.get(name) for r in records]
        present = [v for v in values if v is not None]
        if present and all(isinstance(v, int) and not isinstance(v, bool) for v in present):
            df[name] = pd.array(values, dtype="Int64")
    return df
