from .errors import RowTooWideError, ColumnMismatchError

# SQLITE_MAX_VARIABLE_NUMBER since SQLite 3.32.0
SQLITE_MAX_VARIABLES = 32766


def plan_batches(rows, max_params=SQLITE_MAX_VARIABLES):
    """Split rows into contiguous batches that fit in one INSERT statement.

    Every row must carry the same columns, in the same order, as the first
    one. A batch never holds more than max_params values in total.
    """
    if max_params < 1:
        raise ValueError(f"max_params must be at least 1, got {max_params}")
    if not rows:
        return []

    columns = list(rows[0].keys())
    if not columns:
        raise ColumnMismatchError("Rows have no columns")
    for i, row in enumerate(rows):
        if list(row.keys()) != columns:
            raise ColumnMismatchError(f"Row {i} has columns {list(row.keys())}, expected {columns}")

    if len(columns) > max_params:
        raise RowTooWideError(len(columns), max_params)

    batch_size = max_params // len(columns)
    return [rows[i:i + batch_size] for i in range(0, len(rows), batch_size)]
