class JoinDBError(Exception):
    pass


class DiscoveryError(JoinDBError):
    """A root could not be stat'ed or a directory could not be listed."""


class NotFoundError(DiscoveryError):
    pass


class SourceUnreadableError(JoinDBError):
    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read database {path}: {reason}")


class TransferError(JoinDBError):
    pass


class WriteError(TransferError):
    pass


class RowTooWideError(TransferError):
    def __init__(self, columns, max_params):
        self.columns = columns
        self.max_params = max_params
        super().__init__(f"Row has {columns} columns but a statement can only carry {max_params} parameters")


class ColumnMismatchError(TransferError):
    pass
