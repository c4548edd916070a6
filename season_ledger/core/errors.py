"""Exceptions raised while loading a season ledger."""


class ParseError(ValueError):
    """A ledger line (or the whole file) could not be parsed.

    Attributes:
        line_number: 1-based line number of the offending line, or None
                     when the error concerns the file as a whole.
        line: Raw text of the offending line ('' for file-level errors).
    """

    def __init__(self, message: str, line_number: int | None = None,
                 line: str = ''):
        self.reason = message
        self.line_number = line_number
        self.line = line
        if line_number is not None:
            message = f"line {line_number}: {message}: {line.strip()!r}"
        super().__init__(message)


class EmptyLedgerError(ParseError):
    """The ledger file holds no season records."""
