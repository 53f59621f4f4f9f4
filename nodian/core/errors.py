# nodian/core/errors.py


class ParseError(ValueError):
    """Input text could not be parsed (JSON, timestamp, date-time)."""


class DecodeError(ValueError):
    """Encoded input is malformed for the selected codec."""


class DocumentIOError(OSError):
    """A notebook file could not be read, written, renamed or removed."""


class SessionNotOpenError(KeyError):
    """An operation needed an open document session that does not exist."""

    def __init__(self, path):
        super().__init__(str(path))
        self.path = path

    def __str__(self):
        return f"No open document for: {self.path}"
