"""Fatal error kinds.

Only these two failures stop a run; everything else in the document is
defaulted while parsing.
"""


class SheetError(Exception):
    """Base class for errors that abort the conversion."""


class LoadError(SheetError):
    """The API document could not be read or decoded."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error reading or parsing YAML file {path}: {reason}")


class WriteError(SheetError):
    """The Excel workbook could not be written."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Error creating Excel file {path}: {reason}")
