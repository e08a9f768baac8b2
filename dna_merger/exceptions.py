"""
Custom exceptions for the DNA merger.
Row-level defects never raise; these cover the caller-level failures only.
"""


class DNAMergeError(Exception):
    """Base exception for merge pipeline errors."""
    pass


class UnknownFormatError(DNAMergeError):
    """Raised when a file's vendor format cannot be determined."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(
            f"Could not detect the DNA file format of {source}. "
            f"Pass the format explicitly (ancestry, myheritage, livingdna, 23andme, ftdna)"
        )


class ConfigurationError(DNAMergeError):
    """Raised when run configuration is invalid (files, formats, output dir)."""

    def __init__(self, errors: list[str]):
        self.errors = errors
        super().__init__("; ".join(errors))
