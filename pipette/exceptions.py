"""
Custom exception hierarchy for pipette.

Why a custom hierarchy:
- Callers can catch specific exceptions (e.g., UnsupportedFormatError vs
  BackendError) without relying on generic ValueError/RuntimeError.
- Every failure is fatal to the import call; non-fatal conditions
  (duplicate names, invalid names) are logged as warnings instead.
"""


class PipetteError(Exception):
    """Base exception for all pipette errors."""


class UnresolvedFormatError(PipetteError):
    """Raised when no format can be inferred from the file name.

    The basename has no extension (or an unknown one) and the caller did
    not pass an explicit ``format`` override.
    """


class UnsupportedFormatError(PipetteError):
    """Raised when a resolved format has no registered importer.

    Also raised for denylisted document formats (DOC, DOCX, PDF, PPT,
    PPTX), which are never handled.
    """


class OptionMismatchError(PipetteError, AssertionError):
    """Raised when an option was changed for a format it does not apply to.

    For example, ``sheet=2`` on a CSV file, or a comment filter with a
    delimited engine that cannot exclude comment lines.
    """


class ColumnNameMismatchError(PipetteError, AssertionError):
    """Raised when the imported column names differ from the requested ones."""


class MalformedContainerError(PipetteError):
    """Raised when a container file does not hold the expected objects.

    For example, an R data file (``.rda``) holding zero or several objects.
    """


class BackendError(PipetteError):
    """Raised when the underlying parser fails.

    The original exception is chained as ``__cause__``.
    """
