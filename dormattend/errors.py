class AttendanceError(Exception):
    """Base exception for attendance tracker failures."""


class IngestError(AttendanceError):
    """Raised when an uploaded student file cannot be turned into students."""


class UnsupportedFormatError(IngestError):
    """Raised when the file extension or its content matches no accepted format."""


class EmptyImportError(IngestError):
    """Raised when a file was parsed but no row carried a usable name."""


class InvalidRangeError(AttendanceError):
    """Raised when a report date range is missing a bound or is inverted."""
