"""
Error taxonomy for the analyzer engine.
Each error carries the HTTP status the API layer answers with.
"""
from typing import Optional


class AnalyzerError(Exception):
    """Base class for analysis failures"""
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class ValidationError(AnalyzerError):
    """Malformed request shape"""
    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        self.field = field
        super().__init__(message)


class PayloadTooLarge(AnalyzerError):
    """Declared or actual size exceeds the ceiling"""
    status_code = 413


class FetchError(AnalyzerError):
    """Remote image unreachable, timed out or answered with a non-success status"""


class DecodeError(AnalyzerError):
    """Bytes are not a decodable image"""


class InternalError(AnalyzerError):
    """Unexpected numeric or I/O fault while processing an image"""
