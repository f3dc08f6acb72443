"""
Exceptions raised by the shiftpay engine.

Calculations degrade to best-effort numbers instead of raising; these are
reserved for configuration problems caught when tables and jurisdictions
are loaded.
"""


class ShiftPayError(Exception):
    """Base exception for all shiftpay errors."""

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        self.message = message
        self.code = code


class BracketTableError(ShiftPayError, ValueError):
    """Raised when a tax bracket table is out of order, has gaps or overlaps, or is discontinuous."""

    def __init__(self, message: str, code: str = "BRACKET_TABLE_INVALID"):
        super().__init__(message, code)


class ConfigurationError(ShiftPayError, ValueError):
    """Raised for unknown jurisdictions, pay cycles or withholding methods."""

    def __init__(self, message: str, code: str = "CONFIG_INVALID"):
        super().__init__(message, code)
