class SanitizationError(Exception):
    """Raised when sensitive-data masking fails."""
