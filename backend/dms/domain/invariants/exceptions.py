class InvariantViolation(Exception):
    """Raised when a write would leave pages or document sets inconsistent."""
