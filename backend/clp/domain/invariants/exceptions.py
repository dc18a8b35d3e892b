class InvariantViolation(Exception):
    """Raised when a landing page document or version breaks a domain rule."""
