"""Error types for Menu Icons.

Most failure paths in the admin glue are early returns or default
substitutions; these exceptions cover the few places that do raise.
"""


class MenuIconsError(Exception):
    """Base exception for all Menu Icons errors."""

    def __init__(self, message: str, details: dict = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class FieldConfigurationError(MenuIconsError):
    """Raised when a field descriptor cannot be rendered at all."""

    def __init__(self, field_id: str, reason: str):
        super().__init__(
            f"Field '{field_id}' is misconfigured: {reason}",
            {"field_id": field_id, "reason": reason},
        )
        self.field_id = field_id


class InvalidNonceError(MenuIconsError):
    """Raised when an anti-forgery token is missing, expired or for another action."""

    def __init__(self, action: str, reason: str = "invalid token"):
        super().__init__(
            f"Nonce check failed for '{action}': {reason}",
            {"action": action, "reason": reason},
        )
        self.action = action
