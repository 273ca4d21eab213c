from __future__ import annotations


class ContentProviderError(RuntimeError):
    """A content-generation call failed (network, model, or malformed output)."""

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(f"{operation}: {message}")
        self.operation = operation
