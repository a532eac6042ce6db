from typing import List, Optional


class InvalidInputError(ValueError):
    """Raised when a plan request cannot be scheduled as given.

    A zero budget or an unknown weekday is a caller bug, so it is rejected
    instead of producing an empty plan.
    """

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []

    def __str__(self) -> str:
        if not self.errors:
            return self.message
        return f"{self.message}: {'; '.join(self.errors)}"
