"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class ValidationError(Exception):
    """Raised when user input is rejected before any network call."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class PreconditionFailedError(Exception):
    """Raised when a guarded state transition is not allowed yet."""

    def __init__(self, transition: str, reason: str):
        self.transition = transition
        self.reason = reason
        super().__init__(f"Cannot {transition}: {reason}")


class ApiError(Exception):
    """Raised when the backend API returns an error or cannot be reached.

    ``status_code`` is 0 for transport failures and timeouts.
    """

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"HTTP {status_code}: {message}")


class FetchError(Exception):
    """Raised when loading a record from the backend fails."""

    def __init__(self, entity_type: str, entity_id: str, cause: ApiError):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.cause = cause
        super().__init__(f"Could not load {entity_type} '{entity_id}': {cause.message}")


class SaveError(Exception):
    """Raised when a user-initiated write to the backend fails."""

    def __init__(self, entity_type: str, entity_id: str, cause: ApiError):
        self.entity_type = entity_type
        self.entity_id = entity_id
        self.cause = cause
        super().__init__(f"Could not save {entity_type} '{entity_id}': {cause.message}")
