"""Domain exceptions."""


class DocWatchError(Exception):
    """Base exception for docwatch."""

    pass


class NotFound(DocWatchError):
    """Requested resource was not found."""

    def __init__(self, resource: str, resource_id: str) -> None:
        super().__init__(f"{resource} not found: {resource_id}")
        self.resource = resource
        self.resource_id = resource_id


class ValidationError(DocWatchError):
    """Validation failed for input data."""

    pass


class NotAuthenticated(DocWatchError):
    """Document store credentials are missing or rejected."""

    pass


class ExtractionError(DocWatchError):
    """Content of a single file could not be fetched or converted to text."""

    pass


class ExplanationError(DocWatchError):
    """Generative explanation could not be produced."""

    pass


class IngestionInProgress(DocWatchError):
    """Another ingestion run holds the single-flight guard."""

    def __init__(self, message: str = "Ingestion already in progress") -> None:
        super().__init__(message)
