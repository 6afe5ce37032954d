from typing import Optional


class ConfigurationError(Exception):
    """Exception raised when a model configuration is invalid."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"{message} (at '{path}')"
        super().__init__(message)


class FieldTreeError(ConfigurationError):
    """Exception raised when a field tree entry cannot be parsed."""


class ModelResolutionError(ConfigurationError):
    """Exception raised when a configured model class cannot be imported."""


class UnknownModelError(Exception):
    """Exception raised when no configuration exists for a model identifier."""

    def __init__(self, model_id: str):
        self.model_id = model_id
        super().__init__(f"Model {model_id} is not configured for indexing.")


class RepositoryException(Exception):
    """Base exception for repository-related errors."""


class OpenSearchException(Exception):
    """Base exception for OpenSearch-related errors."""


class IndexingException(OpenSearchException):
    """Exception raised when documents cannot be shipped to the index."""
