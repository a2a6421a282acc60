"""Exception types shared across services."""


class ServiceError(Exception):
    """Base class for service-related errors."""
    pass


class ConfigurationError(ServiceError):
    """Raised when a required setting, such as the API key, is missing."""
    pass


class APIIntegrationError(ServiceError):
    """Raised when there is an issue with a third-party API integration."""
    pass


class GenerationError(ServiceError):
    """Raised when study material could not be generated."""
    pass


class FileProcessingError(ServiceError):
    """Raised when there is an error processing an uploaded file."""
    pass
