"""
Custom exceptions for the PMFlow application.

The WBS and phase operations themselves never raise for unknown references;
these exceptions belong to input validation, storage and the CLI layer.
"""


class PMFlowError(Exception):
    """Base exception for all PMFlow-related errors."""
    pass


class ValidationError(PMFlowError):
    """Raised when validation fails for an item or operation."""
    pass


class StorageError(PMFlowError):
    """Raised when reading or writing the .pmflow/ files fails."""
    pass
