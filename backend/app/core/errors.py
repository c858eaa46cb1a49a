"""
Exceptions raised by the service layer.

Routers translate these into HTTP responses; everything else (driver errors,
programming errors) propagates unchanged.
"""


class CoercionError(ValueError):
    """Text could not be converted to the declared type."""


class ConnectionNotFoundError(LookupError):
    """No open connection is registered under the given id."""


class DocumentNotFoundError(LookupError):
    """One or more document identifiers do not exist in the collection."""

    def __init__(self, missing_ids: list[str]):
        self.missing_ids = missing_ids
        preview = ", ".join(missing_ids[:5])
        if len(missing_ids) > 5:
            preview += f", +{len(missing_ids) - 5} more"
        super().__init__(f"Documents not found: {preview}")


class BatchValidationError(ValueError):
    """A batch request is empty or contradicts itself."""


class AuthError(ValueError):
    """Authentication failure with a machine-readable code."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(message)
