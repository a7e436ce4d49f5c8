"""
Catalog Exceptions

Errors raised below the route layer. The web app turns them into JSON
responses using status_code.
"""


class CatalogError(Exception):
    """Catalog error with optional code and details."""

    status_code = 500

    def __init__(self, message: str, code: str = None, details: dict = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_dict(self) -> dict:
        payload = {"error": self.message}
        if self.code:
            payload["code"] = self.code
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidParameterError(CatalogError):
    status_code = 400


class ResourceNotFoundError(CatalogError):
    status_code = 404


class ResourceAlreadyExistsError(CatalogError):
    status_code = 409
