"""
Error taxonomy shared by the services.

Every externally visible error is an ``HTTPException`` so FastAPI renders it
without extra handlers. ``NotFoundError`` and ``ForbiddenError`` are separate
types and are never substituted for each other: clients show "this trip no
longer exists" for one and "ask to be invited" for the other.
"""
from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Malformed input detected before any write (wrong-scope anchor, unknown role...)."""

    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenError(HTTPException):
    def __init__(self, detail: str = "Forbidden"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(HTTPException):
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class PlaceResolutionError(HTTPException):
    """Storage failure while matching or creating a canonical place."""

    def __init__(self, detail: str = "Failed to resolve place"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class RenumberRequired(Exception):
    """Raised inside the ordering engine when float precision between two neighbors is exhausted."""

    def __init__(self, scope_key: str):
        super().__init__(f"Order indices exhausted in scope {scope_key}")
        self.scope_key = scope_key
