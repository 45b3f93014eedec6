# backend/core/exceptions.py
from rest_framework import status
from rest_framework.exceptions import APIException


class CMSError(APIException):
    """
    Base class for menu/page errors.

    `field` names the offending input field when there is one; the exception
    handler turns it into {"errors": {field: [message]}}.
    """

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Something went wrong."
    default_code = "error"

    def __init__(self, detail=None, field: str | None = None, code=None):
        super().__init__(detail=detail, code=code)
        self.field = field


class ValidationError(CMSError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid input."
    default_code = "invalid"


class DuplicateError(CMSError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = "A record with this value already exists."
    default_code = "duplicate"

    def __init__(self, detail=None, field: str | None = None, code=None):
        if detail is None and field:
            detail = f"A menu item with this {field} already exists."
        super().__init__(detail=detail, field=field, code=code)


class CycleError(CMSError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Invalid parent menu: cannot create circular reference."
    default_code = "cycle"


class NotFoundError(CMSError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found."
    default_code = "not_found"


class CascadeInconsistencyError(CMSError):
    """Children were only partly relinked; a retry has been scheduled."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Menu tree update did not complete. A repair has been scheduled."
    default_code = "cascade_inconsistent"
