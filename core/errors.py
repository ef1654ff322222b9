"""
Domain errors raised by the stores and services.

They subclass DRF's ``APIException`` so that the unified exception handler
(``core.exceptions.api_exception_handler``) turns them into the right HTTP
status without any per-view translation.
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class ValidationError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid request'
    default_code = 'validation_error'


class InvalidQuantity(ValidationError):
    default_detail = 'Please provide a valid quantity'
    default_code = 'invalid_quantity'


class InsufficientStock(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Insufficient stock'
    default_code = 'insufficient_stock'


class DuplicateItem(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Item already exists in inventory'
    default_code = 'duplicate_item'


class NotFound(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found'
    default_code = 'not_found'


class InvalidCredentials(APIException):
    # One message for unknown user and wrong password alike.
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = 'Invalid credentials'
    default_code = 'invalid_credentials'


class ImmutableEntryError(Exception):
    """Raised when code tries to change or delete a ledger entry."""
