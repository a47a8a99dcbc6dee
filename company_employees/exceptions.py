"""
Custom Exception Classes for the Company Employees API

This module defines custom exceptions for consistent error responses
across the application. Client input problems, missing resources and
persistence failures are kept in separate branches of the hierarchy so
routes can pick the right response semantics.
"""

from enum import Enum
from typing import Any

from fastapi import status


class ErrorCode(str, Enum):
    """Machine-readable error codes returned in the error envelope."""

    VALIDATION_FAILED = "VALIDATION_FAILED"
    VALIDATION_INVALID_RANGE = "VALIDATION_INVALID_RANGE"
    VALIDATION_NULL_PAYLOAD = "VALIDATION_NULL_PAYLOAD"
    PATCH_INVALID_OPERATION = "PATCH_INVALID_OPERATION"
    PATCH_VALIDATION_FAILED = "PATCH_VALIDATION_FAILED"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_COMPANY_NOT_FOUND = "RESOURCE_COMPANY_NOT_FOUND"
    RESOURCE_EMPLOYEE_NOT_FOUND = "RESOURCE_EMPLOYEE_NOT_FOUND"
    DATABASE_ERROR = "DATABASE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class CompanyEmployeesError(Exception):
    """Base exception class for all application exceptions"""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)


# ============================================================================
# Client Input Exceptions
# ============================================================================


class ClientInputError(CompanyEmployeesError):
    """Raised when the client sent something the API refuses to act on"""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        error_code: ErrorCode = ErrorCode.VALIDATION_FAILED,
    ):
        super().__init__(message=message, status_code=status_code, details=details or {}, error_code=error_code)


class InvalidRangeError(ClientInputError):
    """Raised when a range filter has its upper bound below its lower bound"""

    def __init__(self, field: str, min_value: Any, max_value: Any):
        super().__init__(
            message=f"Max {field} can't be less than min {field}.",
            details={"field": field, "min_value": min_value, "max_value": max_value},
            error_code=ErrorCode.VALIDATION_INVALID_RANGE,
        )


class NullPayloadError(ClientInputError):
    """Raised when a request body is missing"""

    def __init__(self, payload_type: str):
        super().__init__(
            message=f"{payload_type} object is null",
            details={"payload_type": payload_type},
            error_code=ErrorCode.VALIDATION_NULL_PAYLOAD,
        )


class PatchOperationError(ClientInputError):
    """Raised when a patch operation cannot be applied"""

    def __init__(self, message: str, operation: dict[str, Any] | None = None):
        details = {"operation": operation} if operation else {}
        super().__init__(message=message, details=details, error_code=ErrorCode.PATCH_INVALID_OPERATION)


class EntityValidationError(ClientInputError):
    """Raised when a transfer shape fails validation"""

    def __init__(self, message: str = "Invalid model state", errors: list[dict[str, Any]] | None = None):
        super().__init__(
            message=message,
            details={"validation_errors": errors or []},
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error_code=ErrorCode.PATCH_VALIDATION_FAILED,
        )


# ============================================================================
# Resource Not Found Exceptions
# ============================================================================


class ResourceNotFoundError(CompanyEmployeesError):
    """Base class for resource not found errors"""

    def __init__(
        self,
        resource_type: str,
        resource_id: Any | None = None,
        error_code: ErrorCode = ErrorCode.RESOURCE_NOT_FOUND,
    ):
        message = f"{resource_type} not found"
        if resource_id is not None:
            message = f"{resource_type} with id '{resource_id}' doesn't exist in the database"
        super().__init__(
            message=message,
            status_code=status.HTTP_404_NOT_FOUND,
            details={"resource_type": resource_type, "resource_id": str(resource_id) if resource_id else None},
            error_code=error_code,
        )


class CompanyNotFoundError(ResourceNotFoundError):
    """Raised when a company is not found"""

    def __init__(self, company_id: Any | None = None):
        super().__init__(
            resource_type="Company", resource_id=company_id, error_code=ErrorCode.RESOURCE_COMPANY_NOT_FOUND
        )


class EmployeeNotFoundError(ResourceNotFoundError):
    """Raised when an employee is not found"""

    def __init__(self, employee_id: Any | None = None):
        super().__init__(
            resource_type="Employee", resource_id=employee_id, error_code=ErrorCode.RESOURCE_EMPLOYEE_NOT_FOUND
        )


# ============================================================================
# Database Exceptions
# ============================================================================


class DatabaseError(CompanyEmployeesError):
    """Raised when a database operation fails"""

    def __init__(self, message: str = "A database error occurred", operation: str | None = None):
        details = {"operation": operation} if operation else {}
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
            error_code=ErrorCode.DATABASE_ERROR,
        )
