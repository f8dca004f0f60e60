# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Messages are in Vietnamese because they are shown to operators as-is.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.responses import JSONResponse


class FamilyRegistryException(Exception):
    """
    Base exception for the family registry API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "REGISTRY_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


# =============================================================================
# Not Found Exceptions
# =============================================================================

class HouseholdNotFoundError(FamilyRegistryException):
    """Raised when a household doesn't exist or isn't owned by the caller."""

    def __init__(
        self,
        household_id: str,
        message: str = "Không thể tải thông tin hộ gia đình",
    ):
        super().__init__(
            message=message,
            code="HOUSEHOLD_NOT_FOUND",
            status_code=404,
            suggestion="Check that the household_id is correct and belongs to your account",
            details={"household_id": household_id}
        )


class FamilyMemberNotFoundError(FamilyRegistryException):
    """Raised when a family member ID doesn't exist."""

    def __init__(self, member_id: str):
        super().__init__(
            message="Không tìm thấy thành viên",
            code="MEMBER_NOT_FOUND",
            status_code=404,
            suggestion="Check that the member_id is correct",
            details={"member_id": member_id}
        )


class WorshipEventNotFoundError(FamilyRegistryException):
    """Raised when a worship history entry doesn't exist."""

    def __init__(self, event_id: str):
        super().__init__(
            message="Không tìm thấy lịch cúng",
            code="WORSHIP_EVENT_NOT_FOUND",
            status_code=404,
            details={"event_id": event_id}
        )


class UnknownDivisionError(FamilyRegistryException):
    """Raised when a province or ward code is not in the division dataset."""

    def __init__(self, kind: str, code: str):
        super().__init__(
            message=f"Không tìm thấy {kind}: {code}",
            code="UNKNOWN_DIVISION",
            status_code=404,
            suggestion="Use GET /divisions/provinces to list valid codes",
            details={"kind": kind, "code": code}
        )


# =============================================================================
# Business Rule Exceptions
# =============================================================================

class DuplicatePhoneError(FamilyRegistryException):
    """Raised when a household phone number is already registered."""

    def __init__(self, phone: str | None = None):
        super().__init__(
            message="Số điện thoại này đã được sử dụng cho hộ gia đình khác",
            code="DUPLICATE_PHONE",
            status_code=409,
            suggestion="Use GET /households/phone-available to check a number first",
            details={"phone": phone} if phone else None
        )


class HeadOfHouseholdDeletionError(FamilyRegistryException):
    """Raised when trying to delete the member who heads the household."""

    def __init__(self, member_id: str):
        super().__init__(
            message="Không thể xóa chủ hộ. Vui lòng chọn chủ hộ mới hoặc xóa cả hộ gia đình.",
            code="HEAD_OF_HOUSEHOLD_DELETE",
            status_code=400,
            suggestion="Transfer headship with POST /households/{id}/transfer-head first",
            details={"member_id": member_id}
        )


class InvalidHeadTransferError(FamilyRegistryException):
    """Raised when the requested new head cannot take over the household."""

    def __init__(self, household_id: str, member_id: str, reason: str):
        super().__init__(
            message=reason,
            code="INVALID_HEAD_TRANSFER",
            status_code=400,
            details={"household_id": household_id, "member_id": member_id}
        )


class InvalidWorshipMemberError(FamilyRegistryException):
    """Raised when a worship event references a member of another household."""

    def __init__(self, household_id: str, member_id: str):
        super().__init__(
            message="Thành viên không thuộc hộ gia đình này",
            code="INVALID_WORSHIP_MEMBER",
            status_code=400,
            details={"household_id": household_id, "member_id": member_id}
        )


# =============================================================================
# Backend Exceptions
# =============================================================================

class BackendOperationError(FamilyRegistryException):
    """
    Raised when Supabase rejects an operation.

    The backend's own message is kept so operators see what went wrong.
    """

    def __init__(self, message: str, error: Exception | str | None = None):
        full_message = f"{message}: {error_text(error)}" if error else message
        super().__init__(
            message=full_message,
            code="BACKEND_ERROR",
            status_code=502,
            suggestion="Try again later or contact support if the issue persists",
        )


def error_text(error: Exception | str) -> str:
    """Pull the human readable message out of a postgrest/supabase error."""
    if isinstance(error, str):
        return error
    return getattr(error, "message", None) or str(error)


# =============================================================================
# Exception Handlers
# =============================================================================

async def registry_exception_handler(
    request: Request,
    exc: FamilyRegistryException
) -> JSONResponse:
    """
    Convert FamilyRegistryException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )
