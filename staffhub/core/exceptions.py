"""
Custom Exceptions for StaffHub
==============================

Every error raised by a handler or service derives from StaffHubError and
carries the HTTP status it maps to. The application exception handler in
staffhub.main renders them as ``{"message": ...}``.

Usage:
    from staffhub.core.exceptions import TaskNotFoundError, ForbiddenError

    task = tracker.tasks.get(task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
"""

from typing import Optional, Any, Dict


class StaffHubError(Exception):
    """Base exception for all StaffHub errors"""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)


# ============================================
# Authentication & Authorization Errors
# ============================================

class MissingCredentialError(StaffHubError):
    """No bearer credential on the request"""

    status_code = 401

    def __init__(self, message: str = "Access token required"):
        super().__init__(message, code="MISSING_CREDENTIAL")


class InvalidCredentialError(StaffHubError):
    """Bearer credential could not be resolved to an identity"""

    status_code = 403

    def __init__(self, message: str = "Invalid or expired token"):
        super().__init__(message, code="INVALID_CREDENTIAL")


class AuthenticationError(StaffHubError):
    """Login failed"""

    status_code = 401

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="AUTH_FAILED")


class ForbiddenError(StaffHubError):
    """Role or ownership check failed"""

    status_code = 403

    def __init__(self, message: str = "Not allowed"):
        super().__init__(message, code="FORBIDDEN")


# ============================================
# Resource Errors (404-type)
# ============================================

class NotFoundError(StaffHubError):
    """Base class for not found errors"""

    status_code = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class ProjectNotFoundError(NotFoundError):
    def __init__(self, project_id: str):
        super().__init__("Project", project_id)


class TaskNotFoundError(NotFoundError):
    def __init__(self, task_id: str):
        super().__init__("Task", task_id)


class AttachmentNotFoundError(NotFoundError):
    def __init__(self, attachment_id: str):
        super().__init__("Attachment", attachment_id)


class FileRecordNotFoundError(NotFoundError):
    """Shared file record not found"""

    def __init__(self, file_id: str):
        super().__init__("File", file_id)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str):
        super().__init__("User", user_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(StaffHubError):
    """Input validation failed"""

    status_code = 400

    def __init__(self, message: str, field: Optional[str] = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class InvalidProjectReferenceError(ValidationError):
    """Task points at a project that does not exist"""

    def __init__(self, project_id: str):
        super().__init__("Invalid projectId", field="projectId")
        self.code = "INVALID_PROJECT_ID"
        self.details["project_id"] = project_id


# ============================================
# Upstream Errors
# ============================================

class UpstreamError(StaffHubError):
    """User directory unreachable or returned an error"""

    status_code = 500

    def __init__(self, message: str = "User directory request failed",
                 upstream_status: Optional[int] = None):
        super().__init__(message, code="UPSTREAM_ERROR")
        if upstream_status is not None:
            self.details["upstream_status"] = upstream_status


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: StaffHubError) -> Dict[str, Any]:
    """Convert exception to API error response body"""
    return {"message": error.message}
