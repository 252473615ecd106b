# app/utils/exceptions.py
"""
Domain error taxonomy.

Services and CRUD helpers raise these; app.main maps every one of them
to a ``{"message": ...}`` body with the matching HTTP status.
"""


class AppError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class UnauthorizedError(AppError):
    status_code = 401
    default_message = "Unauthorized"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Forbidden"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Not found"


class InvalidStateError(AppError):
    """Operation is not valid for the entity's current status"""
    status_code = 400
    default_message = "Operation not allowed in the current state"


class DuplicateApplicationError(AppError):
    status_code = 400
    default_message = "You have already applied to this task"


class PaymentGatewayError(AppError):
    """Gateway call failed; the message is safe to show to the client"""
    status_code = 500
    default_message = "Error confirming payment"


class UnexpectedError(AppError):
    status_code = 500
    default_message = "Internal server error"
