"""
Error taxonomy shared by the services.

Services raise these; the API layer renders them as
``{"detail": message, "kind": kind}`` with the matching status code.
"""


class ResumeAIError(Exception):
    """Base class for every error the services raise on purpose."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"detail": self.message, "kind": self.kind}


class ValidationError(ResumeAIError):
    """Resume content is missing a required section or has the wrong shape."""

    kind = "validation_error"
    status_code = 422


class InvalidPlanError(ResumeAIError):
    kind = "invalid_plan"
    status_code = 400


class NotFoundError(ResumeAIError):
    """
    Resource is absent or belongs to someone else.

    Both cases raise the same error with the same message so that callers
    cannot probe for ids they do not own.
    """

    kind = "not_found"
    status_code = 404


class AuthenticityError(ResumeAIError):
    """Payment notification failed signature verification."""

    kind = "authenticity_error"
    status_code = 400


class ConflictError(ResumeAIError):
    """A guarded write lost to a concurrent one, or the transition is not allowed."""

    kind = "conflict"
    status_code = 409


class CheckoutError(ResumeAIError):
    """The payment provider could not open a checkout session."""

    kind = "checkout_error"
    status_code = 502
