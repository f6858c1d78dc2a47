"""
Identity gate for the Field Management API.

Callers identify themselves with the ``X-User-Email`` header. The gate only
checks that the claim is present and well formed; whether the user exists
is decided later by the services, which answer "not found".
"""

from typing import Optional

from fastapi import Request

from shared.base_service import error_response
from shared.errors import AuthenticationError, FieldManagementException, InvalidEmailError
from shared.logging import get_logger, set_user_context
from shared.metrics import MetricsCollector
from .identity import validate_email_or_raise


USER_EMAIL_HEADER = "X-User-Email"
API_PREFIX = "/api"

# (method, path prefix) pairs callable without an identity. Registration is
# the only operation an unregistered caller can legitimately perform.
EXEMPT_ROUTES = (
    ("POST", "/api/users"),
)


def _is_under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def requires_identity(method: str, path: str) -> bool:
    """Route classification evaluated before the gate runs."""
    if not _is_under(path, API_PREFIX):
        return False
    method = method.upper()
    return not any(
        method == exempt_method and _is_under(path, exempt_prefix)
        for exempt_method, exempt_prefix in EXEMPT_ROUTES
    )


class UserEmailGate:
    """Resolves the caller's normalized email, or short-circuits the request."""

    def __init__(self, metrics: Optional[MetricsCollector] = None):
        self.metrics = metrics
        self.logger = get_logger("fields.gate")

    def resolve(self, request: Request) -> str:
        """Return the normalized email claim carried by the request.

        Raises:
            AuthenticationError: header absent or blank.
            InvalidEmailError: header is not a valid mailbox address.
        """
        raw = request.headers.get(USER_EMAIL_HEADER)
        if raw is None or not raw.strip():
            raise AuthenticationError()

        try:
            return validate_email_or_raise(raw)
        except InvalidEmailError as e:
            raise InvalidEmailError("Invalid email format.") from e

    async def dispatch(self, request: Request, call_next):
        if not requires_identity(request.method, request.url.path):
            return await call_next(request)

        try:
            email = self.resolve(request)
        except FieldManagementException as exc:
            self.logger.info(
                "Request rejected by identity gate",
                code=exc.code,
                method=request.method,
                path=request.url.path
            )
            if self.metrics:
                self.metrics.record_identity_rejection(exc.code)
            return error_response(exc)

        request.state.user_email = email
        set_user_context(email)
        return await call_next(request)


def current_user_email(request: Request) -> str:
    """FastAPI dependency: the email resolved by the gate for this request."""
    email = getattr(request.state, "user_email", None)
    if not email:
        raise AuthenticationError()
    return email
