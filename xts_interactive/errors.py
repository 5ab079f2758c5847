# xts_interactive/errors.py
import traceback
from typing import Any, NamedTuple, Optional

DEFAULT_STATUS_CODE = 500


class InteractiveError(Exception):
    """
    Uniform failure value returned (never raised) by every session operation.
    Carries a message, a diagnostic trace and a numeric status code.
    """
    def __init__(self, message: str, stack: Optional[str] = None, status_code: int = DEFAULT_STATUS_CODE):
        super().__init__(message)
        self._message = message
        self._stack = stack
        self._status_code = status_code

    @property
    def message(self) -> str:
        return self._message

    @property
    def stack(self) -> Optional[str]:
        return self._stack

    @property
    def status_code(self) -> int:
        return self._status_code

    def to_dict(self):
        return {"message": self._message, "stack": self._stack, "statusCode": self._status_code}

    def __repr__(self):
        return f"InteractiveError(message={self._message!r}, status_code={self._status_code})"

    @classmethod
    def from_exception(cls, exc: BaseException, fallback_message: str) -> "InteractiveError":
        if isinstance(exc, InteractiveError):
            return exc
        message = str(exc) or fallback_message
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__)) or None
        status_code = getattr(exc, "status_code", None) or DEFAULT_STATUS_CODE
        return cls(message, stack, status_code)


class TransportError(Exception):
    """Raised by APIClient. kind is one of RESPONSE, NO_RESPONSE, REQUEST."""
    RESPONSE = "response"
    NO_RESPONSE = "no_response"
    REQUEST = "request"

    def __init__(self, kind: str, message: str, status_code: Optional[int] = None, data: Any = None):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.status_code = status_code
        self.data = data


class Outcome(NamedTuple):
    ok: bool
    error: Optional[InteractiveError] = None


OK = Outcome(True)

# fixed-shape gate failures
LOGIN_REQUIRED = ("Login is Required", "login is mandatory", 404)
CLIENT_CODE_REQUIRED = ("ClientCode is Required", "clientCode is mandatory", 404)


def failed(message: str, stack: str, status_code: int) -> Outcome:
    return Outcome(False, InteractiveError(message, stack, status_code))
