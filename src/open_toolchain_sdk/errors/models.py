"""Structured error envelopes returned by the API."""

import json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from open_toolchain_sdk.transport.request import DetailedResponse

PROBLEM_FIELDS = frozenset({"type", "title", "status", "detail", "instance"})


@dataclass
class ErrorDetail:
    """Error envelope parsed from a failed response.

    Understands the IBM Cloud shape::

        {"errors": [{"code": "...", "message": "...", "more_info": "..."}], "trace": "..."}

    the simpler ``{"error": "..."}`` / ``{"message": "..."}`` shapes some DevOps
    endpoints use, and RFC 7807 problem details
    (https://datatracker.ietf.org/doc/html/rfc7807).
    """

    message: str | None = None
    code: str | None = None
    trace: str | None = None
    more_info: str | None = None
    errors: list[dict[str, Any]] | None = None

    # RFC 7807 members
    type: str | None = None
    title: str | None = None
    status: int | None = None
    detail: str | None = None
    instance: str | None = None

    # Anything else the server sent
    extensions: dict[str, Any] | None = None

    @classmethod
    def from_response(cls, response: "DetailedResponse") -> "ErrorDetail | None":
        """Parse an error envelope from a response.

        Args:
            response: The failed response.

        Returns:
            ErrorDetail, or None when the body is not a recognisable JSON envelope.
        """
        if not response.body:
            return None
        try:
            data = json.loads(response.body)
        except (ValueError, UnicodeDecodeError):
            return None
        if not isinstance(data, dict):
            return None
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ErrorDetail | None":
        errors = data.get("errors")
        if isinstance(errors, list) and errors and isinstance(errors[0], dict):
            first = errors[0]
            known = {"errors", "trace"}
            return cls(
                message=first.get("message"),
                code=_as_str(first.get("code")),
                more_info=first.get("more_info"),
                trace=data.get("trace"),
                errors=errors,
                extensions=_extensions(data, known),
            )

        if any(field in data for field in PROBLEM_FIELDS):
            return cls(
                message=data.get("detail") or data.get("title"),
                type=data.get("type"),
                title=data.get("title"),
                status=data.get("status"),
                detail=data.get("detail"),
                instance=data.get("instance"),
                extensions=_extensions(data, PROBLEM_FIELDS),
            )

        for key in ("error", "message", "errorMessage", "error_description"):
            value = data.get(key)
            if isinstance(value, str) and value:
                return cls(
                    message=value,
                    code=_as_str(data.get("code") or data.get("errorCode")),
                    trace=data.get("trace"),
                    extensions=_extensions(data, {key, "code", "errorCode", "trace"}),
                )

        return None

    def to_exception_message(self) -> str:
        """Convert the envelope to an exception message."""
        lines = []

        if self.title:
            lines.append(self.title)
            if self.detail and self.detail != self.title:
                lines.append(self.detail)
        elif self.message:
            lines.append(self.message)

        if self.code:
            lines.append(f"Code: {self.code}")
        if self.type:
            lines.append(f"Problem Type: {self.type}")
        if self.instance:
            lines.append(f"Instance: {self.instance}")
        if self.trace:
            lines.append(f"Trace: {self.trace}")
        if self.more_info:
            lines.append(f"More info: {self.more_info}")

        return "\n".join(lines) if lines else "Unknown API error"


def _as_str(value: Any) -> str | None:
    return None if value is None else str(value)


def _extensions(data: dict[str, Any], known: set[str] | frozenset[str]) -> dict[str, Any] | None:
    extra = {k: v for k, v in data.items() if k not in known}
    return extra or None
