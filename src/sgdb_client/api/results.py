"""
Response result types produced by the transport.

Every request ends in exactly one of ``Success`` or ``Failure``; callers
branch on ``result.success`` and never see a transport exception.
"""

from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict

from sgdb_client.api.errors import FailureKind

TRANSPORT_ERROR_STATUS = 0


class Success(BaseModel):
    """HTTP 200 with a parsed JSON body."""

    model_config = ConfigDict(frozen=True)

    success: Literal[True] = True
    status_code: int
    payload: Any
    endpoint: str
    duration_ms: float | None = None


class Failure(BaseModel):
    """
    Any request that did not end in HTTP 200.

    ``status_code`` is 0 when the request never got a response
    (timeout, refused connection, broken read). Otherwise it is the
    HTTP status and ``payload`` holds the parsed error body, if any.
    """

    model_config = ConfigDict(frozen=True)

    success: Literal[False] = False
    status_code: int
    reason: str
    payload: Any = None
    endpoint: str
    duration_ms: float | None = None

    @property
    def kind(self) -> FailureKind:
        """Whether the failure came from the network or from the API."""
        if self.status_code == TRANSPORT_ERROR_STATUS:
            return FailureKind.TRANSPORT
        return FailureKind.API

    @property
    def errors(self) -> list[str]:
        """Server-reported error messages, empty when none were sent."""
        if not isinstance(self.payload, dict):
            return []
        errors = self.payload.get("errors") or []
        if not isinstance(errors, list):
            return [str(errors)]
        return [str(e) for e in errors]


ResponseResult = Union[Success, Failure]


def is_envelope_success(result: ResponseResult) -> bool:
    """
    Check both the HTTP outcome and the API envelope.

    SteamGridDB wraps every body in ``{"success": bool, "data": ...}``;
    a 200 with ``success: false`` is still a failed call.
    """
    if not result.success:
        return False
    payload = result.payload
    return isinstance(payload, dict) and payload.get("success") is True
