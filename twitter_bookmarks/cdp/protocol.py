"""Typed views over raw CDP response frames."""

from dataclasses import dataclass
from typing import Any, Optional

from ..exceptions import InvalidResponseError


def coerce_int(value: Any) -> Optional[int]:
    """Best-effort integer decoding for loosely typed JSON values.

    Accepts ints, integral floats and decimal strings. Booleans are rejected
    so that ``true`` is never mistaken for id 1.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


@dataclass
class NavigateResult:
    """Result of Page.navigate."""

    frame_id: Optional[str] = None
    loader_id: Optional[str] = None
    error_text: Optional[str] = None

    @classmethod
    def from_response(cls, response: dict) -> "NavigateResult":
        result = response.get("result")
        if not isinstance(result, dict):
            result = {}
        return cls(
            frame_id=result.get("frameId"),
            loader_id=result.get("loaderId"),
            error_text=result.get("errorText"),
        )


@dataclass
class EvaluateResult:
    """Decoded Runtime.evaluate envelope.

    Attributes:
        value: Value returned by the expression (None when undefined)
        type: RemoteObject type reported by Chrome
        exception_text: Exception text when the expression threw
    """

    value: Any = None
    type: Optional[str] = None
    exception_text: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.exception_text is not None

    @classmethod
    def from_response(cls, response: dict) -> "EvaluateResult":
        """Decode a full response frame from Runtime.evaluate.

        Raises:
            InvalidResponseError: If the envelope or result object is missing
        """
        envelope = response.get("result")
        if not isinstance(envelope, dict):
            raise InvalidResponseError(
                "Missing Runtime.evaluate envelope", method="Runtime.evaluate"
            )

        exception_details = envelope.get("exceptionDetails")
        if isinstance(exception_details, dict):
            text = exception_details.get("text")
            exception = exception_details.get("exception")
            if isinstance(exception, dict) and exception.get("description"):
                text = f"{text or 'Uncaught'}: {exception['description']}"
            return cls(
                exception_text=text or "Unknown JavaScript exception",
            )

        remote_object = envelope.get("result")
        if not isinstance(remote_object, dict):
            raise InvalidResponseError(
                "Missing Runtime.evaluate result object", method="Runtime.evaluate"
            )

        return cls(
            value=remote_object.get("value"),
            type=remote_object.get("type"),
        )
