"""
Redirect-tolerant delivery to web-app sinks (spreadsheet script, mail relay).

Script-hosted endpoints answer a POST with a 302 pointing at the real response,
so a delivery is acknowledged either directly or after exactly one GET hop.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel, Field


__all__ = [
    "DEFAULT_TIMEOUT",
    "SinkDeliveryError",
    "SinkResponse",
    "post_with_redirect",
]

logger = logging.getLogger(__name__)


DEFAULT_TIMEOUT = 30.0


class SinkDeliveryError(Exception):
    """The sink could not be reached or did not acknowledge the payload."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SinkResponse(BaseModel):
    """
    Final 2xx response from a sink.

    Attributes:
        status_code: HTTP status of the final response.
        redirected: Whether one redirect hop was followed.
        text: Raw response body.
    """
    status_code: int
    redirected: bool = False
    text: str = Field(default="")

    def json_body(self) -> Dict[str, Any]:
        """
        Decode the body as a JSON object.

        Raises:
            SinkDeliveryError: If the body is not a JSON object.
        """
        try:
            body = json.loads(self.text)
        except ValueError as e:
            raise SinkDeliveryError(f"Malformed JSON response: {e}", self.status_code) from e
        if not isinstance(body, dict):
            raise SinkDeliveryError("Malformed JSON response: expected an object", self.status_code)
        return body


async def post_with_redirect(
    url: str,
    payload: Dict[str, Any],
    timeout: float = DEFAULT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SinkResponse:
    """
    POST ``payload`` as a ``text/plain`` JSON body, following one redirect.

    Args:
        url: Sink endpoint.
        payload: JSON-serializable body.
        timeout: Request timeout in seconds.
        transport: Custom transport (tests use ``httpx.MockTransport``).

    Returns:
        The final 2xx response.

    Raises:
        SinkDeliveryError: Non-2xx status, redirect without a target, or a
            transport failure.
    """
    body = json.dumps(payload)

    try:
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=False,
            transport=transport,
        ) as client:
            response = await client.post(
                url,
                content=body.encode("utf-8"),
                headers={"Content-Type": "text/plain"},
            )

            if response.is_success:
                return SinkResponse(status_code=response.status_code, text=response.text)

            if 300 <= response.status_code < 400:
                location = response.headers.get("location")
                if not location:
                    raise SinkDeliveryError(
                        f"HTTP {response.status_code}: redirect without location",
                        response.status_code,
                    )

                logger.debug(f"Following sink redirect to {location}")
                follow_up = await client.get(str(response.url.join(location)))
                if not follow_up.is_success:
                    raise SinkDeliveryError(
                        f"HTTP {follow_up.status_code}: {follow_up.reason_phrase}",
                        follow_up.status_code,
                    )
                return SinkResponse(
                    status_code=follow_up.status_code,
                    redirected=True,
                    text=follow_up.text,
                )

            raise SinkDeliveryError(
                f"HTTP {response.status_code}: {response.reason_phrase}",
                response.status_code,
            )

    except httpx.HTTPError as e:
        raise SinkDeliveryError(f"Request to sink failed: {e}") from e
