"""
Middleware Errors
Exception hierarchy shared by the Shopify client, the services and the routes
"""
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

class MiddlewareError(Exception):
    """Base error; rendered as {"error": message, **payload}"""

    status_code = 500

    def __init__(self, message: str, payload: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.payload: Dict[str, Any] = dict(payload or {})

    def to_response(self, message: Optional[str] = None) -> JSONResponse:
        """
        Build the JSON response for this error

        Args:
            message: Short user-facing message replacing the internal one.
                The internal message is kept under "detail".
        """
        content: Dict[str, Any] = {"error": message or self.message}
        if message and message != self.message:
            content["detail"] = self.message
        content.update(self.payload)
        return JSONResponse(status_code=self.status_code, content=content)

class UpstreamError(MiddlewareError):
    """Anything that went wrong talking to Shopify"""
    status_code = 500

class TransportError(UpstreamError):
    """The outbound call failed or timed out"""

class RemoteRejection(UpstreamError):
    """Shopify answered with 4xx/5xx, GraphQL errors or userErrors"""

    def __init__(
        self,
        message: str,
        remote_status: Optional[int] = None,
        errors: Any = None,
        payload: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, payload)
        self.remote_status = remote_status
        self.errors = errors

class SlotsExhausted(MiddlewareError):
    """All five Kreation slots of the customer are occupied"""
    status_code = 400

    def __init__(self, payload: Optional[Dict[str, Any]] = None):
        super().__init__("Alle Slots belegt", payload)

class ValidationError(MiddlewareError):
    """A required request field is missing"""
    status_code = 400

class KreationNotFound(MiddlewareError):
    """A referenced Kreation could not be resolved by any strategy"""
    status_code = 404

class ForeignKreation(MiddlewareError):
    """The Kreation to update is not linked to the given customer"""
    status_code = 403
