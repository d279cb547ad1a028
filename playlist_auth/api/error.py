"""
API edge errors

Routers raise these from use case `Error` values; the app's exception
handlers render `to_dict()` as the `{"error": ...}` response body.
"""

from fastapi import status

from playlist_auth.libs.result import Error


class ClientError(Exception):
    """4xx: the caller can fix the request"""

    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)

    def to_dict(self) -> dict:
        body = {"code": self.base_error.code, "message": self.base_error.message}
        if self.base_error.details:
            body["fields"] = self.base_error.details
        return body


class ServerError(Exception):
    """500: message and details stay in the logs"""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)

    def to_dict(self) -> dict:
        return {"code": self.base_error.code, "message": "Internal server error"}
