"""Bearer token lookup for viewer requests."""

from typing import Optional

from starlette.requests import Request


def extract_bearer_token(request: Request, cookie_name: Optional[str] = None) -> Optional[str]:
    """
    Return the caller's access token, if any.

    The ``Authorization: Bearer`` header wins over the session cookie.
    Tokens are passed through to the backend unchecked.
    """
    header = request.headers.get("authorization", "")
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials.strip():
        return credentials.strip()

    if cookie_name:
        cookie = request.cookies.get(cookie_name)
        if cookie and cookie.strip():
            return cookie.strip()
    return None
