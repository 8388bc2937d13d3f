"""
Error taxonomy for the taste-graph gateway.

  AuthWarning   missing API key. Logged and warned, never raised.
  HttpError     upstream answered with a non-2xx status. Fatal to the call.
  NetworkError  the request never got an answer (DNS, connect, reset...).
  ShapeError    payload did not have the expected shape. Raised inside the
                normalizers and coerced to an empty result by the gateway.
"""

from __future__ import annotations


class AuthWarning(UserWarning):
    pass


class TasteGraphError(Exception):
    """Base class for gateway failures that reach callers."""


class HttpError(TasteGraphError):
    def __init__(self, status_code: int, body: str, url: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.url = url
        super().__init__(f"Taste graph API error: {status_code} - {body[:200]}")


class NetworkError(TasteGraphError):
    def __init__(self, message: str, url: str = "") -> None:
        self.url = url
        super().__init__(message)


class ShapeError(TasteGraphError):
    pass
