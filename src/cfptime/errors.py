from __future__ import annotations


class CFPTimeError(Exception):
    """Base class for every failure raised by the client."""


class TransportError(CFPTimeError):
    """The request could not be built or sent (after retries, if any)."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StatusError(CFPTimeError):
    """The API answered with a status other than 200."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"CFPTime API returned status {status_code}: {body}")
        self.status_code = status_code
        self.body = body


class DecodeError(CFPTimeError):
    """A 200 response whose body does not match the expected record shape."""

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.body = body
