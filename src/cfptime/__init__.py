"""cfptime: an async client for the CFPTime conference directory API.

This package wraps the public, read-only CFPTime HTTP API
(https://api.cfptime.org/api/docs) and decodes its JSON responses into
typed :class:`Conference` records. A small command-line front end is
included for browsing CFPs from the terminal.
"""

from .client import CFPTime
from .config import DEFAULT_BASE_URL, ClientConfig
from .errors import CFPTimeError, DecodeError, StatusError, TransportError
from .models import Conference

__all__ = [
    "__version__",
    "CFPTime",
    "CFPTimeError",
    "ClientConfig",
    "Conference",
    "DecodeError",
    "DEFAULT_BASE_URL",
    "StatusError",
    "TransportError",
]
__version__ = "0.1.0"
