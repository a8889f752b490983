"""Cooperative cancellation primitives (public API facade).

Notes
-----
- ``CancellationToken`` signals cancellation across a streaming chat turn.
- ``CancelledError`` is raised by operations that observe a cancel request.
"""

from .cancellation_parts.cancelled_error import CancelledError
from .cancellation_parts.cancellation_token import CancellationToken

__all__ = ["CancellationToken", "CancelledError"]
