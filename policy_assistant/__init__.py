"""policy_assistant package

Authoring assistant for API-gateway policy documents.

Purpose:
    Validate policy XML against an attribute allow-list with precise
    line/column diagnostics, stream chat replies from an OpenAI-compatible
    endpoint and offer inline code suggestions.

Public API (re-exported):
    - Version: ``__version__``
    - Errors: :class:`AssistantError`, :class:`ErrorCode`
    - Validation: :func:`validate`, :class:`AttributeValidator`
    - Assistant: :class:`ChatSession`, :class:`CodeSuggester`,
      :class:`CompletionTransport`, :class:`CompletionRequestBuilder`
"""

__version__ = "0.1.0"

from .base.errors import AssistantError, ErrorCode
from .validation import AttributeValidator, validate
from .assistant import ChatSession, CodeSuggester, CompletionRequestBuilder, CompletionTransport

__all__ = [
    "__version__",
    "AssistantError",
    "ErrorCode",
    "AttributeValidator",
    "validate",
    "ChatSession",
    "CodeSuggester",
    "CompletionRequestBuilder",
    "CompletionTransport",
]
