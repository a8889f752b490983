"""Assistant layer: request building, transport, chat turns and suggestions."""

from .request_builder import CompletionRequestBuilder, condense_text_to_limit
from .transport import CompletionTransport, select_auth_headers
from .chat_session import ChatSession, ChatTurn, ChatEntry
from .code_suggester import CodeSuggester, CompletionItem

__all__ = [
    "CompletionRequestBuilder",
    "condense_text_to_limit",
    "CompletionTransport",
    "select_auth_headers",
    "ChatSession",
    "ChatTurn",
    "ChatEntry",
    "CodeSuggester",
    "CompletionItem",
]
