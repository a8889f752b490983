"""Editor integration: the editor surface contract and the policy editor session."""

from .interfaces import EditorSurface, Unsubscribe
from .session import PolicyEditorSession, initial_content

__all__ = ["EditorSurface", "PolicyEditorSession", "Unsubscribe", "initial_content"]
