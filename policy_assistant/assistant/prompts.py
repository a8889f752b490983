"""Prompt texts and templates for chat turns and code suggestions."""
from __future__ import annotations

from ..catalog.policy_snippets import render_policy_reference

CHAT_SYSTEM_PROMPT = (
    "You are an AI assistant that helps with coding and Azure API Management policy development. "
    "Provide helpful suggestions and answers based on the code context and user messages."
)
SUGGESTION_SYSTEM_PROMPT = "You are a helpful assistant that provides code suggestions."

CHAT_USER_TEMPLATE = "Here's the current code:\n\n{document}\n\nUser message: {prompt}"
SUGGESTION_USER_TEMPLATE = "Generate code suggestion for the following prompt:\n\n{prompt}\n\nContext:\n{document}"

PROPOSE_FIX_MESSAGE = "Help me review the code for any syntax errors."

_SUGGESTION_CONSIDERATIONS = (
    "Only reply with the code snippet, no comments, no explanations.",
    "Only generate code that can be inserted as-is at the current position. Don't generate any surrounding code.",
    "Ensure the generated code is syntactically correct and fits well within the existing code structure.",
    "Use appropriate variable names, function names, and coding conventions based on the surrounding code.",
    "Consider the context and purpose of the code snippet to provide meaningful suggestions.",
    "If the prompt is ambiguous or lacks sufficient context, provide a best-effort suggestion "
    "or indicate that more information is needed.",
)


def format_chat_message(prompt: str, document: str) -> str:
    return CHAT_USER_TEMPLATE.format(document=document, prompt=prompt)


def format_suggestion_message(prompt: str, document: str) -> str:
    return SUGGESTION_USER_TEMPLATE.format(prompt=prompt, document=document)


def format_suggestion_prompt(
    prefix: str,
    document: str,
    surrounding_code: str,
    previous_line: str,
    next_line: str,
) -> str:
    """Build the detailed prompt sent for an inline code suggestion."""
    considerations = "\n".join(f"- {item}" for item in _SUGGESTION_CONSIDERATIONS)
    return (
        "Generate code suggestion for the following prompt in the context of the provided code snippet:\n\n"
        "Language: XML (Azure API Management policy code)\n\n"
        f"Prompt: {prefix}\n\n"
        f"Context: {document}\n\n"
        f"Surrounding Code: {surrounding_code}\n\n"
        f"Previous Line: {previous_line}\n\n"
        f"Next Line: {next_line}\n\n"
        f"Considerations:\n{considerations}\n\n"
        "API Management policy (XML) may contain the following policies:\n"
        f"{render_policy_reference()}\n"
    )


__all__ = [
    "CHAT_SYSTEM_PROMPT",
    "SUGGESTION_SYSTEM_PROMPT",
    "CHAT_USER_TEMPLATE",
    "SUGGESTION_USER_TEMPLATE",
    "PROPOSE_FIX_MESSAGE",
    "format_chat_message",
    "format_suggestion_message",
    "format_suggestion_prompt",
]
