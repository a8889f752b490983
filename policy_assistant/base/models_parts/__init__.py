"""Domain model parts; import from ``policy_assistant.base.models``."""
