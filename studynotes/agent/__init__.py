"""Agno agent logic for note generation.

Responsibilities:
    - Model configuration (OpenAI or OpenAI-compatible APIs)
    - One note-taking prompt per document section
    - Placeholder notes when a section fails

Maintains clean separation from the HTTP layer and the batching logic.
"""

from studynotes.agent.config import GeneratorConfig, get_generator_config
from studynotes.agent.note_agent import (
    NoteAgentService,
    failure_placeholder,
    get_note_agent_service,
)

__all__ = [
    "GeneratorConfig",
    "NoteAgentService",
    "failure_placeholder",
    "get_generator_config",
    "get_note_agent_service",
]
