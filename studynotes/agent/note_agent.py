"""Agno note-taking agent that turns one chunk of text into markdown notes.

Each chunk gets its own short-lived Agent: the system prompt names the
section position, and runs for different chunks happen concurrently, so
they must not share run state. The OpenAI model settings are shared.

Failures are degraded to a placeholder so that one bad section does not
abort the whole document.
"""

import logging

from agno.agent import Agent
from agno.models.openai import OpenAIChat

from studynotes.agent.config import GeneratorConfig, get_generator_config
from studynotes.models.notes import Chunk, ProcessedChunk

logger = logging.getLogger(__name__)

NOTE_GUIDELINES = [
    "Use markdown formatting.",
    "Bold important terms and concepts using **term**.",
    "Use headers (# for main sections, ## for subsections).",
    "Create bullet points for key ideas.",
    "Include relevant examples.",
    "Maintain consistency with other sections.",
    "Add a brief summary at the end of each section.",
]


def failure_placeholder(sequence_index: int) -> str:
    """Return the notes text used when a section could not be generated."""
    return f"Error processing section {sequence_index}. Please try again."


class NoteAgentService:
    """Service generating study notes for text chunks.

    Wraps Agno's Agent with:
    - A fixed note-taking prompt per section
    - Bounded-length completions from the configured model
    - Placeholder notes instead of exceptions on failure
    """

    def __init__(self, config: GeneratorConfig | None = None) -> None:
        """Initialize the note agent service.

        Args:
            config: Optional generator configuration.
                    Loads from environment if not provided.
        """
        self._config = config or get_generator_config()

    @property
    def config(self) -> GeneratorConfig:
        return self._config

    def _create_model(self) -> OpenAIChat:
        return OpenAIChat(
            id=self._config.model_name,
            api_key=self._config.api_key,
            base_url=self._config.base_url,
            temperature=self._config.temperature,
            max_tokens=self._config.max_tokens,
        )

    def _create_agent(self, sequence_index: int, total_chunks: int) -> Agent:
        """Create an agent prompted for one section of the document.

        Args:
            sequence_index: 1-based section number.
            total_chunks: Number of sections in the document.

        Returns:
            Configured Agent.
        """
        return Agent(
            model=self._create_model(),
            description=(
                "You are an expert note-taker. Generate detailed, well-structured "
                f"study notes for section {sequence_index} of {total_chunks} of a document."
            ),
            instructions=NOTE_GUIDELINES,
            markdown=True,
        )

    async def process(self, chunk: Chunk, total_chunks: int) -> ProcessedChunk:
        """Generate notes for a single chunk.

        Makes exactly one model call. Never raises for model failures.

        Args:
            chunk: The chunk to summarize.
            total_chunks: Number of chunks in the document.

        Returns:
            ProcessedChunk with the model output, or a placeholder if the
            call failed or returned nothing.
        """
        agent = self._create_agent(chunk.sequence_index, total_chunks)

        try:
            response = await agent.arun(f"Generate notes for this section:\n\n{chunk.text}")
        except Exception as e:
            logger.error(f"Error processing section {chunk.sequence_index}/{total_chunks}: {e}")
            return ProcessedChunk(
                notes=failure_placeholder(chunk.sequence_index),
                sequence_index=chunk.sequence_index,
            )

        content = getattr(response, "content", None)
        if not isinstance(content, str) or not content.strip():
            logger.warning(f"Empty response for section {chunk.sequence_index}/{total_chunks}")
            return ProcessedChunk(
                notes=failure_placeholder(chunk.sequence_index),
                sequence_index=chunk.sequence_index,
            )

        return ProcessedChunk(notes=content, sequence_index=chunk.sequence_index)


# Module-level singleton instance
_note_agent_service: NoteAgentService | None = None


def get_note_agent_service() -> NoteAgentService:
    """Get or create the global note agent service.

    Returns:
        The NoteAgentService instance.
    """
    global _note_agent_service
    if _note_agent_service is None:
        _note_agent_service = NoteAgentService()
    return _note_agent_service
