"""Text generation service used to propose new filenames."""

import time
from typing import Protocol

from langchain.chat_models.base import BaseChatModel
from langchain.messages import AIMessage, HumanMessage, SystemMessage
from langsmith import traceable
from rich.console import Console

from viberenamer.errors import ServiceError
from viberenamer.tokens import TokenUsage


console = Console(soft_wrap=True)

# Sampling temperature for the whole run. Maximal, to favor varied phrasing.
DEFAULT_TEMPERATURE = 1.0


class GenerationService(Protocol):
    """Anything that turns fixed instructions plus a request into a reply."""

    def submit(self, instructions: str, request: str, temperature: float) -> str: ...


class LangChainGenerationService:
    """Generation service backed by a LangChain chat model.

    Earlier exchanges are replayed while the instructions stay the same, so a
    follow-up request can refine the previous reply. Tokens spent across the
    run are collected in `usage`.
    """

    def __init__(self, llm: BaseChatModel) -> None:
        """Initialize the service.

        Args:
            llm: LangChain chat model used for generation.
        """
        self.llm = llm
        self._instructions: str | None = None
        self._history: list[HumanMessage | AIMessage] = []
        self.usage = TokenUsage()

    @traceable
    def submit(self, instructions: str, request: str, temperature: float = DEFAULT_TEMPERATURE) -> str:
        """Send a request and return the text of the reply.

        Args:
            instructions: Fixed system instructions for the run.
            request: The user's current renaming request.
            temperature: Sampling temperature.

        Returns:
            The raw reply text.

        Raises:
            ServiceError: If the model call fails or returns no text.
        """
        if instructions != self._instructions:
            self._instructions = instructions
            self._history = []

        messages = [SystemMessage(content=instructions), *self._history, HumanMessage(content=request)]

        console.print("  [dim]Invoking LLM for rename suggestions...[/dim]")
        start_time = time.time()
        try:
            response = self.llm.bind(temperature=temperature).invoke(messages)
        except Exception as e:
            raise ServiceError(f"Language model error: {e}") from e

        text = str(response.text).strip()
        self.usage.record(
            getattr(response, "usage_metadata", None),
            prompt_text="".join(str(message.content) for message in messages),
            reply_text=text,
        )
        if not text:
            raise ServiceError("Language model returned an empty response.")

        elapsed = time.time() - start_time
        console.print(f"  [green]Completed in {elapsed:.1f}s[/green]")

        self._history.extend([HumanMessage(content=request), AIMessage(content=text)])
        return text
