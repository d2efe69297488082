"""
estate_match/engine/engine_client.py

EngineClient wraps the OpenAI Chat Completions API behind the two operations the
rest of the package needs:

  - generate_structured: one forced function call whose parameters are the
    result JSON Schema, returning the raw JSON argument text.
  - start_chat: an EngineChatSession that keeps its own message history so
    follow-up turns carry prior context.

Construct one client at process start and pass it to `analyze` and
`create_chat`. Nothing here is cached at module level.
"""

import os
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from openai import OpenAI, OpenAIError

from estate_match.errors import ConfigurationError, EngineError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o"
DEFAULT_TEMPERATURE = 0.2
# Extraction must stay close to deterministic
MAX_TEMPERATURE = 0.2

ENV_PATH = Path(__file__).parents[2] / ".env"


class EngineClient:
    """
    Thin, explicitly constructed handle on the generative engine.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        client: Optional[Any] = None,
    ):
        """
        Initialize the EngineClient.

        Args:
            api_key:     OpenAI API key; falls back to OPENAI_API_KEY (.env is loaded first).
            model:       Model name; falls back to ESTATE_MATCH_MODEL, then "gpt-4o".
            temperature: Sampling temperature in [0, 0.2]; falls back to
                         ESTATE_MATCH_TEMPERATURE, then 0.2.
            client:      Pre-built OpenAI-compatible client (used by tests).
        """
        load_dotenv(ENV_PATH)

        if api_key:
            self.api_key = api_key
        elif os.getenv("OPENAI_API_KEY"):
            self.api_key = os.getenv("OPENAI_API_KEY")  # type: ignore
        else:
            raise ConfigurationError(
                f"OpenAI API key must be provided or set as OPENAI_API_KEY (checked {ENV_PATH})."
            )

        self.model = model or os.getenv("ESTATE_MATCH_MODEL") or DEFAULT_MODEL

        if temperature is None:
            raw_temp = os.getenv("ESTATE_MATCH_TEMPERATURE")
            try:
                temperature = float(raw_temp) if raw_temp else DEFAULT_TEMPERATURE
            except ValueError as e:
                raise ConfigurationError(
                    f"ESTATE_MATCH_TEMPERATURE must be a number, got {raw_temp!r}"
                ) from e
        if not 0.0 <= temperature <= MAX_TEMPERATURE:
            raise ConfigurationError(
                f"Temperature must be between 0 and {MAX_TEMPERATURE}, got {temperature}"
            )
        self.temperature = temperature

        self.client = client if client is not None else OpenAI(api_key=self.api_key)

    def generate_structured(
        self,
        instructions: str,
        prompt: str,
        function_def: Dict[str, Any],
    ) -> str:
        """
        Ask the engine for a single JSON object matching `function_def["parameters"]`.

        Returns:
            The raw argument text of the forced function call (expected to be JSON).

        Raises:
            EngineError: If the API call fails or produces no text.
        """
        messages = [
            {"role": "system", "content": instructions},
            {"role": "user", "content": prompt},
        ]
        logger.info("Requesting structured analysis from %s (temperature=%s)", self.model, self.temperature)
        try:
            resp = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                tools=[{"type": "function", "function": function_def}],
                tool_choice={"type": "function", "function": {"name": function_def["name"]}},
                temperature=self.temperature,
            )
        except OpenAIError as e:
            logger.error("Engine call failed: %s", e)
            raise EngineError(f"Engine call failed: {e}") from e

        choices = getattr(resp, "choices", None) or []
        if not choices:
            raise EngineError("No response generated by the engine.")
        msg = choices[0].message
        tool_calls = getattr(msg, "tool_calls", None) or []
        if tool_calls:
            raw = tool_calls[0].function.arguments
        else:
            # Some models answer in content despite the forced tool choice
            raw = msg.content

        if not raw or not raw.strip():
            raise EngineError("No response generated by the engine.")
        return raw

    def start_chat(self, instructions: str) -> "EngineChatSession":
        """Open a new conversational session seeded with `instructions`."""
        return EngineChatSession(self, instructions)


class EngineChatSession:
    """
    Engine-side conversation state: the system instructions plus every
    completed user/assistant exchange.
    """

    def __init__(self, engine: EngineClient, instructions: str):
        self.engine = engine
        self.messages: List[Dict[str, Any]] = [
            {"role": "system", "content": instructions}
        ]

    def send(self, text: str) -> str:
        """
        Send one user turn and return the assistant's reply.

        A failed exchange leaves the history unchanged.

        Raises:
            EngineError: If the API call fails or the reply is empty.
        """
        self.messages.append({"role": "user", "content": text})
        try:
            resp = self.engine.client.chat.completions.create(
                model=self.engine.model,
                messages=self.messages,
                temperature=self.engine.temperature,
            )
        except OpenAIError as e:
            self.messages.pop()
            logger.error("Chat turn failed: %s", e)
            raise EngineError(f"Chat turn failed: {e}") from e

        choices = getattr(resp, "choices", None) or []
        reply = choices[0].message.content if choices else None
        if not reply:
            self.messages.pop()
            raise EngineError("No reply generated by the engine.")

        self.messages.append({"role": "assistant", "content": reply})
        return reply

    def get_history(self) -> List[Dict[str, Any]]:
        """Non-system messages, for debugging or testing."""
        return [
            {"role": m["role"], "content": m.get("content", "")}
            for m in self.messages if m["role"] != "system"
        ]
