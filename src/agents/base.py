"""
Base agent class for the LLM collaborators.

The collaborators receive parser output ({id, text} segments and
{id, title, text} feedback blocks) and return JSON mappings keyed by those
ids. Calls go through LiteLLM, so any supported provider works.
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
import litellm

# Load .env file from project root
_env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(_env_path)


@dataclass
class AgentResult:
    """Result from an agent execution."""

    success: bool
    output: Any
    errors: list[str] = field(default_factory=list)
    metrics: dict = field(default_factory=dict)


# Default model - any LiteLLM model identifier works
# Examples:
#   - "gpt-4o" (OpenAI GPT-4o)
#   - "gemini/gemini-2.0-flash" (Google Gemini 2.0 Flash)
#   - "claude-sonnet-4-20250514" (Anthropic Claude)
DEFAULT_MODEL = "gpt-4o"


def extract_json_object(response: Optional[str]) -> Optional[dict]:
    """
    Pull the outermost JSON object out of an LLM response.

    Returns None when there is no parseable object.
    """
    if not response:
        return None
    start = response.find("{")
    end = response.rfind("}") + 1
    if start == -1 or end == 0:
        return None
    try:
        data = json.loads(response[start:end])
    except json.JSONDecodeError:
        return None
    return data if isinstance(data, dict) else None


def coerce_id_list(value: Any) -> list[int]:
    """Keep the integer ids of a JSON array; anything else becomes []."""
    if not isinstance(value, list):
        return []
    ids: list[int] = []
    for item in value:
        if isinstance(item, bool):
            continue
        if isinstance(item, int):
            ids.append(item)
        elif isinstance(item, str) and item.strip().isdigit():
            ids.append(int(item))
    return ids


class BaseAgent(ABC):
    """
    Base class for collaborator agents.

    Subclasses build the JSON request and parse the JSON response; the
    completion call and error capture live here.
    """

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        max_tokens: int = 2048,
        temperature: float = 0.0,
        **kwargs: Any,
    ) -> None:
        """
        Initialize agent.

        Args:
            model: LiteLLM model identifier (e.g., "gpt-4o")
            max_tokens: Max tokens in response
            temperature: Sampling temperature
            **kwargs: Additional arguments for litellm.completion
        """
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.extra_params = kwargs

    @abstractmethod
    def get_system_prompt(self) -> str:
        """Return the system prompt for this agent."""
        pass

    @abstractmethod
    def format_input(self, **kwargs: Any) -> str:
        """Format input data into a user prompt."""
        pass

    @abstractmethod
    def parse_output(self, response: str) -> Any:
        """Parse LLM response into structured output."""
        pass

    def execute(self, **kwargs: Any) -> AgentResult:
        """
        Execute the agent.

        Args:
            **kwargs: Input data for the agent

        Returns:
            AgentResult with parsed output, or the captured error
        """
        try:
            messages = [
                {"role": "system", "content": self.get_system_prompt()},
                {"role": "user", "content": self.format_input(**kwargs)},
            ]

            response = litellm.completion(
                model=self.model,
                messages=messages,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                response_format={"type": "json_object"},
                **self.extra_params,
            )

            response_text = response.choices[0].message.content
            output = self.parse_output(response_text)

            return AgentResult(
                success=True,
                output=output,
                metrics={
                    "input_tokens": response.usage.prompt_tokens,
                    "output_tokens": response.usage.completion_tokens,
                    "model": response.model,
                },
            )

        except Exception as e:
            return AgentResult(
                success=False,
                output=None,
                errors=[str(e)],
            )
