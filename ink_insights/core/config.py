import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

import ink_insights.insights.prompts.openai_prompts_templates as prompts
from ink_insights.insights.errors import ConfigError

load_dotenv()  # Load from .env file

DEFAULT_INSIGHTS_MODEL = "gpt-4o-mini"
DEFAULT_INSIGHTS_TEMPERATURE = 0.6
DEFAULT_INSIGHTS_MAX_TOKENS = 350


class InsightConfig(BaseModel):
    """Deployment-time settings for weekly insight generation.

    Built once at process start and handed to the OpenAI client explicitly;
    individual requests cannot override any of these values.
    """

    api_key: Optional[str] = None
    model: str = DEFAULT_INSIGHTS_MODEL
    temperature: float = DEFAULT_INSIGHTS_TEMPERATURE
    max_output_tokens: int = DEFAULT_INSIGHTS_MAX_TOKENS
    system_message: str = prompts.SYSTEM_MESSAGE
    user_message_template: str = prompts.USER_MESSAGE_TEMPLATE

    class Config:
        frozen = True


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ConfigError(f"Invalid value for {name}: {raw!r}")


def load_insight_config() -> InsightConfig:
    """
    Reads the insight settings from the environment.

    Returns:
        InsightConfig: Immutable configuration value.

    Raises:
        ConfigError: If a numeric setting cannot be parsed.
    """
    return InsightConfig(
        api_key=os.getenv("OPENAI_API_KEY") or None,
        model=os.getenv("OPENAI_INSIGHTS_MODEL") or DEFAULT_INSIGHTS_MODEL,
        temperature=_env_number("OPENAI_INSIGHTS_TEMPERATURE", DEFAULT_INSIGHTS_TEMPERATURE, float),
        max_output_tokens=_env_number("OPENAI_INSIGHTS_MAX_TOKENS", DEFAULT_INSIGHTS_MAX_TOKENS, int),
    )


@lru_cache(maxsize=None)
def get_insight_config() -> InsightConfig:
    """Process-wide config, constructed on first use."""
    return load_insight_config()
