"""Upstream request body construction."""

import json
from typing import Any

from extension_relay.core.config import CHAT_STYLE, RelayConfig


def build_prompt(question: str, config: RelayConfig, prompt_template: str | None = None) -> str:
    """
    Turn a caller question into the prompt sent upstream.

    A caller template has its first placeholder replaced by the question;
    a template without the placeholder is used verbatim. Without a
    template the configured instruction prefix is prepended.

    Args:
        question: The question text from the extension
        config: Relay configuration (placeholder token and default prefix)
        prompt_template: Optional caller-supplied template

    Returns:
        The prompt string
    """
    if prompt_template:
        return prompt_template.replace(config.placeholder, question, 1)
    return f"{config.default_prompt_prefix}{question}"


def coerce_template(prompt_template: Any) -> str | None:
    """Accept string templates and stringify truthy scalars (123 -> "123"); drop anything else."""
    if isinstance(prompt_template, str):
        return prompt_template
    if prompt_template and isinstance(prompt_template, (bool, int, float)):
        return json.dumps(prompt_template)
    return None


def build_question_body(prompt: str, model: str, config: RelayConfig) -> dict[str, Any]:
    """Shape the upstream body for the configured API style."""
    if config.api_style == CHAT_STYLE:
        return {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
            "max_tokens": config.max_tokens,
            "temperature": config.temperature,
            "stream": False,
        }
    return {"model": model, "inputs": prompt}


def build_transcription_body(audio_base64: str) -> dict[str, Any]:
    """Speech-to-text endpoints take the base64 audio as ``inputs``."""
    return {"inputs": audio_base64}
