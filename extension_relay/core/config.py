"""Immutable configuration for the relay core library."""

from dataclasses import dataclass

INFERENCE_STYLE = "inference"
CHAT_STYLE = "chat"
API_STYLES = (INFERENCE_STYLE, CHAT_STYLE)

DEFAULT_INFERENCE_URL = "https://router.huggingface.co/hf-inference"
DEFAULT_CHAT_URL = "https://router.huggingface.co/v1/chat/completions"
DEFAULT_TRANSCRIBE_URL = "https://router.huggingface.co/hf-inference/models/openai/whisper-large-v3"
DEFAULT_MODEL = "meta-llama/Llama-2-7b-chat-hf"
DEFAULT_PROMPT_PREFIX = "Answer the following interview question very concisely:\n"
QUESTION_PLACEHOLDER = "{question}"


def default_upstream_url(api_style: str) -> str:
    """Return the stock upstream endpoint for an API style."""
    return DEFAULT_CHAT_URL if api_style == CHAT_STYLE else DEFAULT_INFERENCE_URL


@dataclass(frozen=True)
class RelayConfig:
    """Configuration for the extension relay core library.

    Built once at startup and shared read-only between requests.

    Args:
        api_key: Bearer credential sent to the inference API (None = not configured)
        api_style: Upstream request shape - "inference" ({model, inputs}) or "chat" (messages)
        upstream_url: Endpoint for question requests; defaults to the stock URL of api_style
        transcribe_url: Speech-to-text endpoint for transcription requests
        default_model: Model used when the caller does not name one
        max_tokens: Completion budget for chat-style requests
        temperature: Sampling temperature for chat-style requests
        default_prompt_prefix: Instruction prepended to the question when no template is given
        placeholder: Token in caller templates that is replaced by the question
        timeout_s: Optional total timeout for upstream requests (None = wait indefinitely)
        connect_timeout_s: Optional connection timeout for upstream requests
    """

    api_key: str | None = None
    api_style: str = INFERENCE_STYLE
    upstream_url: str | None = None
    transcribe_url: str = DEFAULT_TRANSCRIBE_URL
    default_model: str = DEFAULT_MODEL
    max_tokens: int = 512
    temperature: float = 0.2
    default_prompt_prefix: str = DEFAULT_PROMPT_PREFIX
    placeholder: str = QUESTION_PLACEHOLDER
    timeout_s: float | None = None
    connect_timeout_s: float | None = None

    def __post_init__(self) -> None:
        if self.api_style not in API_STYLES:
            raise ValueError(f"api_style must be one of {API_STYLES}, got {self.api_style!r}")

    @property
    def has_credential(self) -> bool:
        """True when a non-empty upstream credential is configured."""
        return bool(self.api_key)

    @property
    def effective_upstream_url(self) -> str:
        """Return the configured question endpoint, or the style's stock URL."""
        return self.upstream_url or default_upstream_url(self.api_style)
