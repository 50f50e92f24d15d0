"""External service clients."""

from .openai_client import build_openai_client
from .speech import SpeechSynthesisError, synthesize_speech, to_data_url

__all__ = ["build_openai_client", "SpeechSynthesisError", "synthesize_speech", "to_data_url"]
