"""Text-to-speech for Bulgarian sentences."""

from __future__ import annotations

import base64
import logging

from openai import AsyncOpenAI


LOGGER = logging.getLogger(__name__)

AUDIO_MIME_TYPE = "audio/mpeg"
SPEECH_INSTRUCTIONS = "Read the Bulgarian sentence slowly and clearly, like a language teacher."


class SpeechSynthesisError(RuntimeError):
    """Raised when the speech endpoint returns no usable audio."""


async def synthesize_speech(client: AsyncOpenAI, text: str, model: str, voice: str) -> bytes:
    """Return MP3 audio for ``text``."""
    if not text.strip():
        raise SpeechSynthesisError("Cannot synthesize speech for empty text.")

    response = await client.audio.speech.create(
        model=model,
        voice=voice,
        input=text,
        instructions=SPEECH_INSTRUCTIONS,
        response_format="mp3",
    )
    audio = response.content
    if not audio:
        raise SpeechSynthesisError("Speech endpoint returned an empty payload.")
    LOGGER.debug("Synthesized %s bytes of audio with %s/%s.", len(audio), model, voice)
    return audio


def to_data_url(audio: bytes, mime_type: str = AUDIO_MIME_TYPE) -> str:
    """Encode audio bytes as an inline ``data:`` URL."""
    return f"data:{mime_type};base64,{base64.b64encode(audio).decode('ascii')}"
