from __future__ import annotations

import base64
import types

import pytest

from src.app.settings import SpeechSettings
from src.db.content import get_sentence_by_index, list_sentences_without_audio
from src.services import SpeechSynthesisError, synthesize_speech, to_data_url
from src.tools.generate_audio import generate_missing_audio


class _StubSpeech:
    def __init__(self, failing_inputs=()) -> None:
        self.calls: list[dict] = []
        self._failing = set(failing_inputs)

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if kwargs["input"] in self._failing:
            raise RuntimeError("speech endpoint unavailable")
        return types.SimpleNamespace(content=f"audio:{kwargs['input']}".encode("utf-8"))


class _StubClient:
    def __init__(self, failing_inputs=()) -> None:
        self.audio = types.SimpleNamespace(speech=_StubSpeech(failing_inputs))


SETTINGS = SpeechSettings(openai_api_key="sk-test", model="tts-test", voice="alloy")


@pytest.mark.asyncio
async def test_synthesize_speech_requests_mp3() -> None:
    client = _StubClient()

    audio = await synthesize_speech(client, "Здравей!", "tts-test", "alloy")

    assert audio == "audio:Здравей!".encode("utf-8")
    call = client.audio.speech.calls[0]
    assert call["model"] == "tts-test"
    assert call["voice"] == "alloy"
    assert call["response_format"] == "mp3"


@pytest.mark.asyncio
async def test_synthesize_speech_rejects_empty_text() -> None:
    client = _StubClient()

    with pytest.raises(SpeechSynthesisError):
        await synthesize_speech(client, "   ", "tts-test", "alloy")
    assert client.audio.speech.calls == []


def test_to_data_url_encodes_base64() -> None:
    url = to_data_url(b"\x00\x01")

    assert url == "data:audio/mpeg;base64," + base64.b64encode(b"\x00\x01").decode("ascii")


@pytest.mark.asyncio
async def test_generate_missing_audio_stores_results_and_counts_failures(session_factory, seed_category) -> None:
    await seed_category()
    client = _StubClient(failing_inputs={"Добро утро."})

    summary = await generate_missing_audio(session_factory, client, SETTINGS)

    assert summary.generated == 2
    assert summary.failed == 1
    async with session_factory() as session:
        first = await get_sentence_by_index(session, "basic", "greetings", 0)
        pending = await list_sentences_without_audio(session)

    assert first.audio_generated is True
    assert first.audio_url == to_data_url("audio:Здравей!".encode("utf-8"))
    assert [sentence.bg for sentence in pending] == ["Добро утро."]


@pytest.mark.asyncio
async def test_generate_missing_audio_honours_folder_and_limit(session_factory, seed_category) -> None:
    await seed_category()
    await seed_category(folder="middle", category="present", items=[{"bg": "Чета."}, {"bg": "Пиша."}])
    client = _StubClient()

    summary = await generate_missing_audio(session_factory, client, SETTINGS, folder="middle", limit=1)

    assert summary.generated == 1
    assert [call["input"] for call in client.audio.speech.calls] == ["Чета."]
