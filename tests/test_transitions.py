from __future__ import annotations

import pytest

from src.bot.transitions import RenderedMessage, TransitionEngine, TransitionState
from src.bot.transport import MessageContent


CHAT_ID = 555


@pytest.mark.asyncio
async def test_text_to_text_transition_edits_in_place(transport) -> None:
    engine = TransitionEngine(transport)

    outcome = await engine.transition(CHAT_ID, RenderedMessage(42), MessageContent(text="next card"))
    await engine.drain()

    assert outcome.state is TransitionState.EDITED
    assert outcome.message == RenderedMessage(42, has_audio=False)
    assert outcome.trail == [
        TransitionState.COMPOSING,
        TransitionState.ATTEMPT_INPLACE_EDIT,
        TransitionState.EDITED,
    ]
    assert transport.sent == []
    assert transport.deleted == []
    assert transport.edits[0][1] == 42
    assert transport.edits[0][3] is False


@pytest.mark.asyncio
async def test_skeleton_is_shown_before_the_final_edit(transport) -> None:
    engine = TransitionEngine(transport)

    await engine.transition(
        CHAT_ID,
        RenderedMessage(42),
        MessageContent(text="final"),
        skeleton=MessageContent(text="placeholder"),
    )

    assert [content.text for _, _, content, _ in transport.edits] == ["placeholder", "final"]


@pytest.mark.asyncio
async def test_skeleton_is_skipped_when_disabled(transport) -> None:
    engine = TransitionEngine(transport, skeleton_enabled=False)

    await engine.transition(
        CHAT_ID,
        RenderedMessage(42),
        MessageContent(text="final"),
        skeleton=MessageContent(text="placeholder"),
    )

    assert [content.text for _, _, content, _ in transport.edits] == ["final"]


@pytest.mark.asyncio
async def test_failed_skeleton_does_not_abort_the_edit(transport) -> None:
    transport.edit_results.extend([False, True])
    engine = TransitionEngine(transport)

    outcome = await engine.transition(
        CHAT_ID,
        RenderedMessage(42),
        MessageContent(text="final"),
        skeleton=MessageContent(text="placeholder"),
    )

    assert outcome.state is TransitionState.EDITED
    assert transport.sent == []


@pytest.mark.asyncio
async def test_rejected_edit_falls_back_to_replace(transport) -> None:
    transport.fail_edits = True
    engine = TransitionEngine(transport)

    outcome = await engine.transition(CHAT_ID, RenderedMessage(42), MessageContent(text="card"))
    await engine.drain()

    assert outcome.state is TransitionState.REPLACED
    assert outcome.message == RenderedMessage(101, has_audio=False)
    assert outcome.trail == [
        TransitionState.COMPOSING,
        TransitionState.ATTEMPT_INPLACE_EDIT,
        TransitionState.ATTEMPT_REPLACE,
        TransitionState.REPLACED,
    ]
    assert transport.deleted == [(CHAT_ID, 42)]


@pytest.mark.asyncio
async def test_audio_on_either_side_forces_replace_and_sends_before_delete(transport) -> None:
    engine = TransitionEngine(transport)

    to_audio = await engine.transition(
        CHAT_ID,
        RenderedMessage(42),
        MessageContent(text="card", audio=b"mp3"),
    )
    from_audio = await engine.transition(
        CHAT_ID,
        RenderedMessage(43, has_audio=True),
        MessageContent(text="card"),
    )
    await engine.drain()

    assert transport.edits == []
    assert to_audio.state is TransitionState.REPLACED
    assert to_audio.message.has_audio is True
    assert from_audio.message.has_audio is False
    assert TransitionState.ATTEMPT_INPLACE_EDIT not in to_audio.trail
    assert sorted(transport.deleted) == [(CHAT_ID, 42), (CHAT_ID, 43)]
    assert transport.calls.index("send") < transport.calls.index("delete")


@pytest.mark.asyncio
async def test_failed_send_keeps_previous_message(transport) -> None:
    transport.fail_sends = True
    engine = TransitionEngine(transport)

    outcome = await engine.transition(CHAT_ID, RenderedMessage(42, has_audio=True), MessageContent(text="card"))
    await engine.drain()

    assert outcome.state is TransitionState.FAILED
    assert outcome.message is None
    assert not outcome.succeeded
    assert transport.deleted == []


@pytest.mark.asyncio
async def test_render_fresh_never_edits(transport) -> None:
    engine = TransitionEngine(transport)

    outcome = await engine.render_fresh(CHAT_ID, MessageContent(text="first"))

    assert outcome.trail == [
        TransitionState.COMPOSING,
        TransitionState.ATTEMPT_REPLACE,
        TransitionState.REPLACED,
    ]
    assert transport.edits == []


@pytest.mark.asyncio
async def test_update_in_place_edits_caption_of_audio_messages(transport) -> None:
    engine = TransitionEngine(transport)

    assert await engine.update_in_place(CHAT_ID, RenderedMessage(42, has_audio=True), MessageContent(text="x"))
    assert transport.edits[0][3] is True


@pytest.mark.asyncio
async def test_delete_failure_is_not_raised(transport) -> None:
    transport.fail_deletes = True
    transport.fail_edits = True
    engine = TransitionEngine(transport)

    outcome = await engine.transition(CHAT_ID, RenderedMessage(42), MessageContent(text="card"))
    await engine.drain()

    assert outcome.succeeded
    assert transport.deleted == []


@pytest.mark.asyncio
async def test_failed_replace_restores_content_over_skeleton(transport) -> None:
    transport.edit_results.extend([True, False])
    transport.fail_sends = True
    engine = TransitionEngine(transport)

    outcome = await engine.transition(
        CHAT_ID,
        RenderedMessage(42),
        MessageContent(text="real"),
        skeleton=MessageContent(text="placeholder"),
    )

    assert outcome.state is TransitionState.FAILED
    assert [content.text for _, _, content, _ in transport.edits] == ["placeholder", "real", "real"]
    assert transport.edits[-1][1] == 42


@pytest.mark.asyncio
async def test_rejected_audio_is_resent_as_text(transport) -> None:
    transport.fail_audio_sends = True
    engine = TransitionEngine(transport)

    outcome = await engine.render_fresh(CHAT_ID, MessageContent(text="card", audio=b"mp3", audio_title="Card"))

    assert outcome.state is TransitionState.REPLACED
    assert outcome.message == RenderedMessage(101, has_audio=False)
    assert len(transport.sent) == 1
    _, _, content = transport.sent[0]
    assert content.text == "card"
    assert content.audio is None


@pytest.mark.asyncio
async def test_text_fallback_failure_still_fails(transport) -> None:
    transport.fail_sends = True
    engine = TransitionEngine(transport)

    outcome = await engine.transition(CHAT_ID, RenderedMessage(42), MessageContent(text="card", audio=b"mp3"))
    await engine.drain()

    assert outcome.state is TransitionState.FAILED
    assert transport.calls.count("send") == 2
    assert transport.deleted == []
