import asyncio
import logging

import pytest

from chatline.application.commands.messages import SendMessageCommand, SendMessageHandler
from chatline.application.realtime import ConnectionRegistry, MessageRouter, SenderSequencer
from chatline.domain.exceptions import (
    DomainValidationError,
    EntityNotFoundError,
    PayloadTooLargeError,
    StoreUnavailableError,
    UnsupportedMediaError,
)
from chatline.domain.value_objects.user_id import UserId
from chatline.infrastructure.persistence import InMemoryMessageRepository, InMemoryUserRepository
from conftest import make_users
from fakes import FakeConnection

PNG = "data:image/png;base64,iVBORw0KGgo="
MP4 = "data:video/mp4;base64,AAAAIGZ0eXA="


class CountingRepository(InMemoryMessageRepository):
    def __init__(self, delays=None, fail=False, gate=None):
        super().__init__()
        self.calls = 0
        self._delays = list(delays or [])
        self._fail = fail
        self._gate = gate

    async def create(self, draft):
        self.calls += 1
        if self._gate is not None:
            await self._gate.wait()
        if self._fail:
            raise StoreUnavailableError()
        if self._delays:
            await asyncio.sleep(self._delays.pop(0))
        return await super().create(draft)


def _handler(repo=None, registry=None, **limits):
    registry = registry or ConnectionRegistry()
    repo = repo if repo is not None else CountingRepository()
    handler = SendMessageHandler(
        message_repository=repo,
        user_repository=InMemoryUserRepository(make_users()),
        router=MessageRouter(registry),
        sequencer=SenderSequencer(),
        **limits,
    )
    return handler, repo, registry


def _cmd(recipient="bob", **content):
    return SendMessageCommand(sender_id=UserId("alice"), recipient_id=UserId(recipient), **content)


@pytest.mark.asyncio
async def test_send_persists_once_routes_and_returns_record():
    handler, repo, registry = _handler()
    bob = FakeConnection("bob")
    registry.register(UserId("bob"), bob)

    message = await handler.execute(_cmd(text="hi bob"))

    assert repo.calls == 1
    assert message.text == "hi bob"
    assert message.id.value
    assert message.created_at is not None
    deliveries = bob.of_type("message_delivery")
    assert [d["data"]["id"] for d in deliveries] == [message.id.value]


@pytest.mark.asyncio
async def test_text_is_stored_exactly_as_sent():
    handler, repo, registry = _handler()
    bob = FakeConnection("bob")
    registry.register(UserId("bob"), bob)
    sent = "  hi bob\n\tsecond line  "

    message = await handler.execute(_cmd(text=sent))

    history = await repo.get_between(UserId("alice"), UserId("bob"), limit=10)
    assert message.text == sent
    assert history[0].text == sent
    assert bob.of_type("message_delivery")[0]["data"]["text"] == sent


@pytest.mark.asyncio
async def test_whitespace_text_next_to_media_is_dropped():
    handler, _, _ = _handler()
    message = await handler.execute(_cmd(text="   ", image=PNG))
    assert message.text is None
    assert message.image == PNG


@pytest.mark.asyncio
async def test_send_to_offline_recipient_still_returns_and_is_in_history():
    handler, repo, _ = _handler()

    message = await handler.execute(_cmd(image=PNG))

    history = await repo.get_between(UserId("bob"), UserId("alice"), limit=10)
    assert [m.id for m in history] == [message.id]
    assert history[0].image == PNG


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "content,error",
    [
        ({"text": "   "}, DomainValidationError),
        ({}, DomainValidationError),
        ({"image": PNG, "video": MP4}, DomainValidationError),
        ({"text": "x" * 11}, DomainValidationError),
        ({"image": "not a data url"}, UnsupportedMediaError),
        ({"video": PNG}, UnsupportedMediaError),
        ({"image": "data:image/png;base64," + "A" * 100}, PayloadTooLargeError),
    ],
)
async def test_invalid_messages_are_rejected_before_any_side_effect(content, error):
    handler, repo, registry = _handler(max_text_chars=10, max_image_bytes=64)
    bob = FakeConnection("bob")
    registry.register(UserId("bob"), bob)

    with pytest.raises(error):
        await handler.execute(_cmd(**content))

    assert repo.calls == 0
    assert bob.of_type("message_delivery") == []


@pytest.mark.asyncio
async def test_text_is_checked_before_media():
    handler, repo, _ = _handler(max_text_chars=3)
    with pytest.raises(DomainValidationError):
        await handler.execute(_cmd(text="too long", image="bad"))


@pytest.mark.asyncio
async def test_video_has_its_own_ceiling():
    handler, _, _ = _handler(max_image_bytes=10, max_video_bytes=1000)
    message = await handler.execute(_cmd(video=MP4))
    assert message.video == MP4

    with pytest.raises(PayloadTooLargeError) as exc:
        await handler.execute(_cmd(video="data:video/mp4;base64," + "A" * 2000))
    assert exc.value.kind == "video"
    assert exc.value.limit_bytes == 1000


@pytest.mark.asyncio
async def test_unknown_recipient_is_not_found():
    handler, repo, _ = _handler()
    with pytest.raises(EntityNotFoundError):
        await handler.execute(_cmd(recipient="mallory", text="hi"))
    assert repo.calls == 0


@pytest.mark.asyncio
async def test_store_failure_routes_nothing():
    handler, _, registry = _handler(repo=CountingRepository(fail=True))
    bob = FakeConnection("bob")
    registry.register(UserId("bob"), bob)

    with pytest.raises(StoreUnavailableError):
        await handler.execute(_cmd(text="hi"))

    assert bob.of_type("message_delivery") == []


@pytest.mark.asyncio
async def test_concurrent_sends_from_one_sender_keep_order():
    # The first send is the slowest to persist; it must still be routed first
    handler, repo, registry = _handler(repo=CountingRepository(delays=[0.05, 0.01, 0]))
    bob = FakeConnection("bob")
    registry.register(UserId("bob"), bob)

    results = await asyncio.gather(
        handler.execute(_cmd(text="one")),
        handler.execute(_cmd(text="two")),
        handler.execute(_cmd(text="three")),
    )

    delivered = [d["data"]["text"] for d in bob.of_type("message_delivery")]
    history = await repo.get_between(UserId("alice"), UserId("bob"), limit=10)
    assert delivered == ["one", "two", "three"]
    assert [m.text for m in history] == ["one", "two", "three"]
    assert [m.text for m in results] == ["one", "two", "three"]


@pytest.mark.asyncio
async def test_cancelled_caller_does_not_cancel_persist_and_route():
    gate = asyncio.Event()
    repo = CountingRepository(gate=gate)
    handler, _, registry = _handler(repo=repo)
    bob = FakeConnection("bob")
    registry.register(UserId("bob"), bob)

    task = asyncio.create_task(handler.execute(_cmd(text="still sent")))
    while repo.calls == 0:
        await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    gate.set()
    for _ in range(10):
        await asyncio.sleep(0)

    assert len(repo) == 1
    assert [d["data"]["text"] for d in bob.of_type("message_delivery")] == ["still sent"]


@pytest.mark.asyncio
async def test_store_failure_after_caller_cancelled_is_logged(caplog):
    caplog.set_level(logging.ERROR)
    gate = asyncio.Event()
    repo = CountingRepository(fail=True, gate=gate)
    handler, _, _ = _handler(repo=repo)

    task = asyncio.create_task(handler.execute(_cmd(text="lost")))
    while repo.calls == 0:
        await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    gate.set()
    for _ in range(10):
        await asyncio.sleep(0)

    failures = [r for r in caplog.records if "Persist/route failed" in r.getMessage()]
    assert len(failures) == 1
    assert len(repo) == 0


@pytest.mark.asyncio
async def test_sequencer_discards_idle_locks():
    sequencer = SenderSequencer()
    async with sequencer.hold(UserId("alice")):
        assert sequencer.active_senders() == 1
    assert sequencer.active_senders() == 0
