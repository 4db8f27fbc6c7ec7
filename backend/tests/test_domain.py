from datetime import datetime, timezone
import uuid

import pytest

from chatline.domain.entities.message import Message, MessageDraft
from chatline.domain.exceptions import DomainValidationError, UnsupportedMediaError
from chatline.domain.value_objects.media_payload import MediaKind, MediaPayload
from chatline.domain.value_objects.message_id import MessageId
from chatline.domain.value_objects.user_id import UserId

PNG = "data:image/png;base64,iVBORw0KGgo="
MP4 = "data:video/mp4;base64,AAAAIGZ0eXA="


def test_user_id_rejects_empty_and_whitespace():
    with pytest.raises(ValueError):
        UserId("")
    with pytest.raises(ValueError):
        UserId("al ice")
    assert str(UserId("alice")) == "alice"


def test_message_id_must_be_uuid():
    with pytest.raises(ValueError):
        MessageId("not-a-uuid")
    value = str(uuid.uuid4())
    assert MessageId(value).value == value


def test_media_payload_accepts_matching_data_url():
    image = MediaPayload(kind=MediaKind.IMAGE, data=PNG)
    assert image.mime_type == "image/png"
    assert image.encoded_size == len(PNG)


@pytest.mark.parametrize(
    "kind,data",
    [
        (MediaKind.IMAGE, "https://example.com/cat.png"),
        (MediaKind.IMAGE, MP4),
        (MediaKind.VIDEO, PNG),
        (MediaKind.VIDEO, "data:video/mp4,not-base64"),
    ],
)
def test_media_payload_rejects_wrong_format(kind, data):
    with pytest.raises(UnsupportedMediaError):
        MediaPayload(kind=kind, data=data)


def test_draft_requires_text_or_media():
    with pytest.raises(DomainValidationError):
        MessageDraft(sender_id=UserId("alice"), recipient_id=UserId("bob"))


def test_message_exposes_media_by_kind():
    draft = MessageDraft(
        sender_id=UserId("alice"),
        recipient_id=UserId("bob"),
        media=MediaPayload(kind=MediaKind.VIDEO, data=MP4),
    )
    message = Message.from_draft(
        draft, id=MessageId(str(uuid.uuid4())), created_at=datetime.now(timezone.utc)
    )
    assert message.video == MP4
    assert message.image is None
    assert message.text is None


def test_message_involves_pair_in_either_direction():
    message = Message(
        id=MessageId(str(uuid.uuid4())),
        sender_id=UserId("alice"),
        recipient_id=UserId("bob"),
        created_at=datetime.now(timezone.utc),
        text="hi",
    )
    assert message.involves(UserId("alice"), UserId("bob"))
    assert message.involves(UserId("bob"), UserId("alice"))
    assert not message.involves(UserId("alice"), UserId("carol"))
