import pytest

from app.core.auth import Identity, IdentityKind
from app.core.errors import ConflictError, ValidationError
from app.models.entities import FamilyMember, GenderEnum, MemberId, Notification, NotificationTypeEnum, utcnow
from app.services.wishes import DEFAULT_WISH_MESSAGE, send_wish


def _seed(db_session):
    db_session.add_all(
        [
            FamilyMember(member_id=1, name="Sender", gender=GenderEnum.female, email="s@example.com", generation=0),
            FamilyMember(member_id=2, name="Recipient", gender=GenderEnum.male, email="r@example.com", generation=0),
        ]
    )
    db_session.commit()
    return Identity(kind=IdentityKind.user, email="s@example.com", name="Sender", member_id=MemberId(1))


def test_second_wish_in_same_year_conflicts(db_session):
    sender = _seed(db_session)

    wish = send_wish(db_session, sender=sender, recipient_member_id=2, message=None, year=2025)
    db_session.commit()
    assert wish.message == DEFAULT_WISH_MESSAGE

    with pytest.raises(ConflictError):
        send_wish(db_session, sender=sender, recipient_member_id=2, message="Again", year=2025)

    # A new year is a new wish.
    send_wish(db_session, sender=sender, recipient_member_id=2, message="Next year", year=2026)
    db_session.commit()


def test_wish_creates_birthday_notification(db_session):
    sender = _seed(db_session)
    send_wish(db_session, sender=sender, recipient_member_id=2, message="HBD", year=2025)
    db_session.commit()

    notification = db_session.query(Notification).filter_by(recipient_member_id=2).one()
    assert notification.type == NotificationTypeEnum.birthday_wish
    assert notification.sender_member_id == 1


def test_cannot_wish_yourself(db_session):
    sender = _seed(db_session)
    with pytest.raises(ValidationError):
        send_wish(db_session, sender=sender, recipient_member_id=1, message=None, year=2025)


def test_wish_endpoints(client, add_member):
    add_member(id=1, name="Sender", email="s@example.com")
    add_member(id=2, name="Recipient", email="r@example.com")
    sender = {"X-Forwarded-User": "s@example.com"}
    recipient = {"X-Forwarded-User": "r@example.com"}

    first = client.post("/v1/wishes", json={"recipient_member_id": 2, "message": "Happy day"}, headers=sender)
    assert first.status_code == 201
    assert first.json()["year"] == utcnow().year
    second = client.post("/v1/wishes", json={"recipient_member_id": 2}, headers=sender)
    assert second.status_code == 409

    missing = client.post("/v1/wishes", json={"recipient_member_id": 99}, headers=sender)
    assert missing.status_code == 404

    received = client.get("/v1/wishes/received", headers=recipient)
    assert [item["message"] for item in received.json()["items"]] == ["Happy day"]

    sent = client.get("/v1/wishes/sent", headers=sender)
    assert sent.json()["recipient_ids"] == [2]


def test_admin_without_member_cannot_wish(client, admin_headers, add_member):
    add_member(id=2, name="Recipient")
    response = client.post("/v1/wishes", json={"recipient_member_id": 2}, headers=admin_headers)
    assert response.status_code == 403
