from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi import HTTPException

from skill_exchange.api.requests import (
    accept_request,
    cancel_request,
    list_incoming_requests,
    list_outgoing_requests,
    reject_request,
    send_request,
)
from skill_exchange.models.conversation import Conversation, Message
from skill_exchange.models.request import LearningRequest, RequestStatus
from skill_exchange.models.session import Session as SessionModel, SessionStatus
from skill_exchange.schemas.request import AcceptRequestBody, SendRequestBody


def _send(db, learner, tutor_id, message="Can you help me with decorators?", **extra):
    return send_request(
        payload=SendRequestBody(tutor_id=tutor_id, message=message, **extra),
        current_user=learner,
        db=db,
    )


def _accept(db, tutor, request_id, when=None, duration=60):
    when = when or datetime(2030, 5, 1, 15, 30, tzinfo=timezone.utc)
    return accept_request(
        request_id=request_id,
        payload=AcceptRequestBody(scheduled_at=when, duration_minutes=duration),
        current_user=tutor,
        db=db,
    )


def test_send_request_creates_pending_request_and_posts_message(db_session, make_member, skills):
    tutor = make_member("Tara")
    learner = make_member("Leo", teach=("spanish",), learn=("python",))

    result = _send(db_session, learner, tutor.id, skill_id=skills["python"].id)

    assert result["success"] is True
    request = result["request"]
    assert request["status"] == RequestStatus.PENDING.value
    assert request["learner_id"] == learner.id
    assert request["tutor_id"] == tutor.id
    assert request["skill_name"] == "Python"
    assert request["tutor_profile"]["name"] == "Tara"

    conversation = db_session.query(Conversation).one()
    assert conversation.participant_1 == min(learner.id, tutor.id)
    assert conversation.participant_2 == max(learner.id, tutor.id)

    message = db_session.query(Message).one()
    assert message.sender_id == learner.id
    assert message.content == "Learning Request: Can you help me with decorators?"
    assert conversation.last_message_at is not None

    # Sending only checks the balance; nothing is deducted.
    assert learner.profile.credits == Decimal("3")


def test_send_request_to_self_is_rejected(db_session, make_member):
    learner = make_member("Solo")

    with pytest.raises(HTTPException) as exc:
        _send(db_session, learner, learner.id)

    assert exc.value.status_code == 400
    assert exc.value.detail == "You cannot send a request to yourself"


def test_send_request_with_insufficient_credits_writes_nothing(db_session, make_member, set_credits):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    set_credits(learner, "0.5")

    with pytest.raises(HTTPException) as exc:
        _send(db_session, learner, tutor.id)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Insufficient credits to send a request"
    assert db_session.query(LearningRequest).count() == 0
    assert db_session.query(Conversation).count() == 0
    assert db_session.query(Message).count() == 0


def test_send_request_without_own_profile_counts_as_insufficient(db_session, make_member, make_user):
    tutor = make_member("Tara")
    newcomer = make_user()

    with pytest.raises(HTTPException) as exc:
        _send(db_session, newcomer, tutor.id)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Insufficient credits to send a request"


def test_send_request_to_unknown_tutor_returns_404(db_session, make_member, make_user):
    learner = make_member("Leo")
    no_profile = make_user()

    for tutor_id in (no_profile.id, 9999):
        with pytest.raises(HTTPException) as exc:
            _send(db_session, learner, tutor_id)
        assert exc.value.status_code == 404
        assert exc.value.detail == "Tutor not found"


def test_send_request_with_unknown_skill_returns_404(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")

    with pytest.raises(HTTPException) as exc:
        _send(db_session, learner, tutor.id, skill_id=424242)

    assert exc.value.status_code == 404
    assert db_session.query(LearningRequest).count() == 0


def test_send_request_body_rejects_blank_message():
    with pytest.raises(ValueError):
        SendRequestBody(tutor_id=1, message="   ")


def test_accept_request_schedules_session_and_posts_confirmation(db_session, make_member, skills):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    request_id = _send(db_session, learner, tutor.id, skill_id=skills["python"].id)["request"]["id"]

    result = _accept(db_session, tutor, request_id, duration=90)

    assert result["success"] is True
    session = result["session"]
    assert session["status"] == SessionStatus.SCHEDULED.value
    assert session["tutor_id"] == tutor.id
    assert session["learner_id"] == learner.id
    assert session["request_id"] == request_id
    assert session["duration_minutes"] == 90
    assert session["is_ai_session"] is False
    assert session["scheduled_at"] == datetime(2030, 5, 1, 15, 30)

    request = db_session.get(LearningRequest, request_id)
    assert request.status == RequestStatus.ACCEPTED.value

    # Same conversation is reused for the confirmation.
    assert db_session.query(Conversation).count() == 1
    messages = db_session.query(Message).order_by(Message.id).all()
    assert len(messages) == 2
    assert messages[1].sender_id == tutor.id
    assert messages[1].content.startswith("Request accepted! Session scheduled for 2030-05-01 15:30")


def test_accept_defaults_to_sixty_minutes(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    request_id = _send(db_session, learner, tutor.id)["request"]["id"]

    body = AcceptRequestBody(scheduled_at=datetime(2030, 1, 1, 9, 0))
    result = accept_request(request_id=request_id, payload=body, current_user=tutor, db=db_session)

    assert result["session"]["duration_minutes"] == 60


def test_accept_twice_fails_with_no_longer_pending(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    request_id = _send(db_session, learner, tutor.id)["request"]["id"]
    _accept(db_session, tutor, request_id)

    with pytest.raises(HTTPException) as exc:
        _accept(db_session, tutor, request_id)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Request is no longer pending"
    assert db_session.query(SessionModel).count() == 1


def test_only_the_tutor_can_accept(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    request_id = _send(db_session, learner, tutor.id)["request"]["id"]

    with pytest.raises(HTTPException) as exc:
        _accept(db_session, learner, request_id)

    assert exc.value.status_code == 403
    assert exc.value.detail == "Only the tutor can accept this request"
    assert db_session.query(SessionModel).count() == 0


def test_accept_unknown_request_returns_404(db_session, make_member):
    tutor = make_member("Tara")

    with pytest.raises(HTTPException) as exc:
        _accept(db_session, tutor, 777)

    assert exc.value.status_code == 404


def test_accept_body_requires_positive_duration():
    with pytest.raises(ValueError):
        AcceptRequestBody(scheduled_at=datetime(2030, 1, 1), duration_minutes=0)


def test_reject_request_posts_decline_and_blocks_accept(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    request_id = _send(db_session, learner, tutor.id)["request"]["id"]

    result = reject_request(request_id=request_id, current_user=tutor, db=db_session)

    assert result["status"] == RequestStatus.REJECTED.value
    last = db_session.query(Message).order_by(Message.id.desc()).first()
    assert last.sender_id == tutor.id
    assert last.content == "Request declined."

    with pytest.raises(HTTPException) as exc:
        _accept(db_session, tutor, request_id)
    assert exc.value.detail == "Request is no longer pending"


def test_cancel_request_is_learner_only(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    request_id = _send(db_session, learner, tutor.id)["request"]["id"]

    with pytest.raises(HTTPException) as exc:
        cancel_request(request_id=request_id, current_user=tutor, db=db_session)
    assert exc.value.status_code == 403

    result = cancel_request(request_id=request_id, current_user=learner, db=db_session)
    assert result["status"] == RequestStatus.CANCELLED.value


def test_incoming_and_outgoing_lists_only_show_pending(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    other = make_member("Olga")

    first = _send(db_session, learner, tutor.id, message="first")["request"]["id"]
    second = _send(db_session, other, tutor.id, message="second")["request"]["id"]
    _accept(db_session, tutor, first)

    incoming = list_incoming_requests(current_user=tutor, db=db_session)
    assert [r["id"] for r in incoming] == [second]
    assert incoming[0]["learner_profile"]["name"] == "Olga"

    assert list_outgoing_requests(current_user=learner, db=db_session) == []
    outgoing = list_outgoing_requests(current_user=other, db=db_session)
    assert [r["id"] for r in outgoing] == [second]


def test_repeat_requests_share_one_conversation(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")

    _send(db_session, learner, tutor.id, message="one")
    _send(db_session, learner, tutor.id, message="two")

    assert db_session.query(Conversation).count() == 1
    assert db_session.query(Message).count() == 2


def test_proposed_datetime_is_stored_as_naive_utc(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    proposed = datetime(2030, 3, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))

    result = _send(db_session, learner, tutor.id, proposed_datetime=proposed)

    assert result["request"]["proposed_datetime"] == datetime(2030, 3, 1, 10, 0)
