from datetime import datetime, timedelta
from decimal import Decimal

import pytest
from fastapi import HTTPException

from skill_exchange.api.sessions import (
    book_ai_session,
    cancel_session,
    complete_session,
    get_session,
    list_completed_sessions,
    list_upcoming_sessions,
    start_session,
)
from skill_exchange.crud import credit as credit_crud
from skill_exchange.crud import profile as profile_crud
from skill_exchange.crud import session as session_crud
from skill_exchange.models.credit import TransactionType
from skill_exchange.models.session import Session as SessionModel, SessionStatus
from skill_exchange.schemas.session import AiSessionCreate, CompleteSessionBody
from skill_exchange.services import credit_service
from skill_exchange.utils.clock import utcnow


def _book_human(db, tutor, learner, when=None):
    session = session_crud.create_session(
        db,
        learner_id=learner.id,
        tutor_id=tutor.id,
        scheduled_at=when or utcnow() + timedelta(days=1),
    )
    db.commit()
    return session.id


def test_human_session_completion_moves_one_credit(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    session_id = _book_human(db_session, tutor, learner)

    result = complete_session(
        session_id=session_id,
        payload=CompleteSessionBody(learner_notes="Great intro"),
        current_user=learner,
        db=db_session,
    )

    assert result["success"] is True
    assert result["message"] == "Session completed and credits transferred"
    assert result["credits_charged"] == Decimal("1")
    assert result["credits_awarded"] == Decimal("1")

    assert learner.profile.credits == Decimal("2")
    assert tutor.profile.credits == Decimal("4")

    rows = credit_crud.get_session_transactions(db_session, session_id)
    assert [(r.user_id, r.type, r.amount) for r in rows] == [
        (learner.id, TransactionType.LEARNING, Decimal("-1")),
        (tutor.id, TransactionType.TEACHING, Decimal("1")),
    ]
    assert rows[0].description == "Human tutoring session"
    assert rows[1].description == "Teaching session completed"

    session = db_session.get(SessionModel, session_id)
    assert session.status == SessionStatus.COMPLETED.value
    assert session.completed_at is not None
    assert session.learner_notes == "Great intro"

    # Stored balances agree with the ledger.
    for user in (learner, tutor):
        assert credit_service.ledger_balance(db_session, user.id) == user.profile.credits


def test_tutor_can_complete_without_body(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    session_id = _book_human(db_session, tutor, learner)

    result = complete_session(session_id=session_id, payload=None, current_user=tutor, db=db_session)

    assert result["credits_charged"] == Decimal("1")
    assert learner.profile.credits == Decimal("2")


def test_second_completion_is_rejected_and_moves_nothing(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    session_id = _book_human(db_session, tutor, learner)
    complete_session(session_id=session_id, payload=None, current_user=learner, db=db_session)

    with pytest.raises(HTTPException) as exc:
        complete_session(session_id=session_id, payload=None, current_user=tutor, db=db_session)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Session is already completed"
    assert learner.profile.credits == Decimal("2")
    assert tutor.profile.credits == Decimal("4")
    assert len(credit_crud.get_session_transactions(db_session, session_id)) == 2


def test_non_participant_cannot_complete(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    outsider = make_member("Otto")
    session_id = _book_human(db_session, tutor, learner)

    with pytest.raises(HTTPException) as exc:
        complete_session(session_id=session_id, payload=None, current_user=outsider, db=db_session)

    assert exc.value.status_code == 403
    assert exc.value.detail == "You are not a participant in this session"


def test_unknown_session_returns_404(db_session, make_member):
    learner = make_member("Leo")

    with pytest.raises(HTTPException) as exc:
        complete_session(session_id=12345, payload=None, current_user=learner, db=db_session)

    assert exc.value.status_code == 404


def test_insufficient_credits_leaves_session_untouched(db_session, make_member, set_credits):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    set_credits(learner, "0.5")
    session_id = _book_human(db_session, tutor, learner)

    with pytest.raises(HTTPException) as exc:
        complete_session(session_id=session_id, payload=None, current_user=tutor, db=db_session)

    assert exc.value.status_code == 400
    assert exc.value.detail == "Insufficient credits"
    assert db_session.get(SessionModel, session_id).status == SessionStatus.SCHEDULED.value
    assert credit_crud.get_session_transactions(db_session, session_id) == []
    assert tutor.profile.credits == Decimal("3")


def test_missing_learner_profile_returns_404(db_session, make_member, make_user):
    tutor = make_member("Tara")
    ghost = make_user()
    session_id = _book_human(db_session, tutor, ghost)

    with pytest.raises(HTTPException) as exc:
        complete_session(session_id=session_id, payload=None, current_user=tutor, db=db_session)

    assert exc.value.status_code == 404
    assert exc.value.detail == "Learner profile not found"


def test_cancelled_session_cannot_be_completed(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    session_id = _book_human(db_session, tutor, learner)
    cancel_session(session_id=session_id, current_user=learner, db=db_session)

    with pytest.raises(HTTPException) as exc:
        complete_session(session_id=session_id, payload=None, current_user=tutor, db=db_session)

    assert exc.value.status_code == 400
    assert learner.profile.credits == Decimal("3")


def test_ai_session_charges_half_credit_and_pays_nobody(db_session, make_member, skills):
    learner = make_member("Leo")

    booked = book_ai_session(
        payload=AiSessionCreate(skill_id=skills["python"].id),
        current_user=learner,
        db=db_session,
    )
    assert booked["is_ai_session"] is True
    assert booked["tutor_id"] is None
    assert booked["skill_name"] == "Python"

    result = complete_session(session_id=booked["id"], payload=None, current_user=learner, db=db_session)

    assert result["credits_charged"] == Decimal("0.5")
    assert result["credits_awarded"] == Decimal("0")
    assert learner.profile.credits == Decimal("2.5")

    rows = credit_crud.get_session_transactions(db_session, booked["id"])
    assert len(rows) == 1
    assert rows[0].type == TransactionType.AI_SESSION
    assert rows[0].amount == Decimal("-0.5")
    assert rows[0].description == "AI Learning Session"


def test_ai_session_booking_needs_half_a_credit(db_session, make_member, set_credits):
    learner = make_member("Leo")
    set_credits(learner, "0.4")

    with pytest.raises(HTTPException) as exc:
        book_ai_session(payload=AiSessionCreate(), current_user=learner, db=db_session)

    assert exc.value.status_code == 400
    assert db_session.query(SessionModel).count() == 0


def test_start_then_complete(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    session_id = _book_human(db_session, tutor, learner)

    started = start_session(session_id=session_id, current_user=tutor, db=db_session)
    assert started["status"] == SessionStatus.IN_PROGRESS.value

    with pytest.raises(HTTPException) as exc:
        start_session(session_id=session_id, current_user=tutor, db=db_session)
    assert exc.value.status_code == 400

    result = complete_session(session_id=session_id, payload=None, current_user=tutor, db=db_session)
    assert result["success"] is True


def test_upcoming_and_completed_listings(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    later = _book_human(db_session, tutor, learner, when=utcnow() + timedelta(days=3))
    sooner = _book_human(db_session, tutor, learner, when=utcnow() + timedelta(days=1))
    past = _book_human(db_session, tutor, learner, when=utcnow() - timedelta(days=1))
    done = _book_human(db_session, tutor, learner)
    complete_session(session_id=done, payload=None, current_user=tutor, db=db_session)

    upcoming = list_upcoming_sessions(current_user=learner, db=db_session)
    assert [s["id"] for s in upcoming] == [sooner, later]
    assert past not in [s["id"] for s in upcoming]
    assert upcoming[0]["tutor_profile"]["name"] == "Tara"

    completed = list_completed_sessions(current_user=tutor, db=db_session)
    assert [s["id"] for s in completed] == [done]


def test_get_session_is_participant_only(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    outsider = make_member("Otto")
    session_id = _book_human(db_session, tutor, learner, when=datetime(2031, 1, 1, 8, 0))

    detail = get_session(session_id=session_id, current_user=learner, db=db_session)
    assert detail["scheduled_at"] == datetime(2031, 1, 1, 8, 0)

    with pytest.raises(HTTPException) as exc:
        get_session(session_id=session_id, current_user=outsider, db=db_session)
    assert exc.value.status_code == 403


def test_swapped_role_completions_lock_profiles_in_user_id_order(db_session, make_member, monkeypatch):
    first = make_member("Xena")
    second = make_member("Yuri")
    forward = _book_human(db_session, tutor=second, learner=first)
    backward = _book_human(db_session, tutor=first, learner=second)

    locked_orders = []
    real_lock_profiles = profile_crud.lock_profiles

    def recording_lock_profiles(db, user_ids):
        rows = real_lock_profiles(db, user_ids)
        locked_orders.append([p.user_id for p in rows])
        return rows

    monkeypatch.setattr(profile_crud, "lock_profiles", recording_lock_profiles)

    complete_session(session_id=forward, payload=None, current_user=first, db=db_session)
    complete_session(session_id=backward, payload=None, current_user=second, db=db_session)

    expected = sorted([first.id, second.id])
    assert locked_orders == [expected, expected]
    assert first.profile.credits == Decimal("3")
    assert second.profile.credits == Decimal("3")


def test_lock_profiles_returns_rows_in_user_id_order(db_session, make_member):
    low = make_member("Lou")
    high = make_member("Hal")

    rows = profile_crud.lock_profiles(db_session, [high.id, None, low.id, high.id])
    assert [p.user_id for p in rows] == [low.id, high.id]
    assert profile_crud.lock_profiles(db_session, [None]) == []
