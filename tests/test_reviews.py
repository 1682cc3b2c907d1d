from datetime import timedelta

import pytest
from fastapi import HTTPException

from skill_exchange.api.reviews import list_reviews_for_user, submit_review
from skill_exchange.crud import session as session_crud
from skill_exchange.schemas.review import ReviewCreate
from skill_exchange.services import session_service
from skill_exchange.utils.clock import utcnow


def _completed_session(db, tutor, learner):
    session = session_crud.create_session(
        db, learner_id=learner.id, tutor_id=tutor.id, scheduled_at=utcnow() + timedelta(hours=1)
    )
    db.commit()
    session_service.complete_session(db, user_id=learner.id, session_id=session.id)
    return session.id


def _review(db, user, session_id, rating=5, comment=None):
    return submit_review(
        review=ReviewCreate(session_id=session_id, rating=rating, comment=comment),
        current_user=user,
        db=db,
    )


def test_both_participants_review_each_other(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    session_id = _completed_session(db_session, tutor, learner)

    from_learner = _review(db_session, learner, session_id, rating=5, comment="Clear and patient")
    from_tutor = _review(db_session, tutor, session_id, rating=4)

    assert from_learner["reviewee_id"] == tutor.id
    assert from_learner["reviewer_profile"]["name"] == "Leo"
    assert from_tutor["reviewee_id"] == learner.id


def test_duplicate_review_is_rejected(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    session_id = _completed_session(db_session, tutor, learner)
    _review(db_session, learner, session_id)

    with pytest.raises(HTTPException) as exc:
        _review(db_session, learner, session_id, rating=1)

    assert exc.value.status_code == 400
    assert exc.value.detail == "You have already reviewed this session"


def test_only_completed_sessions_can_be_reviewed(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    session = session_crud.create_session(
        db_session, learner_id=learner.id, tutor_id=tutor.id, scheduled_at=utcnow()
    )
    db_session.commit()

    with pytest.raises(HTTPException) as exc:
        _review(db_session, learner, session.id)
    assert exc.value.status_code == 400


def test_outsider_cannot_review(db_session, make_member):
    tutor = make_member("Tara")
    learner = make_member("Leo")
    outsider = make_member("Otto")
    session_id = _completed_session(db_session, tutor, learner)

    with pytest.raises(HTTPException) as exc:
        _review(db_session, outsider, session_id)
    assert exc.value.status_code == 403


def test_ai_sessions_cannot_be_reviewed(db_session, make_member):
    learner = make_member("Leo")
    session = session_service.book_ai_session(db_session, learner_id=learner.id)
    session_service.complete_session(db_session, user_id=learner.id, session_id=session.id)

    with pytest.raises(HTTPException) as exc:
        _review(db_session, learner, session.id)
    assert exc.value.status_code == 400


def test_rating_must_be_between_one_and_five():
    with pytest.raises(ValueError):
        ReviewCreate(session_id=1, rating=6)
    with pytest.raises(ValueError):
        ReviewCreate(session_id=1, rating=0)


def test_list_reviews_for_user_latest_first(db_session, make_member):
    tutor = make_member("Tara")
    learners = [make_member(name) for name in ("Leo", "Lia", "Lou")]
    for learner in learners:
        session_id = _completed_session(db_session, tutor, learner)
        _review(db_session, learner, session_id, rating=4)

    reviews = list_reviews_for_user(user_id=tutor.id, current_user=learners[0], db=db_session)

    assert len(reviews) == 3
    assert [r["reviewer_profile"]["name"] for r in reviews] == ["Lou", "Lia", "Leo"]
    assert list_reviews_for_user(user_id=learners[0].id, current_user=tutor, db=db_session) == []
