"""Mapping checks for the ORM models and their integrity constraints."""

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from codegram.models import Bookmark, Comment, Follow, Like, Notification


def test_table_names():
    assert Like.__tablename__ == "content_like"
    assert Bookmark.__tablename__ == "bookmark"
    assert Follow.__tablename__ == "follow"
    assert Comment.__tablename__ == "comment"
    assert Notification.__tablename__ == "notification"


@pytest.mark.parametrize("model", [Like, Bookmark])
def test_join_tables_are_unique_per_user_and_target(model):
    names = {c.name for c in model.__table__.constraints if c.name}
    for kind in ("snippet", "doc", "bug"):
        assert any(name.endswith(f"_user_{kind}") for name in names)
    assert f"ck_{model.__tablename__}_one_target" in names


def test_like_requires_exactly_one_target(db_session: Session, alice, snippet, bug):
    db_session.add(Like(user_id=alice.id, snippet_id=snippet.id, bug_id=bug.id))
    with pytest.raises(IntegrityError):
        db_session.flush()


def test_duplicate_follow_is_rejected(db_session: Session, alice, bob):
    db_session.add(Follow(follower_id=alice.id, following_id=bob.id))
    db_session.flush()
    db_session.add(Follow(follower_id=alice.id, following_id=bob.id))
    with pytest.raises(IntegrityError):
        db_session.flush()


def test_self_follow_violates_check(db_session: Session, alice):
    db_session.add(Follow(follower_id=alice.id, following_id=alice.id))
    with pytest.raises(IntegrityError):
        db_session.flush()


def test_bug_expiry(bug, expired_bug):
    assert not bug.is_expired()
    assert expired_bug.is_expired()
    assert bug.is_public is True
