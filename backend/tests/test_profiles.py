"""Profile edits, user search and field bounds."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from app.core.errors import ValidationError
from app.models import Post, User
from app.schemas import ProfileUpdate
from app.services import posts, profiles


@pytest.fixture()
def people(make_user):
    return {
        "alice": make_user("alice", full_name="Alice Liddell"),
        "bob": make_user("bob", full_name="Robert Alison"),
        "carol": make_user("carol", full_name="Carol Danvers"),
        "al_pha": make_user("al_pha"),
    }


def test_search_matches_handle_or_display_name(db_session, people):
    found = profiles.search_users(db_session, "ALI", people["carol"].id)

    assert [user.handle for user in found] == ["alice", "bob"]


def test_search_excludes_caller(db_session, people):
    found = profiles.search_users(db_session, "ali", people["alice"].id)

    assert [user.handle for user in found] == ["bob"]


@pytest.mark.parametrize("query", ["", "   ", None])
def test_blank_search_matches_nobody(db_session, people, query):
    assert profiles.search_users(db_session, query, people["carol"].id) == []


def test_search_treats_wildcards_literally(db_session, people):
    assert profiles.search_users(db_session, "%", people["carol"].id) == []
    found = profiles.search_users(db_session, "_", people["carol"].id)
    assert [user.handle for user in found] == ["al_pha"]


def test_search_respects_limit(db_session, people):
    found = profiles.search_users(db_session, "a", people["carol"].id, limit=2)

    assert [user.handle for user in found] == ["al_pha", "alice"]


def test_display_name_length_is_bounded(db_session, make_user):
    dana = make_user("dana")

    updated = profiles.update_profile(db_session, dana, ProfileUpdate(display_name="d" * 128))
    assert updated.display_name == "d" * 128

    with pytest.raises(ValidationError) as excinfo:
        profiles.update_profile(
            db_session, dana, ProfileUpdate(display_name="e" * 129, bio="untouched?")
        )
    assert excinfo.value.details == {"max_length": 128, "length": 129}
    db_session.refresh(dana)
    assert dana.display_name == "d" * 128
    assert dana.bio is None


def test_avatar_reference_length_is_bounded(db_session, make_user):
    erin = make_user("erin")

    profiles.update_profile(db_session, erin, ProfileUpdate(avatar_url="a" * 1024))
    with pytest.raises(ValidationError):
        profiles.update_profile(db_session, erin, ProfileUpdate(avatar_url="a" * 1025))

    stored = db_session.execute(select(User.avatar_url).where(User.id == erin.id)).scalar_one()
    assert stored == "a" * 1024


def test_blank_profile_fields_are_cleared(db_session, make_user):
    finn = make_user("finn", full_name="Finn")

    updated = profiles.update_profile(db_session, finn, ProfileUpdate(display_name="   ", bio=""))

    assert updated.display_name is None
    assert updated.bio is None


def test_media_reference_length_is_bounded(db_session, make_user):
    gail = make_user("gail")

    card = posts.create_post(db_session, gail.id, "m" * 1024)
    assert card.media_url == "m" * 1024

    with pytest.raises(ValidationError) as excinfo:
        posts.create_post(db_session, gail.id, "m" * 1025)
    assert excinfo.value.details["max_length"] == 1024
    total = db_session.execute(select(func.count()).select_from(Post)).scalar_one()
    assert total == 1
