"""Likes, comments, bookmarks and post lifecycle."""

from __future__ import annotations

import pytest
from sqlalchemy import func, select

from app.core.errors import ForbiddenError, NotFoundError, ValidationError
from app.models import Comment, Like, SavedPost
from app.services import engagement, posts


def _count(db_session, model) -> int:
    return db_session.execute(select(func.count()).select_from(model)).scalar_one()


@pytest.fixture()
def post(db_session, make_user):
    owner = make_user("owner")
    card = posts.create_post(db_session, owner.id, "media/abc.jpg", "  sunset  ")
    return card


def test_create_post_trims_caption(post):
    assert post.caption == "sunset"
    assert post.like_count == 0
    assert post.comment_count == 0
    assert post.owner.handle == "owner"


def test_create_post_requires_media(db_session, make_user):
    owner = make_user("owner")
    with pytest.raises(ValidationError):
        posts.create_post(db_session, owner.id, "   ")


def test_caption_length_is_bounded(db_session, make_user):
    owner = make_user("owner")
    with pytest.raises(ValidationError):
        posts.create_post(db_session, owner.id, "media/x.jpg", "x" * 2201)


def test_like_toggle_is_idempotent(db_session, make_user, post):
    fan = make_user("fan")

    engagement.toggle_like(db_session, post.id, fan.id, True)
    state = engagement.toggle_like(db_session, post.id, fan.id, True)
    assert state.liked is True
    assert state.like_count == 1
    assert _count(db_session, Like) == 1

    engagement.toggle_like(db_session, post.id, fan.id, False)
    state = engagement.toggle_like(db_session, post.id, fan.id, False)
    assert state.liked is False
    assert state.like_count == 0


def test_like_counts_are_live(db_session, make_user, post):
    fans = [make_user(f"fan{i}") for i in range(3)]
    for fan in fans:
        engagement.toggle_like(db_session, post.id, fan.id, True)
    engagement.toggle_like(db_session, post.id, fans[0].id, False)

    assert engagement.like_count(db_session, post.id) == 2
    assert not engagement.is_liked(db_session, post.id, fans[0].id)
    assert engagement.is_liked(db_session, post.id, fans[1].id)


def test_like_unknown_post(db_session, make_user):
    fan = make_user("fan")
    with pytest.raises(NotFoundError):
        engagement.toggle_like(db_session, 404, fan.id, True)


@pytest.mark.parametrize("content", ["", "   ", "x" * 1001])
def test_comment_bounds_rejected(db_session, make_user, post, content):
    author = make_user("author")
    with pytest.raises(ValidationError):
        engagement.add_comment(db_session, post.id, author.id, content)
    assert _count(db_session, Comment) == 0


def test_comment_at_limit_is_accepted(db_session, make_user, post):
    author = make_user("author")

    comment = engagement.add_comment(db_session, post.id, author.id, "x" * 1000)

    assert len(comment.content) == 1000
    assert comment.author.handle == "author"
    assert engagement.comment_count(db_session, post.id) == 1


def test_comments_listed_newest_first(db_session, make_user, post):
    author = make_user("author")
    first = engagement.add_comment(db_session, post.id, author.id, "first")
    second = engagement.add_comment(db_session, post.id, author.id, " second ")

    comments = engagement.list_comments(db_session, post.id)

    assert [comment.id for comment in comments] == [second.id, first.id]
    assert comments[0].content == "second"


def test_only_author_deletes_comment(db_session, make_user, post):
    author = make_user("author")
    other = make_user("other")
    comment = engagement.add_comment(db_session, post.id, author.id, "hello")

    with pytest.raises(ForbiddenError):
        engagement.delete_comment(db_session, comment.id, other.id)
    engagement.delete_comment(db_session, comment.id, author.id)

    assert _count(db_session, Comment) == 0
    with pytest.raises(NotFoundError):
        engagement.delete_comment(db_session, comment.id, author.id)


def test_save_toggle_is_idempotent(db_session, make_user, post):
    reader = make_user("reader")

    engagement.toggle_save(db_session, post.id, reader.id, True)
    engagement.toggle_save(db_session, post.id, reader.id, True)

    assert _count(db_session, SavedPost) == 1
    saved = posts.list_saved_posts(db_session, reader.id)
    assert [card.id for card in saved] == [post.id]
    assert saved[0].is_saved is True

    state = engagement.toggle_save(db_session, post.id, reader.id, False)
    assert state.saved is False
    assert posts.list_saved_posts(db_session, reader.id) == []


def test_post_card_reflects_viewer(db_session, make_user, post):
    fan = make_user("fan")
    engagement.toggle_like(db_session, post.id, fan.id, True)
    engagement.add_comment(db_session, post.id, fan.id, "nice")

    detail = posts.post_detail(db_session, post.id, fan.id)
    anonymous = posts.post_detail(db_session, post.id, None)

    assert detail.like_count == 1
    assert detail.comment_count == 1
    assert detail.is_liked is True
    assert anonymous.is_liked is False
    assert [comment.content for comment in detail.comments] == ["nice"]


def test_delete_post_cascades(db_session, make_user, post):
    fan = make_user("fan")
    engagement.toggle_like(db_session, post.id, fan.id, True)
    engagement.toggle_save(db_session, post.id, fan.id, True)
    engagement.add_comment(db_session, post.id, fan.id, "bye")

    with pytest.raises(ForbiddenError):
        posts.delete_post(db_session, post.id, fan.id)
    posts.delete_post(db_session, post.id, post.owner.id)

    assert _count(db_session, Like) == 0
    assert _count(db_session, SavedPost) == 0
    assert _count(db_session, Comment) == 0
    with pytest.raises(NotFoundError):
        posts.post_detail(db_session, post.id, fan.id)
