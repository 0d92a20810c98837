"""Tests for contest and category management."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as SchemaValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from photo_contest.models import Category, Contest, Photo
from photo_contest.schemas.contest import CategoryCreate, CategoryInput, ContestCreate, ContestUpdate
from photo_contest.services import contests as contest_service
from photo_contest.services.errors import (
    ConflictError,
    DuplicateCategoryError,
    NoActiveContestError,
    NotFoundError,
    ValidationError,
)
from photo_contest.services.settings_store import load_config, set_setting, VOTING_OPEN


def _active_count(db: Session) -> int:
    return db.query(Contest).filter(Contest.is_active.is_(True)).count()


def _add_photo(db: Session, category: Category, identity: str = "alice") -> Photo:
    photo = Photo(
        category_id=category.id,
        player_name=identity.title(),
        submitter_identity=identity,
        image_reference=f"memory://{identity}.png",
        width=1920,
        height=1080,
    )
    db.add(photo)
    db.commit()
    return photo


def test_create_contest_deactivates_previous(db_session, contest_factory) -> None:
    first = contest_factory("Summer Jam")
    second = contest_factory("Fall Jam")

    db_session.refresh(first)
    assert first.is_active is False
    assert second.is_active is True
    assert _active_count(db_session) == 1
    assert contest_service.get_active_contest(db_session).id == second.id


def test_create_contest_inserts_categories_in_order(active_contest) -> None:
    assert [c.name for c in active_contest.categories] == ["Best Vehicle", "Scenic"]
    assert [c.display_order for c in active_contest.categories] == [0, 1]
    assert all(c.emoji == "✨" for c in active_contest.categories)


def test_create_contest_rejects_repeated_category_names(db_session) -> None:
    payload = ContestCreate(
        name="Fall Jam",
        categories=[CategoryInput(name="Scenic"), CategoryInput(name="scenic")],
    )
    with pytest.raises(ValidationError):
        contest_service.create_contest(db_session, payload)
    assert db_session.query(Contest).count() == 0


def test_create_contest_stores_rules(db_session) -> None:
    contest_service.create_contest(
        db_session,
        ContestCreate(name="Fall Jam", categories=[CategoryInput(name="Scenic")], rules="# Be nice"),
    )
    assert load_config(db_session).rules_markdown == "# Be nice"


def test_archive_with_successor_launches_default_categories(db_session, active_contest) -> None:
    set_setting(db_session, VOTING_OPEN, True)
    db_session.commit()

    archived, replacement = contest_service.archive_contest(db_session, "Winter Jam")

    assert archived.id == active_contest.id
    assert archived.is_active is False
    assert replacement.name == "Winter Jam"
    assert [c.name for c in replacement.categories] == ["Best Vehicle", "Scenic Los Santos", "Action Shot"]
    assert _active_count(db_session) == 1
    assert load_config(db_session).voting_open is False


def test_archive_without_successor_leaves_no_active_contest(db_session, active_contest) -> None:
    archived, replacement = contest_service.archive_contest(db_session)

    assert archived.id == active_contest.id
    assert replacement is None
    assert contest_service.get_active_contest(db_session) is None
    assert contest_service.list_categories(db_session) == []


def test_archive_without_active_contest_requires_successor(db_session) -> None:
    with pytest.raises(NoActiveContestError):
        contest_service.archive_contest(db_session)

    archived, replacement = contest_service.archive_contest(db_session, "Winter Jam")
    assert archived is None
    assert replacement.is_active is True


def test_list_contests_filters_by_activity(db_session, contest_factory) -> None:
    old = contest_factory("Summer Jam")
    new = contest_factory("Fall Jam")

    assert [c.id for c in contest_service.list_contests(db_session)] == [new.id, old.id]
    assert [c.id for c in contest_service.list_contests(db_session, is_active=False)] == [old.id]
    assert [c.id for c in contest_service.list_contests(db_session, is_active=True)] == [new.id]


def test_list_categories_for_explicit_contest(db_session, contest_factory) -> None:
    old = contest_factory("Summer Jam", ("Drift",))
    contest_factory("Fall Jam")

    assert [c.name for c in contest_service.list_categories(db_session, old.id)] == ["Drift"]
    assert [c.name for c in contest_service.list_categories(db_session)] == ["Best Vehicle", "Scenic"]


def test_get_contest_missing(db_session) -> None:
    with pytest.raises(NotFoundError):
        contest_service.get_contest(db_session, 999)


def test_update_contest_reconciles_by_id(db_session, active_contest) -> None:
    vehicle, scenic = active_contest.categories
    payload = ContestUpdate(
        name="Fall Jam II",
        categories=[
            CategoryInput(id=scenic.id, name="Scenic Los Santos", description="Views"),
            CategoryInput(name="Action Shot"),
        ],
    )

    updated = contest_service.update_contest(db_session, active_contest.id, payload)

    assert updated.name == "Fall Jam II"
    names = [(c.name, c.display_order) for c in updated.categories]
    assert names == [("Scenic Los Santos", 0), ("Action Shot", 1)]
    assert updated.categories[0].id == scenic.id
    assert db_session.get(Category, vehicle.id) is None


def test_update_contest_keeps_schedule_unless_sent(db_session, active_contest) -> None:
    first = active_contest.categories[0]
    payload = ContestUpdate.model_validate(
        {
            "categories": [{"id": first.id, "name": first.name}],
            "voting_ends_at": "2030-01-01T00:00:00Z",
        }
    )
    updated = contest_service.update_contest(db_session, active_contest.id, payload)
    assert updated.voting_ends_at is not None

    payload = ContestUpdate(categories=[CategoryInput(id=first.id, name=first.name)])
    updated = contest_service.update_contest(db_session, active_contest.id, payload)
    assert updated.voting_ends_at is not None


def test_update_contest_refuses_to_drop_category_with_photos(db_session, active_contest) -> None:
    vehicle, scenic = active_contest.categories
    _add_photo(db_session, vehicle)

    with pytest.raises(ConflictError):
        contest_service.update_contest(
            db_session,
            active_contest.id,
            ContestUpdate(categories=[CategoryInput(id=scenic.id, name="Scenic")]),
        )
    assert db_session.get(Category, vehicle.id) is not None


def test_update_contest_rejects_foreign_category_ids(db_session, contest_factory) -> None:
    old = contest_factory("Summer Jam", ("Drift",))
    current = contest_factory("Fall Jam")

    with pytest.raises(ValidationError):
        contest_service.update_contest(
            db_session,
            current.id,
            ContestUpdate(categories=[CategoryInput(id=old.categories[0].id, name="Drift")]),
        )


def test_add_category_appends_to_active_contest(db_session, active_contest) -> None:
    category = contest_service.add_category(db_session, CategoryCreate(name="Action Shot"))

    assert category.contest_id == active_contest.id
    assert category.display_order == 2


def test_add_category_duplicate_name(db_session, active_contest) -> None:
    with pytest.raises(DuplicateCategoryError):
        contest_service.add_category(db_session, CategoryCreate(name="Scenic"))


def test_add_category_without_active_contest(db_session) -> None:
    with pytest.raises(NoActiveContestError):
        contest_service.add_category(db_session, CategoryCreate(name="Scenic"))


def _fail_commit_after_flush(monkeypatch, db: Session) -> None:
    """Make the next commit write everything, then fail before it lands."""

    def failing_commit() -> None:
        db.flush()
        raise IntegrityError("COMMIT", {}, Exception("database went away"))

    monkeypatch.setattr(db, "commit", failing_commit)


def test_update_contest_swaps_category_names(db_session, active_contest) -> None:
    vehicle, scenic = active_contest.categories
    payload = ContestUpdate(
        categories=[
            CategoryInput(id=vehicle.id, name="Scenic"),
            CategoryInput(id=scenic.id, name="Best Vehicle"),
        ]
    )

    updated = contest_service.update_contest(db_session, active_contest.id, payload)

    assert [(c.id, c.name) for c in updated.categories] == [(vehicle.id, "Scenic"), (scenic.id, "Best Vehicle")]


def test_update_contest_hands_old_name_to_new_category(db_session, active_contest) -> None:
    vehicle, scenic = active_contest.categories
    payload = ContestUpdate(
        categories=[
            CategoryInput(id=vehicle.id, name="Best Car"),
            CategoryInput(id=scenic.id, name="Scenic"),
            CategoryInput(name="Best Vehicle"),
        ]
    )

    updated = contest_service.update_contest(db_session, active_contest.id, payload)

    assert [c.name for c in updated.categories] == ["Best Car", "Scenic", "Best Vehicle"]
    assert updated.categories[0].id == vehicle.id


def test_failed_launch_keeps_previous_contest_active(db_session, monkeypatch, contest_factory) -> None:
    current = contest_factory("Fall Jam")
    _fail_commit_after_flush(monkeypatch, db_session)

    with pytest.raises(ConflictError):
        contest_service.create_contest(
            db_session,
            ContestCreate(name="Winter Jam", categories=[CategoryInput(name="Snow")]),
        )
    monkeypatch.undo()

    assert _active_count(db_session) == 1
    assert contest_service.get_active_contest(db_session).id == current.id
    assert db_session.query(Contest).count() == 1
    assert db_session.query(Category).filter(Category.name == "Snow").count() == 0


def test_failed_archive_changes_nothing(db_session, monkeypatch, active_contest) -> None:
    set_setting(db_session, VOTING_OPEN, True)
    db_session.commit()
    _fail_commit_after_flush(monkeypatch, db_session)

    with pytest.raises(ConflictError):
        contest_service.archive_contest(db_session, "Winter Jam")
    monkeypatch.undo()

    assert contest_service.get_active_contest(db_session).id == active_contest.id
    assert db_session.query(Contest).count() == 1
    assert load_config(db_session).voting_open is True


def test_failed_update_changes_nothing(db_session, monkeypatch, active_contest) -> None:
    vehicle, scenic = active_contest.categories
    _fail_commit_after_flush(monkeypatch, db_session)

    with pytest.raises(DuplicateCategoryError):
        contest_service.update_contest(
            db_session,
            active_contest.id,
            ContestUpdate(
                name="Renamed",
                categories=[CategoryInput(id=scenic.id, name="Views"), CategoryInput(name="Action Shot")],
            ),
        )
    monkeypatch.undo()

    contest = contest_service.get_contest(db_session, active_contest.id)
    assert contest.name == "Fall Jam"
    assert [(c.id, c.name) for c in contest_service.list_categories(db_session, contest.id)] == [
        (vehicle.id, "Best Vehicle"),
        (scenic.id, "Scenic"),
    ]


@pytest.mark.parametrize(
    "build",
    [
        lambda: ContestCreate(name="   ", categories=[CategoryInput(name="Scenic")]),
        lambda: ContestCreate(name="Fall Jam", categories=[CategoryInput(name="  ")]),
        lambda: ContestUpdate(name=" ", categories=[CategoryInput(name="Scenic")]),
        lambda: CategoryCreate(name="\t"),
    ],
)
def test_blank_contest_and_category_names_fail_validation(build) -> None:
    with pytest.raises(SchemaValidationError):
        build()
