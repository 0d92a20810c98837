"""Leaderboards, winners and analytics derived from a contest snapshot.

Everything except ``load_snapshot`` is a pure function of the snapshot it is
given, so live views and tests compute identical results from identical data.
Views are rebuilt from the full snapshot on every read.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, tzinfo

from sqlalchemy import func
from sqlalchemy.orm import Session

from photo_contest.db.time import as_utc
from photo_contest.models import Category, Contest, Photo, Vote


@dataclass(frozen=True)
class CategorySnapshot:
    id: int
    name: str
    description: str
    emoji: str | None
    display_order: int


@dataclass(frozen=True)
class PhotoSnapshot:
    id: int
    category_id: int
    player_name: str
    submitter_identity: str
    image_reference: str
    caption: str | None
    created_at: datetime
    vote_count: int


@dataclass(frozen=True)
class ContestSnapshot:
    contest_id: int
    contest_name: str
    categories: tuple[CategorySnapshot, ...]
    photos: tuple[PhotoSnapshot, ...]


@dataclass(frozen=True)
class CategoryWinner:
    category: CategorySnapshot
    photo: PhotoSnapshot | None


@dataclass(frozen=True)
class PlayerTotal:
    submitter_identity: str
    player_name: str
    votes: int
    submissions: int


@dataclass(frozen=True)
class DailySubmissions:
    day: date
    submissions: int


@dataclass(frozen=True)
class CategoryStats:
    category_id: int
    name: str
    count: int
    votes: int


@dataclass(frozen=True)
class RankedPhoto:
    photo: PhotoSnapshot
    rank: int
    category_share_pct: int


@dataclass(frozen=True)
class CategoryView:
    category: CategorySnapshot
    photos: list[RankedPhoto]
    winner: PhotoSnapshot | None


@dataclass(frozen=True)
class ContestView:
    contest_id: int
    contest_name: str
    total_submissions: int
    total_votes: int
    categories: list[CategoryView] = field(default_factory=list)
    leaderboard: list[PlayerTotal] = field(default_factory=list)


@dataclass(frozen=True)
class AnalyticsReport:
    contest_id: int
    total_submissions: int
    total_votes: int
    submissions_per_day: list[DailySubmissions]
    category_distribution: list[CategoryStats]
    leaderboard: list[PlayerTotal]


def load_snapshot(db: Session, contest: Contest) -> ContestSnapshot:
    """Read a contest's categories and photos (with vote totals) in one pass."""
    categories = (
        db.query(Category)
        .filter(Category.contest_id == contest.id)
        .order_by(Category.display_order, Category.id)
        .all()
    )
    vote_count = func.count(Vote.id).label("vote_count")
    rows = (
        db.query(Photo, vote_count)
        .join(Category, Category.id == Photo.category_id)
        .outerjoin(Vote, Vote.photo_id == Photo.id)
        .filter(Category.contest_id == contest.id)
        .group_by(Photo.id)
        .all()
    )
    return ContestSnapshot(
        contest_id=contest.id,
        contest_name=contest.name,
        categories=tuple(
            CategorySnapshot(
                id=category.id,
                name=category.name,
                description=category.description,
                emoji=category.emoji,
                display_order=category.display_order,
            )
            for category in categories
        ),
        photos=tuple(
            PhotoSnapshot(
                id=photo.id,
                category_id=photo.category_id,
                player_name=photo.player_name,
                submitter_identity=photo.submitter_identity,
                image_reference=photo.image_reference,
                caption=photo.caption,
                created_at=as_utc(photo.created_at),
                vote_count=int(count or 0),
            )
            for photo, count in rows
        ),
    )


def _standing(photo: PhotoSnapshot) -> tuple[int, datetime, int]:
    # Most votes first; ties go to the earliest submission.
    return (-photo.vote_count, photo.created_at, photo.id)


def _by_category(photos: Iterable[PhotoSnapshot]) -> dict[int, list[PhotoSnapshot]]:
    grouped: dict[int, list[PhotoSnapshot]] = defaultdict(list)
    for photo in photos:
        grouped[photo.category_id].append(photo)
    return grouped


def winner_per_category(
    categories: Sequence[CategorySnapshot],
    photos: Iterable[PhotoSnapshot],
) -> list[CategoryWinner]:
    """Return the top photo of each category, ``None`` for empty categories."""
    grouped = _by_category(photos)
    return [
        CategoryWinner(
            category=category,
            photo=min(grouped[category.id], key=_standing) if grouped.get(category.id) else None,
        )
        for category in categories
    ]


def leaderboard_by_votes(photos: Iterable[PhotoSnapshot]) -> list[PlayerTotal]:
    """Sum votes per submitter, highest first.

    Ties fall back to more submissions, then to the player name.
    """
    totals: dict[str, dict[str, object]] = {}
    for photo in sorted(photos, key=lambda p: (p.created_at, p.id)):
        entry = totals.setdefault(
            photo.submitter_identity,
            {"player_name": photo.player_name, "votes": 0, "submissions": 0},
        )
        entry["votes"] = int(entry["votes"]) + photo.vote_count
        entry["submissions"] = int(entry["submissions"]) + 1

    board = [
        PlayerTotal(
            submitter_identity=identity,
            player_name=str(entry["player_name"]),
            votes=int(entry["votes"]),
            submissions=int(entry["submissions"]),
        )
        for identity, entry in totals.items()
    ]
    board.sort(key=lambda t: (-t.votes, -t.submissions, t.player_name.casefold(), t.submitter_identity))
    return board


def submissions_per_day(photos: Iterable[PhotoSnapshot], tz: tzinfo = UTC) -> list[DailySubmissions]:
    """Count submissions per calendar day (UTC unless ``tz`` says otherwise)."""
    counts: dict[date, int] = defaultdict(int)
    for photo in photos:
        counts[photo.created_at.astimezone(tz).date()] += 1
    return [DailySubmissions(day=day, submissions=counts[day]) for day in sorted(counts)]


def category_distribution(
    categories: Sequence[CategorySnapshot],
    photos: Iterable[PhotoSnapshot],
) -> list[CategoryStats]:
    """Per-category submission count and vote sum, busiest category first."""
    grouped = _by_category(photos)
    stats = [
        (
            category.display_order,
            CategoryStats(
                category_id=category.id,
                name=category.name,
                count=len(grouped.get(category.id, [])),
                votes=sum(p.vote_count for p in grouped.get(category.id, [])),
            ),
        )
        for category in categories
    ]
    stats.sort(key=lambda pair: (-pair[1].count, pair[0], pair[1].category_id))
    return [entry for _, entry in stats]


def category_share_pct(photo: PhotoSnapshot, category_photos: Iterable[PhotoSnapshot]) -> int:
    """Share of its category's votes held by ``photo``, as a whole percentage."""
    total = sum(p.vote_count for p in category_photos)
    if total <= 0:
        return 0
    return min(100, max(0, round(photo.vote_count * 100 / total)))


def build_contest_view(snapshot: ContestSnapshot) -> ContestView:
    """Project a snapshot into the data the contest page renders."""
    grouped = _by_category(snapshot.photos)
    category_views = []
    for category in snapshot.categories:
        ranked = sorted(grouped.get(category.id, []), key=_standing)
        category_views.append(
            CategoryView(
                category=category,
                photos=[
                    RankedPhoto(photo=photo, rank=position, category_share_pct=category_share_pct(photo, ranked))
                    for position, photo in enumerate(ranked, start=1)
                ],
                winner=ranked[0] if ranked else None,
            )
        )

    return ContestView(
        contest_id=snapshot.contest_id,
        contest_name=snapshot.contest_name,
        total_submissions=len(snapshot.photos),
        total_votes=sum(p.vote_count for p in snapshot.photos),
        categories=category_views,
        leaderboard=leaderboard_by_votes(snapshot.photos),
    )


def build_analytics(snapshot: ContestSnapshot, tz: tzinfo = UTC) -> AnalyticsReport:
    """Assemble the admin analytics dashboard figures."""
    return AnalyticsReport(
        contest_id=snapshot.contest_id,
        total_submissions=len(snapshot.photos),
        total_votes=sum(p.vote_count for p in snapshot.photos),
        submissions_per_day=submissions_per_day(snapshot.photos, tz),
        category_distribution=category_distribution(snapshot.categories, snapshot.photos),
        leaderboard=leaderboard_by_votes(snapshot.photos),
    )
