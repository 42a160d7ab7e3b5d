from datetime import datetime, timedelta
from enum import Enum
from typing import Optional

from sqlalchemy import case, func
from sqlmodel import Session, select

from ressly.core.errors import ValidationError
from ressly.models.base import utc_now
from ressly.models.house import House
from ressly.models.report import Report
from ressly.models.report_vote import ReportVote
from ressly.models.resident import Resident
from ressly.schemas.report import CommunityReportOut
from ressly.services.form_utils import clean_text
from ressly.services.report_service import load_images


class FeedWindow(str, Enum):
    ALL = 'all'
    WEEK = 'week'
    MONTH = 'month'


WINDOW_DAYS = {FeedWindow.WEEK: 7, FeedWindow.MONTH: 30}
WINDOW_ALIASES = {'todas': FeedWindow.ALL, 'semana': FeedWindow.WEEK, 'mes': FeedWindow.MONTH}


def parse_window(raw: Optional[str]) -> FeedWindow:
    text = (raw or '').strip().lower()
    if not text:
        return FeedWindow.ALL
    if text in WINDOW_ALIASES:
        return WINDOW_ALIASES[text]
    try:
        return FeedWindow(text)
    except ValueError:
        raise ValidationError('window must be one of: all, week, month', kind='invalid_time_window') from None


def window_start(window: FeedWindow, now: Optional[datetime] = None) -> Optional[datetime]:
    days = WINDOW_DAYS.get(window)
    if days is None:
        return None
    return (now or utc_now()) - timedelta(days=days)


def list_community_feed(
    session: Session,
    residential_id: Optional[str],
    window: FeedWindow = FeedWindow.ALL,
    caller_id: Optional[str] = None,
) -> list[CommunityReportOut]:
    """Public reports of a residential, best voted first.

    Ties on the vote total go to the newest report. ``user_vote`` is the
    caller's own vote when ``caller_id`` is given. Author fields are blanked
    for anonymous reports.
    """
    residential_id = clean_text(residential_id)
    if not residential_id:
        raise ValidationError('residential_id is required', kind='missing_field')
    caller_id = clean_text(caller_id)

    vote_count = func.coalesce(func.sum(ReportVote.value), 0).label('vote_count')
    columns = [Report, Resident, vote_count]
    if caller_id:
        columns.append(
            func.max(case((ReportVote.resident_id == caller_id, ReportVote.value), else_=None)).label('user_vote')
        )

    statement = (
        select(*columns)
        .join(Resident, Resident.id == Report.resident_id)
        .join(House, House.id == Resident.house_id)
        .outerjoin(ReportVote, ReportVote.report_id == Report.id)
        .where(House.residential_id == residential_id)
        .where(Report.public.is_(True))
    )
    since = window_start(window)
    if since is not None:
        statement = statement.where(Report.created_at >= since)
    statement = statement.group_by(Report.id, Resident.id).order_by(
        vote_count.desc(), Report.created_at.desc()
    )

    rows = session.exec(statement).all()
    images = load_images(session, [row[0].id for row in rows])
    entries: list[CommunityReportOut] = []
    for row in rows:
        report, author, total = row[0], row[1], row[2]
        user_vote = row[3] if caller_id else None
        entries.append(_to_feed_entry(report, author, int(total or 0), user_vote, images[report.id]))
    return entries


def _to_feed_entry(
    report: Report,
    author: Resident,
    vote_count: int,
    user_vote: Optional[int],
    images: list[str],
) -> CommunityReportOut:
    hidden = report.anonymous
    return CommunityReportOut(
        id=report.id,
        resident_id=None if hidden else report.resident_id,
        title=report.title,
        category=report.category,
        urgency=report.urgency,
        location=report.location,
        description=report.description,
        anonymous=report.anonymous,
        public=report.public,
        status=report.status,
        created_at=report.created_at,
        images=images,
        first_name=None if hidden else author.first_name,
        last_name=None if hidden else author.last_name,
        resident_photo_url=None if hidden else author.resident_photo_url,
        vote_count=vote_count,
        user_vote=int(user_vote) if user_vote is not None else None,
    )
