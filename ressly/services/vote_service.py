from dataclasses import dataclass
from typing import Any, Optional

from loguru import logger
from sqlalchemy import func
from sqlmodel import Session, select

from ressly.core.errors import ConflictError, NotFoundError, PermissionDenied, ValidationError
from ressly.db.session import transaction
from ressly.models.report import Report
from ressly.models.report_vote import ReportVote
from ressly.schemas.vote import VoteAction
from ressly.services.resident_service import get_resident

VOTE_VALUES = (1, -1)


@dataclass(frozen=True)
class VoteResult:
    action: VoteAction
    value: Optional[int]


def _validate_value(value: Any) -> int:
    # bool is an int subclass; True must not count as an upvote.
    if isinstance(value, bool) or not isinstance(value, int) or value not in VOTE_VALUES:
        raise ValidationError('Vote value must be 1 (upvote) or -1 (downvote)', kind='invalid_vote_value')
    return value


def _ensure_votable(session: Session, report_id: str, voter_id: str) -> None:
    report = session.exec(select(Report).where(Report.id == report_id)).first()
    if not report:
        raise NotFoundError('Report not found', kind='report_not_found')
    if not report.public:
        raise PermissionDenied('Votes are only allowed on public reports')
    if not get_resident(session, voter_id):
        raise NotFoundError('Voter not found', kind='voter_not_found')


def _find_vote(session: Session, report_id: str, voter_id: str) -> Optional[ReportVote]:
    return session.exec(
        select(ReportVote).where(
            (ReportVote.report_id == report_id) & (ReportVote.resident_id == voter_id)
        )
    ).first()


def _toggle(session: Session, report_id: str, voter_id: str, value: int) -> VoteResult:
    existing = _find_vote(session, report_id, voter_id)
    if existing is None:
        session.add(ReportVote(report_id=report_id, resident_id=voter_id, value=value))
        session.flush()
        return VoteResult(VoteAction.CREATED, value)
    if existing.value == value:
        session.delete(existing)
        session.flush()
        return VoteResult(VoteAction.REMOVED, None)
    existing.value = value
    session.add(existing)
    session.flush()
    return VoteResult(VoteAction.UPDATED, value)


def cast_vote(session: Session, report_id: Optional[str], voter_id: Optional[str], value: Any) -> VoteResult:
    """Apply the toggle policy for one (report, voter) pair.

    No vote -> the value is stored. Same value again -> the vote is removed.
    Opposite value -> the vote is flipped.

    The composite primary key decides races. If a concurrent request inserted
    the row between our read and our insert, the toggle runs once more against
    the row that won.
    """
    if not report_id or not voter_id or value is None:
        raise ValidationError('report_id, voter_id and value are required', kind='missing_field')
    value = _validate_value(value)

    try:
        with transaction(session):
            _ensure_votable(session, report_id, voter_id)
            result = _toggle(session, report_id, voter_id, value)
    except ConflictError:
        logger.info("concurrent vote on report {} by {}, re-applying", report_id, voter_id)
        with transaction(session):
            _ensure_votable(session, report_id, voter_id)
            result = _toggle(session, report_id, voter_id, value)
    logger.info("vote {} on report {} by {}", result.action.value, report_id, voter_id)
    return result


def remove_vote(session: Session, report_id: str, voter_id: str) -> None:
    with transaction(session):
        record = _find_vote(session, report_id, voter_id)
        if record is None:
            raise NotFoundError('Vote not found', kind='vote_not_found')
        session.delete(record)
    logger.info("vote on report {} by {} removed", report_id, voter_id)


def get_vote_total(session: Session, report_id: str) -> int:
    statement = select(func.coalesce(func.sum(ReportVote.value), 0)).where(ReportVote.report_id == report_id)
    result = session.exec(statement).one()
    return int(result or 0)
