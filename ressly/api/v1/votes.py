from fastapi import APIRouter, Depends, Response, status
from sqlmodel import Session
from ressly.db.session import get_session
from ressly.schemas.vote import VoteAction, VoteCreate, VoteOut
from ressly.services.vote_service import cast_vote, get_vote_total, remove_vote

router = APIRouter(prefix='/votes', tags=['votes'])


@router.post('', response_model=VoteOut, responses={201: {'model': VoteOut}})
def cast_vote_endpoint(
    payload: VoteCreate,
    response: Response,
    session: Session = Depends(get_session),
) -> VoteOut:
    result = cast_vote(session, payload.report_id, payload.voter_id, payload.value)
    if result.action == VoteAction.CREATED:
        response.status_code = status.HTTP_201_CREATED
    return VoteOut(
        report_id=payload.report_id,
        voter_id=payload.voter_id,
        action=result.action,
        value=result.value,
        vote_count=get_vote_total(session, payload.report_id),
    )


@router.delete('/{report_id}/{voter_id}')
def remove_vote_endpoint(
    report_id: str,
    voter_id: str,
    session: Session = Depends(get_session),
) -> dict:
    remove_vote(session, report_id, voter_id)
    return {'status': 'ok'}
