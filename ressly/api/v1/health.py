from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlmodel import Session
from ressly.db.session import get_session

router = APIRouter()


@router.get('/health')
def health(session: Session = Depends(get_session)) -> dict:
    session.exec(text('SELECT 1'))
    return {'status': 'ok', 'database': 'ok'}
