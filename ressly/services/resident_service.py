from typing import Optional
from sqlmodel import Session, select
from ressly.core.errors import NotFoundError
from ressly.models.resident import Resident


def get_resident(session: Session, resident_id: str) -> Optional[Resident]:
    return session.exec(select(Resident).where(Resident.id == resident_id)).first()


def require_resident(session: Session, resident_id: str, kind: str = 'resident_not_found') -> Resident:
    resident = get_resident(session, resident_id)
    if not resident:
        raise NotFoundError('Resident not found', kind=kind)
    return resident
