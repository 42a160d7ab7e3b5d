from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class VoteAction(str, Enum):
    CREATED = 'created'
    UPDATED = 'updated'
    REMOVED = 'removed'


class VoteCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    report_id: Optional[str] = Field(default=None, alias='reportId')
    voter_id: Optional[str] = Field(default=None, alias='voterId')
    # Kept loose so bad values map to invalid_vote_value rather than a schema error.
    value: Any = None


class VoteOut(BaseModel):
    report_id: str
    voter_id: str
    action: VoteAction
    value: Optional[int] = None
    vote_count: int
