from typing import Optional
from datetime import datetime
from pydantic import BaseModel
from ressly.models.enums import ReportCategory, ReportStatus, ReportUrgency


class ReportForm(BaseModel):
    """Raw multipart fields, validated by the report service rather than FastAPI."""

    resident_id: Optional[str] = None
    title: Optional[str] = None
    category: Optional[str] = None
    urgency: Optional[str] = None
    location: Optional[str] = None
    description: Optional[str] = None
    anonymous: Optional[str] = None
    public: Optional[str] = None


class ReportOut(BaseModel):
    id: str
    resident_id: Optional[str] = None
    title: str
    category: ReportCategory
    urgency: ReportUrgency
    location: Optional[str] = None
    description: str
    anonymous: bool
    public: bool
    status: ReportStatus
    created_at: datetime
    images: list[str]


class CommunityReportOut(ReportOut):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    resident_photo_url: Optional[str] = None
    vote_count: int
    user_vote: Optional[int] = None
