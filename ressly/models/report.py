from typing import Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from ressly.models.base import IDModel, TimestampModel
from ressly.models.enums import ReportCategory, ReportStatus, ReportUrgency, enum_column


class Report(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'reports'

    resident_id: str = Field(foreign_key='residents.id', ondelete='CASCADE', index=True)
    title: str
    category: ReportCategory = Field(sa_column=enum_column(ReportCategory, 'report_category'))
    urgency: ReportUrgency = Field(sa_column=enum_column(ReportUrgency, 'report_urgency'))
    location: Optional[str] = None
    description: str = Field(sa_column=sa.Column(sa.Text(), nullable=False))
    anonymous: bool = False
    public: bool = Field(default=False, index=True)
    status: ReportStatus = Field(
        default=ReportStatus.PENDING,
        sa_column=enum_column(ReportStatus, 'report_status'),
    )
