from typing import Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from ressly.models.base import IDModel, TimestampModel


class ReportImage(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'report_images'
    __table_args__ = (sa.UniqueConstraint('report_id', 'position', name='uq_report_images_position'),)

    report_id: str = Field(foreign_key='reports.id', ondelete='CASCADE', index=True)
    url: str = Field(sa_column=sa.Column(sa.Text(), nullable=False))
    object_name: Optional[str] = None
    # Zero-based upload order, doubles as display order.
    position: int
