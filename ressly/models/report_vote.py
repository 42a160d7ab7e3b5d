import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from ressly.models.base import TimestampModel


class ReportVote(TimestampModel, SQLModel, table=True):
    __tablename__ = 'report_votes'
    __table_args__ = (sa.CheckConstraint('value IN (-1, 1)', name='ck_report_votes_value'),)

    report_id: str = Field(foreign_key='reports.id', ondelete='CASCADE', primary_key=True)
    resident_id: str = Field(foreign_key='residents.id', ondelete='CASCADE', primary_key=True)
    value: int
