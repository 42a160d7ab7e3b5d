from typing import Optional
import sqlalchemy as sa
from sqlmodel import Field, SQLModel
from ressly.models.base import IDModel, TimestampModel


class Resident(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'residents'

    first_name: str
    last_name: str
    email: str = Field(index=True, unique=True)
    phone_number: Optional[str] = None
    resident_photo_url: Optional[str] = Field(default=None, sa_column=sa.Column(sa.Text()))
    house_id: str = Field(foreign_key='houses.id', ondelete='CASCADE', index=True)
