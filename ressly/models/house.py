from sqlmodel import Field, SQLModel
from ressly.models.base import IDModel, TimestampModel


class House(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'houses'

    house_number: str
    residential_id: str = Field(foreign_key='residentials.id', ondelete='CASCADE', index=True)
