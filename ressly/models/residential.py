from sqlmodel import SQLModel
from ressly.models.base import IDModel, TimestampModel


class Residential(IDModel, TimestampModel, SQLModel, table=True):
    __tablename__ = 'residentials'

    name: str
