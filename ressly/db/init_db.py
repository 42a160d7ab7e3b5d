from typing import Optional

from sqlalchemy.engine import Engine
from sqlmodel import SQLModel

from ressly.core.config import Settings, settings
from ressly.models import (  # noqa: F401
    residential,
    house,
    resident,
    report,
    report_image,
    report_vote,
)


def init_db(engine: Engine, drop_all: bool = False, config: Optional[Settings] = None) -> None:
    config = config or settings
    if drop_all:
        SQLModel.metadata.drop_all(engine)
    if engine.url.get_backend_name() == 'sqlite' or config.ENV != 'production' or config.AUTO_CREATE_TABLES:
        SQLModel.metadata.create_all(engine)
