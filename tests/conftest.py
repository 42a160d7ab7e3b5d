import os
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from ressly.core.errors import UploadError
from ressly.db.init_db import init_db
from ressly.db.session import Database
from ressly.main import create_app
from ressly.models import House, Report, ReportImage, ReportVote, Resident, Residential
from ressly.models.base import utc_now
from ressly.models.enums import ReportCategory, ReportUrgency
from ressly.services.image_store import ImageFolder, StoredImage


class FakeImageStore:
    """In-memory stand-in for the object store.

    ``fail_on`` is the 1-based number of the upload that should fail.
    """

    def __init__(self, fail_on: Optional[int] = None) -> None:
        self.fail_on = fail_on
        self.uploads = 0
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.closed = False

    def upload(self, data: bytes, folder: ImageFolder, filename=None, content_type=None) -> StoredImage:
        self.uploads += 1
        if self.fail_on is not None and self.uploads == self.fail_on:
            raise UploadError(f"Could not store image {filename}")
        object_name = f"{folder.value}/{self.uploads}-{filename or 'blob'}"
        self.objects[object_name] = data
        return StoredImage(url=f"https://images.test/{object_name}", object_name=object_name)

    def delete(self, object_name: str) -> bool:
        self.deleted.append(object_name)
        return self.objects.pop(object_name, None) is not None

    def close(self) -> None:
        self.closed = True


@dataclass
class Community:
    residential_id: str
    other_residential_id: str
    alice: str
    bob: str
    carol: str
    outsider: str


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'ressly-test.db'}")
    init_db(db.engine, drop_all=True)
    yield db
    db.dispose()


@pytest.fixture
def session(database):
    with database.session() as db_session:
        yield db_session


@pytest.fixture
def image_store():
    return FakeImageStore()


@pytest.fixture
def client(database, image_store):
    app = create_app(database=database, image_store=image_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def community(database) -> Community:
    with database.session() as db_session:
        residential = Residential(name="Los Olivos")
        other = Residential(name="Las Palmas")
        db_session.add_all([residential, other])
        db_session.flush()
        house = House(house_number="12", residential_id=residential.id)
        other_house = House(house_number="7", residential_id=other.id)
        db_session.add_all([house, other_house])
        db_session.flush()
        residents = [
            Resident(first_name="Alice", last_name="Ramos", email="alice@example.com",
                     resident_photo_url="https://images.test/residents/alice.jpg", house_id=house.id),
            Resident(first_name="Bob", last_name="Soto", email="bob@example.com", house_id=house.id),
            Resident(first_name="Carol", last_name="Vega", email="carol@example.com", house_id=house.id),
            Resident(first_name="Dave", last_name="Luna", email="dave@example.com", house_id=other_house.id),
        ]
        db_session.add_all(residents)
        db_session.commit()
        return Community(
            residential_id=residential.id,
            other_residential_id=other.id,
            alice=residents[0].id,
            bob=residents[1].id,
            carol=residents[2].id,
            outsider=residents[3].id,
        )


@pytest.fixture
def make_report(database):
    """Insert a report straight into the database, bypassing uploads."""

    def _make(
        resident_id: str,
        title: str = "Broken gate",
        public: bool = True,
        anonymous: bool = False,
        created_at: Optional[datetime] = None,
        images: int = 1,
    ) -> str:
        with database.session() as db_session:
            report = Report(
                resident_id=resident_id,
                title=title,
                category=ReportCategory.SECURITY,
                urgency=ReportUrgency.HIGH,
                description="The main gate does not close.",
                public=public,
                anonymous=anonymous,
                created_at=created_at or utc_now(),
            )
            db_session.add(report)
            db_session.flush()
            for position in range(images):
                db_session.add(
                    ReportImage(
                        report_id=report.id,
                        url=f"https://images.test/reports/{report.id}-{position}.jpg",
                        position=position,
                    )
                )
            db_session.commit()
            return report.id

    return _make


@pytest.fixture
def add_vote(database):
    def _add(report_id: str, resident_id: str, value: int) -> None:
        with database.session() as db_session:
            db_session.add(ReportVote(report_id=report_id, resident_id=resident_id, value=value))
            db_session.commit()

    return _add
