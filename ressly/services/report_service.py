from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, TypeVar

from loguru import logger
from sqlmodel import Session, select

from ressly.core.errors import ConflictError, NotFoundError, PersistenceError, ValidationError
from ressly.db.session import transaction
from ressly.models.enums import ReportCategory, ReportUrgency
from ressly.models.report import Report
from ressly.models.report_image import ReportImage
from ressly.schemas.report import ReportForm, ReportOut
from ressly.services.form_utils import clean_text, parse_flag
from ressly.services.image_store import ImageFolder, ImageStore, StoredImage
from ressly.services.resident_service import require_resident

REQUIRED_FIELDS = ('title', 'category', 'urgency', 'description', 'resident_id')
DEFAULT_MAX_IMAGES = 5

E = TypeVar('E', bound=Enum)


@dataclass(frozen=True)
class ImageUpload:
    data: bytes
    filename: Optional[str] = None
    content_type: Optional[str] = None


def _parse_enum(enum_cls: type[E], raw: str, kind: str, label: str) -> E:
    text = raw.strip()
    for member in enum_cls:
        if member.value == text:
            return member
    # Also accept member names such as "CommonAreas" or "common_areas".
    key = text.replace(' ', '').replace('_', '').upper()
    for member in enum_cls:
        if member.name.replace('_', '') == key:
            return member
    allowed = ', '.join(member.value for member in enum_cls)
    raise ValidationError(f"{label} is not valid. Expected one of: {allowed}", kind=kind)


def build_report(payload: ReportForm, images: list[ImageUpload], max_images: int = DEFAULT_MAX_IMAGES) -> Report:
    """Check every precondition that needs no database access and build the row."""
    missing = [name for name in REQUIRED_FIELDS if not clean_text(getattr(payload, name))]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", kind='missing_field')
    category = _parse_enum(ReportCategory, payload.category, 'invalid_category', 'Category')
    urgency = _parse_enum(ReportUrgency, payload.urgency, 'invalid_urgency', 'Urgency')
    if not 1 <= len(images) <= max_images:
        raise ValidationError(
            f"A report needs between 1 and {max_images} images, got {len(images)}",
            kind='image_count_out_of_range',
        )
    empty = [image.filename or str(index) for index, image in enumerate(images) if not image.data]
    if empty:
        raise ValidationError(f"Images are empty: {', '.join(empty)}", kind='empty_image')
    return Report(
        resident_id=clean_text(payload.resident_id),
        title=clean_text(payload.title),
        category=category,
        urgency=urgency,
        location=clean_text(payload.location),
        description=clean_text(payload.description),
        anonymous=parse_flag(payload.anonymous, 'anonymous'),
        public=parse_flag(payload.public, 'public'),
    )


def _discard_uploads(image_store: ImageStore, stored: list[StoredImage]) -> None:
    for item in stored:
        image_store.delete(item.object_name)


def create_report(
    session: Session,
    image_store: ImageStore,
    payload: ReportForm,
    images: list[ImageUpload],
    max_images: int = DEFAULT_MAX_IMAGES,
    cleanup_on_rollback: bool = True,
) -> tuple[Report, list[ReportImage]]:
    """Create a report and its images as one unit.

    Each image is uploaded and then linked before the next one starts, so
    ``position`` follows input order. Any failure rolls the whole transaction
    back. Objects already uploaded cannot be rolled back with it; when
    ``cleanup_on_rollback`` is set they are deleted on a best-effort basis.
    """
    record = build_report(payload, images, max_images=max_images)
    stored: list[StoredImage] = []
    rows: list[ReportImage] = []
    try:
        with transaction(session):
            require_resident(session, record.resident_id, kind='owner_not_found')
            session.add(record)
            session.flush()
            for position, image in enumerate(images):
                item = image_store.upload(
                    image.data,
                    ImageFolder.REPORTS,
                    filename=image.filename,
                    content_type=image.content_type,
                )
                stored.append(item)
                row = ReportImage(
                    report_id=record.id,
                    url=item.url,
                    object_name=item.object_name,
                    position=position,
                )
                session.add(row)
                session.flush()
                rows.append(row)
    except ConflictError as exc:
        logger.warning("report insert for resident {} hit a constraint", record.resident_id)
        if cleanup_on_rollback:
            _discard_uploads(image_store, stored)
        raise PersistenceError('Report could not be saved') from exc
    except Exception:
        if stored:
            logger.warning(
                "report creation rolled back after {} of {} uploads", len(stored), len(images)
            )
            if cleanup_on_rollback:
                _discard_uploads(image_store, stored)
        raise
    session.refresh(record)
    logger.info("report {} created with {} images", record.id, len(rows))
    return record, rows


def get_report(session: Session, report_id: str) -> Optional[Report]:
    return session.exec(select(Report).where(Report.id == report_id)).first()


def load_images(session: Session, report_ids: Iterable[str]) -> dict[str, list[str]]:
    ids = list(report_ids)
    images: dict[str, list[str]] = {report_id: [] for report_id in ids}
    if not ids:
        return images
    statement = (
        select(ReportImage)
        .where(ReportImage.report_id.in_(ids))
        .order_by(ReportImage.report_id, ReportImage.position)
    )
    for row in session.exec(statement).all():
        images[row.report_id].append(row.url)
    return images


def list_resident_reports(session: Session, resident_id: str) -> list[ReportOut]:
    require_resident(session, resident_id)
    statement = (
        select(Report)
        .where(Report.resident_id == resident_id)
        .order_by(Report.created_at.desc())
    )
    reports = list(session.exec(statement).all())
    images = load_images(session, [record.id for record in reports])
    return [to_report_out(record, images[record.id]) for record in reports]


def delete_report(session: Session, report_id: str) -> str:
    record = get_report(session, report_id)
    if not record:
        raise NotFoundError('Report not found', kind='report_not_found')
    title = record.title
    with transaction(session):
        session.delete(record)
    logger.info("report {} ({!r}) deleted", report_id, title)
    return title


def to_report_out(record: Report, images: list[str]) -> ReportOut:
    return ReportOut(
        id=record.id,
        resident_id=record.resident_id,
        title=record.title,
        category=record.category,
        urgency=record.urgency,
        location=record.location,
        description=record.description,
        anonymous=record.anonymous,
        public=record.public,
        status=record.status,
        created_at=record.created_at,
        images=images,
    )
