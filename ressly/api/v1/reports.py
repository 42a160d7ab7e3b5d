from typing import Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from sqlmodel import Session
from ressly.api.deps import get_settings
from ressly.core.config import Settings
from ressly.db.session import get_session
from ressly.schemas.report import CommunityReportOut, ReportForm, ReportOut
from ressly.services.feed_service import list_community_feed, parse_window
from ressly.services.image_store import ImageStore, get_image_store
from ressly.services.report_service import (
    ImageUpload,
    create_report,
    delete_report,
    list_resident_reports,
    to_report_out,
)

router = APIRouter(prefix='/reports', tags=['reports'])


@router.post('', response_model=ReportOut, status_code=status.HTTP_201_CREATED)
def create_report_endpoint(
    resident_id: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    category: Optional[str] = Form(None),
    urgency: Optional[str] = Form(None),
    location: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    anonymous: Optional[str] = Form(None),
    public: Optional[str] = Form(None),
    images: Optional[list[UploadFile]] = File(None),
    session: Session = Depends(get_session),
    image_store: ImageStore = Depends(get_image_store),
    config: Settings = Depends(get_settings),
) -> ReportOut:
    payload = ReportForm(
        resident_id=resident_id,
        title=title,
        category=category,
        urgency=urgency,
        location=location,
        description=description,
        anonymous=anonymous,
        public=public,
    )
    uploads = [
        ImageUpload(data=item.file.read(), filename=item.filename, content_type=item.content_type)
        for item in images or []
    ]
    record, rows = create_report(
        session,
        image_store,
        payload,
        uploads,
        max_images=config.REPORT_MAX_IMAGES,
        cleanup_on_rollback=config.IMAGE_CLEANUP_ON_ROLLBACK,
    )
    return to_report_out(record, [row.url for row in rows])


@router.get('/resident/{resident_id}', response_model=list[ReportOut])
def list_resident_reports_endpoint(
    resident_id: str,
    session: Session = Depends(get_session),
) -> list[ReportOut]:
    return list_resident_reports(session, resident_id)


@router.get('/community/{residential_id}', response_model=list[CommunityReportOut])
def community_feed_endpoint(
    residential_id: str,
    window: Optional[str] = None,
    voter: Optional[str] = None,
    session: Session = Depends(get_session),
) -> list[CommunityReportOut]:
    return list_community_feed(session, residential_id, parse_window(window), caller_id=voter)


@router.delete('/{report_id}')
def delete_report_endpoint(
    report_id: str,
    session: Session = Depends(get_session),
) -> dict:
    delete_report(session, report_id)
    return {'status': 'ok'}
