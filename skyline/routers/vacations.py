"""
Vacations API router.

Browsing and likes for every authenticated caller; CRUD and reports for
administrators. Report routes are declared before "/{vacation_id}" so the
literal path segment wins.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from skyline.database import get_db
from skyline.middleware.auth import get_current_user, prevent_admin_like, require_admin
from skyline.schemas.auth import TokenUser
from skyline.schemas.vacation import ReportRow, VacationPage, VacationResponse
from skyline.services.filters import parse_filter, parse_page, parse_page_size, total_pages
from skyline.services.images import ImageStore, ImageUpload
from skyline.services.reports import CSV_FILENAME
from skyline.services.serializers import serialize_vacation, serialize_vacations
from skyline.services.vacations import VacationService

router = APIRouter(prefix="/api/vacations")


def get_image_store(request: Request) -> ImageStore:
    return request.app.state.image_store


def get_vacation_service(
    db: AsyncSession = Depends(get_db),
    images: ImageStore = Depends(get_image_store),
) -> VacationService:
    return VacationService(db, images)


async def read_upload(image: Optional[UploadFile]) -> Optional[ImageUpload]:
    """Read a multipart file; an empty file part counts as no file."""
    if image is None or not image.filename:
        return None
    content = await image.read()
    return ImageUpload(
        filename=image.filename,
        content=content,
        content_type=image.content_type or "",
    )


def form_fields(
    destination: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    startDate: Optional[str] = Form(None),
    endDate: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
) -> dict:
    """Raw vacation form values, validated by the service."""
    return {
        "destination": destination,
        "description": description,
        "start_date": startDate,
        "end_date": endDate,
        "price": price,
    }


# ---------------------------------------------------------
# Browsing
# ---------------------------------------------------------

@router.get("", response_model=VacationPage)
async def get_vacations(
    request: Request,
    filter: Optional[str] = Query(None),
    page: Optional[str] = Query(None),
    pageSize: Optional[str] = Query(None),
    service: VacationService = Depends(get_vacation_service),
    current_user: TokenUser = Depends(get_current_user),
):
    """
    Filtered, paginated vacation listing.

    Unknown filters and invalid page values fall back to defaults.
    """
    vacation_filter = parse_filter(filter)
    page_number = parse_page(page)
    page_size = parse_page_size(pageSize, request.app.state.settings.default_page_size)

    vacations, total_count = await service.get_vacations(
        vacation_filter, current_user.id, page_number, page_size
    )

    return VacationPage(
        vacations=serialize_vacations(vacations, current_user.id),
        page=page_number,
        page_size=page_size,
        total_count=total_count,
        total_pages=total_pages(total_count, page_size),
    )


# ---------------------------------------------------------
# Reports (admin)
# ---------------------------------------------------------

@router.get("/report/json", response_model=List[ReportRow])
async def get_vacations_report_json(
    service: VacationService = Depends(get_vacation_service),
    current_user: TokenUser = Depends(require_admin),
):
    return await service.get_vacations_report()


@router.get("/report/csv")
async def get_vacations_report_csv(
    service: VacationService = Depends(get_vacation_service),
    current_user: TokenUser = Depends(require_admin),
):
    """Download the likes report as a CSV attachment."""
    csv_content = await service.generate_vacations_report_csv()
    return Response(
        content=csv_content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{CSV_FILENAME}"'},
    )


@router.get("/{vacation_id}", response_model=VacationResponse)
async def get_vacation(
    vacation_id: str,
    service: VacationService = Depends(get_vacation_service),
    current_user: TokenUser = Depends(get_current_user),
):
    vacation = await service.get_vacation(vacation_id)
    return serialize_vacation(vacation, current_user.id)


# ---------------------------------------------------------
# Likes (non-admin)
# ---------------------------------------------------------

@router.post("/{vacation_id}/like", response_model=VacationResponse)
async def like_vacation(
    vacation_id: str,
    service: VacationService = Depends(get_vacation_service),
    current_user: TokenUser = Depends(prevent_admin_like),
):
    vacation = await service.like_vacation(vacation_id, current_user.id)
    return serialize_vacation(vacation, current_user.id)


@router.delete("/{vacation_id}/like", response_model=VacationResponse)
async def unlike_vacation(
    vacation_id: str,
    service: VacationService = Depends(get_vacation_service),
    current_user: TokenUser = Depends(prevent_admin_like),
):
    vacation = await service.unlike_vacation(vacation_id, current_user.id)
    return serialize_vacation(vacation, current_user.id)


# ---------------------------------------------------------
# CRUD (admin)
# ---------------------------------------------------------

@router.post("", response_model=VacationResponse, status_code=status.HTTP_201_CREATED)
async def add_vacation(
    fields: dict = Depends(form_fields),
    image: Optional[UploadFile] = File(None),
    service: VacationService = Depends(get_vacation_service),
    current_user: TokenUser = Depends(require_admin),
):
    """
    Create a vacation from a multipart form.

    The image file is required.
    """
    vacation = await service.add_vacation(fields, await read_upload(image))
    return serialize_vacation(vacation, current_user.id)


@router.patch("/{vacation_id}", response_model=VacationResponse)
async def update_vacation(
    vacation_id: str,
    fields: dict = Depends(form_fields),
    image: Optional[UploadFile] = File(None),
    service: VacationService = Depends(get_vacation_service),
    current_user: TokenUser = Depends(require_admin),
):
    """
    Update a vacation from a multipart form.

    The image is replaced only when a new file is sent.
    """
    vacation = await service.update_vacation(vacation_id, fields, await read_upload(image))
    return serialize_vacation(vacation, current_user.id)


@router.delete("/{vacation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_vacation(
    vacation_id: str,
    service: VacationService = Depends(get_vacation_service),
    current_user: TokenUser = Depends(require_admin),
):
    await service.delete_vacation(vacation_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
