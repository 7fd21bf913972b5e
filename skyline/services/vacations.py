"""
Vacation business logic: listing, CRUD with image lifecycle, likes and
reporting.

Image lifecycle rules:
- create: validate everything, upload, then persist (the upload is
  released again if persisting fails)
- update: validate the merged document, then delete the old asset and
  upload the new one
- delete: look up the record, release its asset, then delete the record

Likes are single atomic statements against vacation_likes (insert that
ignores duplicates / keyed delete), so concurrent likes from different
users need no application locking.
"""

import logging
from datetime import date
from typing import Any, Callable, Mapping, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from skyline.exceptions import ImageStoreError, NotFoundError, ServiceError, ValidationError
from skyline.models.vacation import Vacation, VacationLike
from skyline.schemas.vacation import ReportRow, VacationFields
from skyline.services.filters import VacationFilter, build_vacation_query
from skyline.services.images import ImageStore, ImageUpload
from skyline.services.reports import render_csv
from skyline.services.validation import (
    CREATE_RULES,
    UPDATE_RULES,
    check_business_rules,
    validate_fields,
)

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _check_image(image: Optional[ImageUpload]) -> ImageUpload:
    if image is None or not image.content:
        raise ValidationError("Image is required.")
    if not image.content_type.startswith("image/"):
        raise ValidationError("Image must be an image file.")
    return image


class VacationService:
    """Vacation operations bound to one database session."""

    def __init__(
        self,
        db: AsyncSession,
        images: ImageStore,
        today: Callable[[], date] = date.today,
    ):
        self.db = db
        self.images = images
        self.today = today

    # ---------------------------------------------------------
    # Queries
    # ---------------------------------------------------------

    async def get_vacations(
        self,
        vacation_filter: VacationFilter,
        user_id: Optional[str],
        page: int,
        page_size: int,
    ) -> tuple[list[Vacation], int]:
        """
        One page of vacations matching the filter, plus the total match count.

        Ordered by start date, ties broken by id so pages never overlap.
        """
        predicates = build_vacation_query(vacation_filter, user_id, self.today())

        total_count = await self.db.scalar(
            select(func.count()).select_from(Vacation).where(*predicates)
        )

        result = await self.db.execute(
            select(Vacation)
            .where(*predicates)
            .order_by(Vacation.start_date, Vacation.id)
            .offset((page - 1) * page_size)
            .limit(page_size)
        )
        return list(result.scalars().all()), total_count or 0

    async def get_vacation(self, vacation_id: str, refresh: bool = False) -> Vacation:
        stmt = select(Vacation).where(Vacation.id == vacation_id)
        if refresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await self.db.execute(stmt)
        vacation = result.scalar_one_or_none()
        if not vacation:
            raise NotFoundError(vacation_id)
        return vacation

    # ---------------------------------------------------------
    # Admin CRUD
    # ---------------------------------------------------------

    async def add_vacation(
        self, raw_fields: Mapping[str, Any], image: Optional[ImageUpload]
    ) -> Vacation:
        fields = validate_fields(raw_fields)
        check_business_rules(fields, CREATE_RULES, self.today())
        image = _check_image(image)

        stored = await self.images.upload(image.filename, image.content, image.content_type)

        vacation = Vacation(
            **fields.model_dump(),
            image_url=stored.url,
            image_public_id=stored.public_id,
            likes=[],
        )
        self.db.add(vacation)
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            await self._release_image(stored.public_id)
            raise

        logger.info("Created vacation %s (%s)", vacation.id, vacation.destination)
        return vacation

    async def update_vacation(
        self,
        vacation_id: str,
        raw_fields: Mapping[str, Any],
        image: Optional[ImageUpload] = None,
    ) -> Vacation:
        """
        Overwrite the editable fields; replace the image only if one is given.

        Fields not sent keep their stored value and the merged document is
        validated as a whole. Past start dates are accepted here. The liking
        set is untouched.
        """
        vacation = await self.get_vacation(vacation_id)

        merged = {name: getattr(vacation, name) for name in VacationFields.model_fields}
        merged.update({key: value for key, value in raw_fields.items() if value is not None})

        fields = validate_fields(merged)
        check_business_rules(fields, UPDATE_RULES, self.today())
        if image is not None:
            _check_image(image)

        for name, value in fields.model_dump().items():
            setattr(vacation, name, value)

        if image is not None:
            await self.images.delete(vacation.image_public_id)
            stored = await self.images.upload(image.filename, image.content, image.content_type)
            vacation.image_url = stored.url
            vacation.image_public_id = stored.public_id

        await self.db.commit()
        logger.info("Updated vacation %s", vacation.id)
        return vacation

    async def delete_vacation(self, vacation_id: str) -> None:
        vacation = await self.get_vacation(vacation_id)

        await self.images.delete(vacation.image_public_id)

        await self.db.delete(vacation)
        await self.db.commit()
        logger.info("Deleted vacation %s", vacation_id)

    async def _release_image(self, public_id: str) -> None:
        try:
            await self.images.delete(public_id)
        except ImageStoreError:
            logger.exception("Could not release orphaned image %s", public_id)

    # ---------------------------------------------------------
    # Likes
    # ---------------------------------------------------------

    def _insert_ignoring_duplicates(self, **values: str):
        dialect = self.db.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise ServiceError(f"Unsupported database dialect: {dialect}")
        return insert(VacationLike).values(**values).on_conflict_do_nothing()

    async def like_vacation(self, vacation_id: str, user_id: str) -> Vacation:
        """Add user_id to the liking set (idempotent)."""
        await self.get_vacation(vacation_id)
        await self.db.execute(
            self._insert_ignoring_duplicates(vacation_id=vacation_id, user_id=user_id)
        )
        await self.db.commit()
        return await self.get_vacation(vacation_id, refresh=True)

    async def unlike_vacation(self, vacation_id: str, user_id: str) -> Vacation:
        """Remove user_id from the liking set (idempotent)."""
        await self.get_vacation(vacation_id)
        await self.db.execute(
            delete(VacationLike).where(
                VacationLike.vacation_id == vacation_id,
                VacationLike.user_id == user_id,
            )
        )
        await self.db.commit()
        return await self.get_vacation(vacation_id, refresh=True)

    # ---------------------------------------------------------
    # Reports
    # ---------------------------------------------------------

    async def get_vacations_report(self) -> list[ReportRow]:
        """Destination and like count per vacation, in storage order."""
        result = await self.db.execute(
            select(Vacation.destination, func.count(VacationLike.user_id))
            .outerjoin(VacationLike, VacationLike.vacation_id == Vacation.id)
            .group_by(Vacation.id, Vacation.destination, Vacation.created_at)
            .order_by(Vacation.created_at, Vacation.id)
        )
        return [ReportRow(destination=destination, likes=likes) for destination, likes in result]

    async def generate_vacations_report_csv(self) -> str:
        return render_csv(await self.get_vacations_report())
