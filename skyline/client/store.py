"""
Client-side state: the current vacation page, its pagination metadata and
the logged-in user.

State is only changed through the action methods below. The optimistic
like toggle returns a snapshot of the values it replaced so a failed
server call can put them back exactly.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional

from skyline.schemas.auth import TokenUser
from skyline.schemas.vacation import VacationResponse

DEFAULT_PAGE_SIZE = 9


@dataclass
class PaginationMeta:
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    total_pages: int = 0
    total_count: int = 0


@dataclass(frozen=True)
class LikeSnapshot:
    """Pre-toggle like state of one vacation."""

    vacation_id: str
    liked_by_me: bool
    likes_count: int


@dataclass
class VacationStore:
    vacations: List[VacationResponse] = field(default_factory=list)
    pagination: PaginationMeta = field(default_factory=PaginationMeta)
    user: Optional[TokenUser] = None
    token: Optional[str] = None

    # ---------------------------------------------------------
    # Vacations
    # ---------------------------------------------------------

    def find(self, vacation_id: str) -> Optional[VacationResponse]:
        return next((v for v in self.vacations if v.id == vacation_id), None)

    def init_vacations(self, vacations: List[VacationResponse]) -> None:
        self.vacations = list(vacations)

    def add_vacation(self, vacation: VacationResponse) -> None:
        self.vacations = [*self.vacations, vacation]

    def update_vacation(self, vacation: VacationResponse) -> None:
        """Replace the vacation with the same id; unknown ids are ignored."""
        self.vacations = [vacation if v.id == vacation.id else v for v in self.vacations]

    def delete_vacation(self, vacation_id: str) -> None:
        self.vacations = [v for v in self.vacations if v.id != vacation_id]

    def toggle_like_optimistic(self, vacation_id: str) -> Optional[LikeSnapshot]:
        """
        Flip likedByMe and move likesCount by one (never below zero).

        Returns the pre-toggle snapshot, or None if the vacation is not
        in the store.
        """
        vacation = self.find(vacation_id)
        if vacation is None:
            return None

        snapshot = LikeSnapshot(vacation.id, vacation.liked_by_me, vacation.likes_count)
        liked = not vacation.liked_by_me
        likes_count = max(0, vacation.likes_count + (1 if liked else -1))
        self.update_vacation(
            vacation.model_copy(update={"liked_by_me": liked, "likes_count": likes_count})
        )
        return snapshot

    def restore_like(self, snapshot: LikeSnapshot) -> None:
        """Put back the like state captured before an optimistic toggle."""
        vacation = self.find(snapshot.vacation_id)
        if vacation is None:
            return
        self.update_vacation(
            vacation.model_copy(
                update={"liked_by_me": snapshot.liked_by_me, "likes_count": snapshot.likes_count}
            )
        )

    # ---------------------------------------------------------
    # Pagination
    # ---------------------------------------------------------

    def set_pagination(self, pagination: PaginationMeta) -> None:
        self.pagination = pagination

    def reset_page(self) -> None:
        """Safe empty state after a failed listing."""
        self.pagination = replace(self.pagination, page=1, total_pages=0, total_count=0)

    # ---------------------------------------------------------
    # Session
    # ---------------------------------------------------------

    def set_user(self, user: TokenUser, token: str) -> None:
        self.user = user
        self.token = token

    def logout(self) -> None:
        self.user = None
        self.token = None

    @property
    def is_logged_in(self) -> bool:
        return self.token is not None

    @property
    def is_admin(self) -> bool:
        return self.user is not None and self.user.is_admin
