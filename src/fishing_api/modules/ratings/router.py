from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from fishing_api.common.ids import parse_team_id, parse_user_id
from fishing_api.common.pagination import DEFAULT_PAGE_LIMIT
from fishing_api.common.schemas import NumberedPage
from fishing_api.db.enums import RatingSort
from fishing_api.db.models import User
from fishing_api.deps.auth import get_admin_user_dep
from fishing_api.deps.ratings import get_ratings_service_dep
from fishing_api.modules.ratings.schemas import (
    RatingHistoryEntryResponse,
    RatingHistoryListResponse,
    RatingRebuildResponse,
    TeamRatingResponse,
    UserRatingResponse,
)
from fishing_api.modules.ratings.service import RatingsService

router = APIRouter(prefix="/ratings", tags=["ratings"])
RATINGS_SERVICE_DEP = Depends(get_ratings_service_dep)
ADMIN_USER_DEP = Depends(get_admin_user_dep)
TEAM_ID_DEP = Depends(parse_team_id)
USER_ID_DEP = Depends(parse_user_id)

_HISTORY_MAX_LIMIT = 200


@router.get(
    "/users",
    response_model=NumberedPage[UserRatingResponse],
    summary="List User Ratings",
    description=(
        "Paginated user ratings. `sort=recent` (default) orders by registration date, "
        "`sort=rating` by rating descending."
    ),
    responses={
        200: {
            "description": "Page of user ratings.",
            "content": {
                "application/json": {
                    "example": {
                        "items": [
                            {
                                "id": "fcb1ce84-229e-4ea6-9f31-89cf8a5f58af",
                                "name": "Ivan Petrov",
                                "image": None,
                                "rating": 1020,
                                "created_at": "2026-04-01T10:00:00",
                            }
                        ],
                        "pagination": {"total": 1, "page": 1, "limit": 10, "pages": 1},
                    }
                }
            },
        }
    },
)
async def get_user_ratings(
    page: int = 1,
    limit: int = DEFAULT_PAGE_LIMIT,
    sort: RatingSort = RatingSort.RECENT,
    ratings_service: RatingsService = RATINGS_SERVICE_DEP,
) -> NumberedPage[UserRatingResponse]:
    return await ratings_service.list_user_ratings(page=page, limit=limit, sort=sort)


@router.get(
    "/teams",
    response_model=NumberedPage[TeamRatingResponse],
    summary="List Team Ratings",
    description="Paginated team ratings with member counts. Same sorting as user ratings.",
)
async def get_team_ratings(
    page: int = 1,
    limit: int = DEFAULT_PAGE_LIMIT,
    sort: RatingSort = RatingSort.RECENT,
    ratings_service: RatingsService = RATINGS_SERVICE_DEP,
) -> NumberedPage[TeamRatingResponse]:
    return await ratings_service.list_team_ratings(page=page, limit=limit, sort=sort)


@router.get(
    "/users/{user_id}/history",
    response_model=RatingHistoryListResponse,
    summary="Get User Rating History",
    description="Returns the rating ledger of a user, newest first.",
    responses={
        400: {"description": "Malformed user id."},
        404: {"description": "User not found."},
    },
)
async def get_user_rating_history(
    user_id: UUID = USER_ID_DEP,
    limit: int = 50,
    offset: int = 0,
    ratings_service: RatingsService = RATINGS_SERVICE_DEP,
) -> RatingHistoryListResponse:
    safe_limit = max(1, min(limit, _HISTORY_MAX_LIMIT))
    safe_offset = max(0, offset)
    total, rows = await ratings_service.get_user_history(
        user_id,
        limit=safe_limit,
        offset=safe_offset,
    )
    items = [RatingHistoryEntryResponse.model_validate(row) for row in rows]
    return RatingHistoryListResponse(
        items=items,
        total=total,
        limit=safe_limit,
        offset=safe_offset,
        has_more=(safe_offset + len(items)) < total,
    )


@router.get(
    "/teams/{team_id}/history",
    response_model=RatingHistoryListResponse,
    summary="Get Team Rating History",
    description="Returns the rating ledger of a team, newest first.",
    responses={
        400: {"description": "Malformed team id."},
        404: {"description": "Team not found."},
    },
)
async def get_team_rating_history(
    team_id: UUID = TEAM_ID_DEP,
    limit: int = 50,
    offset: int = 0,
    ratings_service: RatingsService = RATINGS_SERVICE_DEP,
) -> RatingHistoryListResponse:
    safe_limit = max(1, min(limit, _HISTORY_MAX_LIMIT))
    safe_offset = max(0, offset)
    total, rows = await ratings_service.get_team_history(
        team_id,
        limit=safe_limit,
        offset=safe_offset,
    )
    items = [RatingHistoryEntryResponse.model_validate(row) for row in rows]
    return RatingHistoryListResponse(
        items=items,
        total=total,
        limit=safe_limit,
        offset=safe_offset,
        has_more=(safe_offset + len(items)) < total,
    )


@router.post(
    "/rebuild",
    response_model=RatingRebuildResponse,
    summary="Rebuild Ratings (Admin)",
    description=(
        "Recomputes every cached user and team rating from the rating history ledger. "
        "Requires admin privileges."
    ),
    responses={
        401: {"description": "Missing or invalid access token."},
        403: {"description": "Admin privileges required."},
    },
)
async def post_rebuild_ratings(
    ratings_service: RatingsService = RATINGS_SERVICE_DEP,
    admin_user: User = ADMIN_USER_DEP,
) -> RatingRebuildResponse:
    del admin_user
    return await ratings_service.rebuild_ratings()
