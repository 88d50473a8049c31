from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from fishing_api.common.ids import parse_event_id
from fishing_api.db.models import User
from fishing_api.deps.auth import get_current_user_dep
from fishing_api.deps.results import get_results_service_dep
from fishing_api.modules.results.schemas import EventResultResponse, ResultsSubmitRequest
from fishing_api.modules.results.service import ResultsService

router = APIRouter(prefix="/events/{event_id}", tags=["results"])
RESULTS_SERVICE_DEP = Depends(get_results_service_dep)
CURRENT_USER_DEP = Depends(get_current_user_dep)
EVENT_ID_DEP = Depends(parse_event_id)


@router.get(
    "/results",
    response_model=list[EventResultResponse],
    summary="Get Results",
    description="Returns the published results of an event ordered by place.",
    responses={
        400: {"description": "Malformed event id."},
        404: {"description": "Event not found."},
    },
)
async def get_results(
    event_id: UUID = EVENT_ID_DEP,
    results_service: ResultsService = RESULTS_SERVICE_DEP,
) -> list[EventResultResponse]:
    return await results_service.get_results(event_id)


@router.post(
    "/results",
    response_model=list[EventResultResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Submit Results",
    description=(
        "Replaces the event results and applies rating changes in one transaction. "
        "Only the event owner may submit. Every submission appends rating history."
    ),
    responses={
        201: {"description": "Results stored and ratings updated."},
        400: {
            "description": "Empty table, unknown participant type, duplicate place or participant.",
            "content": {
                "application/json": {
                    "example": {
                        "error_code": "invalid_results_format",
                        "message": "Place 1 is assigned more than once.",
                        "detail": "Place 1 is assigned more than once.",
                        "request_id": "b1c9e6f2-61d4-4a55-9d62-3f1ab0c9a7de",
                    }
                }
            },
        },
        401: {"description": "Missing or invalid access token."},
        403: {"description": "Caller is not the event owner."},
        404: {"description": "Event or participant not found."},
    },
)
async def post_results(
    request: ResultsSubmitRequest,
    event_id: UUID = EVENT_ID_DEP,
    results_service: ResultsService = RESULTS_SERVICE_DEP,
    current_user: User = CURRENT_USER_DEP,
) -> list[EventResultResponse]:
    return await results_service.submit_results(event_id, request, user_id=current_user.id)
