"""Food request lifecycle: state machine and active-request cap.

State progression: pending -> accepted -> in_progress -> completed,
with pending/accepted/in_progress -> cancelled at any point.
Transitions are validated: states cannot be skipped and a terminal state is final.

Every mutation runs inside ``Store.update_requests`` so the status check, the
cap check and the write happen as one atomic step.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import TYPE_CHECKING

import structlog

from cfc.config import get_settings
from cfc.db.models import (
    FoodRequest,
    Rating,
    RequestStatus,
    is_hero,
    is_requester,
)
from cfc.errors import (
    AlreadyRated,
    CapacityExceeded,
    InvalidTransition,
    NotAuthorized,
    NotFound,
)

if TYPE_CHECKING:
    from cfc.db.store import Store
    from cfc.deliveries.schemas import NewRequest

logger = structlog.get_logger()

VALID_TRANSITIONS: dict[RequestStatus, list[RequestStatus]] = {
    RequestStatus.PENDING: [RequestStatus.ACCEPTED, RequestStatus.CANCELLED],
    RequestStatus.ACCEPTED: [RequestStatus.IN_PROGRESS, RequestStatus.CANCELLED],
    RequestStatus.IN_PROGRESS: [RequestStatus.COMPLETED, RequestStatus.CANCELLED],
    RequestStatus.COMPLETED: [],
    RequestStatus.CANCELLED: [],
}


def validate_transition(current_status: RequestStatus, target_status: RequestStatus) -> None:
    """Validate a state transition. Raises InvalidTransition if not allowed."""
    valid = VALID_TRANSITIONS.get(RequestStatus(current_status), [])
    if target_status not in valid:
        raise InvalidTransition(
            f"Invalid transition: {RequestStatus(current_status).value} -> "
            f"{RequestStatus(target_status).value}. "
            f"Valid transitions: {[s.value for s in valid]}"
        )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _stamp(now: datetime, floor: datetime | None) -> datetime:
    """Status timestamps never go backwards along the lifecycle."""
    if floor is not None and now < floor:
        return floor
    return now


def _find(requests: list[FoodRequest], request_id: str) -> FoodRequest:
    for request in requests:
        if request.id == request_id:
            return request
    raise NotFound(f"Request {request_id} not found")


def _check_hero_owner(request: FoodRequest, actor_id: str | None) -> None:
    if actor_id is not None and request.hero_id != actor_id:
        raise NotAuthorized("Only the assigned hero can update this request")


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


async def create_request(
    store: Store,
    requester_id: str,
    details: NewRequest,
    *,
    now: datetime | None = None,
) -> FoodRequest:
    """Create a new pending request owned by ``requester_id``."""
    requester = await store.get_user(requester_id)
    if requester is None or not is_requester(requester):
        raise NotFound(f"Requester {requester_id} not found")

    request = FoodRequest(
        id=str(uuid.uuid4()),
        requester_id=requester_id,
        status=RequestStatus.PENDING,
        created_at=now or _utcnow(),
        **details.model_dump(),
    )

    def _append(requests: list[FoodRequest]) -> FoodRequest:
        requests.append(request)
        return request

    await store.update_requests(_append)

    def _record_history(users: list) -> None:
        for user in users:
            if user.id == requester_id and is_requester(user):
                user.delivery_history.append(request.id)

    await store.update_users(_record_history)

    logger.info("request_created", request_id=request.id, requester_id=requester_id)
    return request


async def accept_request(
    store: Store,
    request_id: str,
    hero_id: str,
    *,
    now: datetime | None = None,
) -> FoodRequest:
    """Assign a pending request to a hero.

    Raises:
        NotFound: unknown request or hero.
        InvalidTransition: request is no longer pending.
        CapacityExceeded: hero already holds the maximum of active requests.
    """
    hero = await store.get_user(hero_id)
    if hero is None or not is_hero(hero):
        raise NotFound(f"Hero {hero_id} not found")

    max_active = get_settings().max_active_requests
    now = now or _utcnow()

    def _accept(requests: list[FoodRequest]) -> FoodRequest:
        request = _find(requests, request_id)
        validate_transition(request.status, RequestStatus.ACCEPTED)

        active = [r for r in requests if r.hero_id == hero_id and r.is_active]
        if len(active) >= max_active:
            raise CapacityExceeded(f"Maximum {max_active} active requests allowed")

        request.status = RequestStatus.ACCEPTED
        request.hero_id = hero_id
        request.accepted_at = _stamp(now, request.created_at)
        return request

    request = await store.update_requests(_accept)
    logger.info("request_accepted", request_id=request_id, hero_id=hero_id)
    return request


async def mark_in_progress(
    store: Store,
    request_id: str,
    *,
    actor_id: str | None = None,
    now: datetime | None = None,
) -> FoodRequest:
    """Move an accepted request to in_progress (the hero picked up the food)."""
    now = now or _utcnow()

    def _start(requests: list[FoodRequest]) -> FoodRequest:
        request = _find(requests, request_id)
        validate_transition(request.status, RequestStatus.IN_PROGRESS)
        _check_hero_owner(request, actor_id)

        request.status = RequestStatus.IN_PROGRESS
        request.in_progress_at = _stamp(now, request.accepted_at)
        return request

    request = await store.update_requests(_start)
    logger.info("request_in_progress", request_id=request_id, hero_id=request.hero_id)
    return request


async def complete_request(
    store: Store,
    request_id: str,
    rating: Rating | None = None,
    *,
    actor_id: str | None = None,
    now: datetime | None = None,
) -> FoodRequest:
    """Mark an in-progress request delivered, optionally with a rating."""
    now = now or _utcnow()

    def _complete(requests: list[FoodRequest]) -> FoodRequest:
        request = _find(requests, request_id)
        validate_transition(request.status, RequestStatus.COMPLETED)
        _check_hero_owner(request, actor_id)

        request.status = RequestStatus.COMPLETED
        request.completed_at = _stamp(now, request.in_progress_at)
        if rating is not None:
            request.rating = rating
        return request

    request = await store.update_requests(_complete)
    logger.info("request_completed", request_id=request_id, hero_id=request.hero_id)
    return request


async def cancel_request(
    store: Store,
    request_id: str,
    reason: str,
    *,
    actor_id: str | None = None,
    now: datetime | None = None,
) -> FoodRequest:
    """Cancel a request that has not reached a terminal state.

    When ``actor_id`` is given it must be the requester or the assigned hero.
    """
    now = now or _utcnow()

    def _cancel(requests: list[FoodRequest]) -> FoodRequest:
        request = _find(requests, request_id)
        validate_transition(request.status, RequestStatus.CANCELLED)
        if actor_id is not None and actor_id not in (request.requester_id, request.hero_id):
            raise NotAuthorized("Only the requester or the assigned hero can cancel")

        latest = request.in_progress_at or request.accepted_at or request.created_at
        request.status = RequestStatus.CANCELLED
        request.cancelled_at = _stamp(now, latest)
        request.cancel_reason = reason
        return request

    request = await store.update_requests(_cancel)
    logger.info("request_cancelled", request_id=request_id, reason=reason)
    return request


async def rate_request(
    store: Store,
    request_id: str,
    rating: Rating,
    *,
    actor_id: str | None = None,
) -> FoodRequest:
    """Attach the requester's rating to a completed, not yet rated request."""

    def _rate(requests: list[FoodRequest]) -> FoodRequest:
        request = _find(requests, request_id)
        if actor_id is not None and request.requester_id != actor_id:
            raise NotAuthorized("Only the requester can rate this delivery")
        if request.status != RequestStatus.COMPLETED:
            raise AlreadyRated("Only completed deliveries can be rated")
        if request.rating is not None:
            raise AlreadyRated("This delivery has already been rated")

        request.rating = rating
        return request

    request = await store.update_requests(_rate)
    logger.info("request_rated", request_id=request_id, stars=rating.stars)
    return request


async def delete_request(store: Store, request_id: str) -> bool:
    """Administrative removal. Returns False if the id was unknown."""

    def _delete(requests: list[FoodRequest]) -> bool:
        before = len(requests)
        requests[:] = [r for r in requests if r.id != request_id]
        return len(requests) != before

    deleted = await store.update_requests(_delete)
    if deleted:
        logger.warning("request_deleted", request_id=request_id)
    return deleted


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def list_requests(store: Store) -> list[FoodRequest]:
    return await store.get_requests()


async def get_request(store: Store, request_id: str) -> FoodRequest:
    request = await store.get_request(request_id)
    if request is None:
        raise NotFound(f"Request {request_id} not found")
    return request


async def get_requests_by_status(store: Store, status: RequestStatus) -> list[FoodRequest]:
    return [r for r in await store.get_requests() if r.status == status]


async def get_requests_by_user(
    store: Store,
    user_id: str,
    *,
    as_requester: bool,
) -> list[FoodRequest]:
    """Requests a user owns (as requester) or delivers (as hero)."""
    requests = await store.get_requests()
    if as_requester:
        return [r for r in requests if r.requester_id == user_id]
    return [r for r in requests if r.hero_id == user_id]


async def get_pending_requests(store: Store) -> list[FoodRequest]:
    return await get_requests_by_status(store, RequestStatus.PENDING)


async def get_active_requests_for_hero(store: Store, hero_id: str) -> list[FoodRequest]:
    """Requests the hero has accepted and not yet finished."""
    return [r for r in await store.get_requests() if r.hero_id == hero_id and r.is_active]
