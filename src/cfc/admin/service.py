"""Administrative bulk operations over the whole store."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cfc.db.models import FoodRequest, User

if TYPE_CHECKING:
    from cfc.db.store import Store

logger = structlog.get_logger()


class AppData(BaseModel):
    """Full snapshot of the store, in the persisted camelCase shape."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    users: list[User] = Field(default_factory=list)
    requests: list[FoodRequest] = Field(default_factory=list)
    current_user_id: str | None = None


async def export_data(store: Store) -> AppData:
    return AppData(
        users=await store.get_users(),
        requests=await store.get_requests(),
        current_user_id=await store.get_current_user_id(),
    )


async def import_data(store: Store, data: AppData) -> dict[str, Any]:
    """Replace both collections. The session pointer is only set when present."""
    await store.put_users(list(data.users))
    await store.put_requests(list(data.requests))
    if data.current_user_id:
        await store.set_current_user_id(data.current_user_id)
    logger.warning("data_imported", users=len(data.users), requests=len(data.requests))
    return {"users": len(data.users), "requests": len(data.requests)}


async def clear_all_data(store: Store) -> None:
    await store.clear()
    logger.warning("data_cleared")
