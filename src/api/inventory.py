"""Inventory API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from src.api.dependencies import get_current_user, get_decay_engine, get_inventory_store
from src.config import get_settings
from src.models.enums import SortMode
from src.models.user import User
from src.schemas.inventory import (
    DashboardResponse,
    DecayResultResponse,
    InventoryBulkAddRequest,
    InventoryBulkAddResponse,
    InventoryItemCreate,
    InventoryItemResponse,
    InventoryItemUpdate,
    InventorySection,
    InventoryStats,
)
from src.services import inventory_views as views
from src.services.expiry import DecayResult, ExpiryDecayEngine
from src.services.inventory_store import InventoryStore
from src.services.realtime import InventoryEventType, publish_inventory_event

router = APIRouter(prefix="/api/v1/inventory", tags=["inventory"])

RECENT_ITEMS_LIMIT = 3
EXPIRING_PREVIEW_LIMIT = 3  # Dashboard shows the soonest few; /expiring has the full list


def _run_decay(engine: ExpiryDecayEngine, owner_id: int) -> DecayResult:
    """Decay the owner's items and announce it if anything changed."""
    result = engine.apply_decay(owner_id)
    if result.mutated:
        publish_inventory_event(
            owner_id, InventoryEventType.ITEMS_DECAYED, {"mutated": result.mutated}
        )
    return result


@router.get("", response_model=list[InventoryItemResponse])
def list_inventory(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
    q: str | None = None,
    category: str | None = None,
    sort: SortMode = SortMode.NAME,
):
    """List the user's items, filtered by name and category, in the chosen order."""
    items = store.list_items(current_user.id)
    items = views.filter_by_name(items, q)
    items = views.filter_by_category(items, category)
    return views.sort_items(items, sort)


@router.get("/sections", response_model=list[InventorySection])
def list_inventory_sections(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
    q: str | None = None,
    sort: SortMode = SortMode.NAME,
):
    """List the user's items grouped into display-category sections."""
    items = views.sort_items(views.filter_by_name(store.list_items(current_user.id), q), sort)
    return [
        InventorySection(
            title=title,
            items=[InventoryItemResponse.model_validate(item) for item in section],
        )
        for title, section in views.group_by_category(items)
    ]


@router.post("/refresh", response_model=DecayResultResponse)
def refresh_inventory(
    current_user: Annotated[User, Depends(get_current_user)],
    engine: Annotated[ExpiryDecayEngine, Depends(get_decay_engine)],
):
    """Bring every item's days-to-expiry up to date.

    Safe to call on every app foreground; repeat calls on the same day change nothing.
    Per-item write failures answer 207 with the ids to retry on the next refresh.
    """
    result = _run_decay(engine, current_user.id)
    result.raise_for_failures()
    return DecayResultResponse(mutated=result.mutated, failed_ids=result.failed_ids)


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
    engine: Annotated[ExpiryDecayEngine, Depends(get_decay_engine)],
):
    """Decay, then compute every dashboard view from one snapshot."""
    threshold = get_settings().dashboard_expiring_threshold
    result = _run_decay(engine, current_user.id)
    items = store.list_items(current_user.id)

    return DashboardResponse(
        decay=DecayResultResponse(mutated=result.mutated, failed_ids=result.failed_ids),
        stats=InventoryStats(**views.inventory_stats(items, threshold)),
        expiring=[
            InventoryItemResponse.model_validate(item)
            for item in views.expiring_soon(items, threshold)[:EXPIRING_PREVIEW_LIMIT]
        ],
        recent=[
            InventoryItemResponse.model_validate(item)
            for item in views.recent_items(items, RECENT_ITEMS_LIMIT)
        ],
        categories=views.category_histogram(items),
    )


@router.get("/expiring", response_model=list[InventoryItemResponse])
def list_expiring_items(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
    threshold: Annotated[int | None, Query(ge=0)] = None,
):
    """Items expiring within threshold days (default: dashboard threshold), soonest first."""
    if threshold is None:
        threshold = get_settings().dashboard_expiring_threshold
    items = store.list_items(current_user.id, max_expiry_days=threshold)
    return views.expiring_soon(items, threshold)


@router.get("/categories", response_model=dict[str, int])
def get_category_histogram(
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
):
    """Item counts per category."""
    return views.category_histogram(store.list_items(current_user.id))


@router.post("", response_model=InventoryItemResponse, status_code=status.HTTP_201_CREATED)
def create_inventory_item(
    item_data: InventoryItemCreate,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
):
    """Add an item to the user's inventory."""
    item = store.create_item(current_user.id, item_data.model_dump(exclude_unset=True))
    publish_inventory_event(current_user.id, InventoryEventType.ITEM_CREATED, {"item_id": item.id})
    return item


@router.post("/bulk", response_model=InventoryBulkAddResponse, status_code=status.HTTP_201_CREATED)
def bulk_add_inventory_items(
    request: InventoryBulkAddRequest,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
):
    """Add several items at once, e.g. products recognized from photos."""
    items = store.create_items(
        current_user.id, [item.model_dump(exclude_unset=True) for item in request.items]
    )
    publish_inventory_event(
        current_user.id,
        InventoryEventType.ITEMS_BULK_CREATED,
        {"item_ids": [item.id for item in items]},
    )
    return InventoryBulkAddResponse(added=len(items), items=items)


@router.get("/{item_id}", response_model=InventoryItemResponse)
def get_inventory_item(
    item_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
):
    """Get a specific inventory item."""
    return store.get_item(current_user.id, item_id)


@router.put("/{item_id}", response_model=InventoryItemResponse)
def update_inventory_item(
    item_id: str,
    item_data: InventoryItemUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
):
    """Edit an item. Setting expiry_days is the only way days-to-expiry can go up."""
    item = store.update_item(current_user.id, item_id, item_data.model_dump(exclude_unset=True))
    publish_inventory_event(current_user.id, InventoryEventType.ITEM_UPDATED, {"item_id": item.id})
    return item


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_inventory_item(
    item_id: str,
    current_user: Annotated[User, Depends(get_current_user)],
    store: Annotated[InventoryStore, Depends(get_inventory_store)],
):
    """Remove an item from the inventory."""
    store.delete_item(current_user.id, item_id)
    publish_inventory_event(current_user.id, InventoryEventType.ITEM_DELETED, {"item_id": item_id})
