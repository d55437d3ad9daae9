"""
WebApp Cart Router

Shopping cart endpoints. The caller is resolved from the session token
and passed explicitly to the cart engine.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from core import errors
from core.auth import LOGIN_URL, get_current_user_id
from core.cart import CartErrorKind, CartResult, StorageUnavailable, get_cart_manager
from core.logging import get_logger
from core.services.money import format_money, to_float
from .models import AddToCartRequest, EditCartItemRequest, UpdateCartItemRequest

logger = get_logger(__name__)

router = APIRouter(tags=["webapp-cart"])

BADGE_CAP = 99

_ERROR_STATUS = {
    CartErrorKind.UNAUTHENTICATED: 401,
    CartErrorKind.PRODUCT_NOT_FOUND: 404,
    CartErrorKind.ITEM_NOT_FOUND: 404,
}


def format_badge(count: int) -> Optional[str]:
    """Badge text for the header cart icon; None hides the badge."""
    if count <= 0:
        return None
    return f"{BADGE_CAP}+" if count > BADGE_CAP else str(count)


def _raise_for_failure(result: CartResult) -> None:
    if result.ok:
        return
    detail = {"error": result.error.value, "message": result.message}
    if result.error == CartErrorKind.UNAUTHENTICATED:
        detail["login_url"] = LOGIN_URL
    raise HTTPException(status_code=_ERROR_STATUS[result.error], detail=detail)


async def _cart_response(user_id: Optional[str]) -> dict:
    try:
        summary = await get_cart_manager().get_cart_summary(user_id)
    except StorageUnavailable as e:
        logger.error(f"Failed to get cart: {e}")
        raise HTTPException(status_code=503, detail=errors.ERROR_CART_UNAVAILABLE)
    summary["total_display"] = format_money(summary["total"])
    summary["badge"] = format_badge(summary["item_count"])
    return summary


async def _run(operation) -> CartResult:
    """Await an engine call, mapping engine exceptions to HTTP errors."""
    try:
        result = await operation
    except ValueError as ve:
        raise HTTPException(status_code=400, detail=str(ve))
    except StorageUnavailable as e:
        logger.error(f"Cart storage unavailable: {e}")
        raise HTTPException(status_code=503, detail=errors.ERROR_CART_UNAVAILABLE)
    _raise_for_failure(result)
    return result


@router.get("/cart")
async def get_webapp_cart(user_id: Optional[str] = Depends(get_current_user_id)):
    """Get user's cart with totals and badge text."""
    return await _cart_response(user_id)


@router.get("/cart/count")
async def get_cart_count(user_id: Optional[str] = Depends(get_current_user_id)):
    """Item count for the header badge."""
    try:
        count = await get_cart_manager().compute_item_count(user_id)
    except StorageUnavailable as e:
        logger.error(f"Failed to count cart items: {e}")
        raise HTTPException(status_code=503, detail=errors.ERROR_CART_UNAVAILABLE)
    return {"count": count, "badge": format_badge(count)}


@router.post("/cart/add")
async def add_to_cart(request: AddToCartRequest, user_id: Optional[str] = Depends(get_current_user_id)):
    """Add a configured product; identical configurations are merged."""
    result = await _run(
        get_cart_manager().add_item(
            user_id,
            request.product_id,
            size_id=request.size_id,
            topping_ids=request.topping_ids,
            quantity=request.quantity,
        )
    )
    response = await _cart_response(user_id)
    response["message"] = result.message
    response["item_id"] = result.item.id
    return response


@router.patch("/cart/item")
async def update_cart_item(request: UpdateCartItemRequest, user_id: Optional[str] = Depends(get_current_user_id)):
    """Change item quantity by delta (reaching 0 removes the item)."""
    result = await _run(get_cart_manager().update_quantity(user_id, request.item_id, request.delta))
    response = await _cart_response(user_id)
    response["message"] = result.message
    return response


@router.delete("/cart/item/{item_id}")
async def remove_cart_item(item_id: str, user_id: Optional[str] = Depends(get_current_user_id)):
    """Remove item from cart."""
    result = await _run(get_cart_manager().remove_item(user_id, item_id))
    response = await _cart_response(user_id)
    response["message"] = result.message
    return response


@router.get("/cart/item/{item_id}/options")
async def get_cart_item_options(item_id: str, user_id: Optional[str] = Depends(get_current_user_id)):
    """Current size/toppings of an item and the alternatives on offer."""
    if not user_id:
        _raise_for_failure(CartResult.failure(CartErrorKind.UNAUTHENTICATED, errors.ERROR_UNAUTHENTICATED))
    try:
        options = await get_cart_manager().get_edit_options(user_id, item_id)
    except StorageUnavailable as e:
        logger.error(f"Failed to load edit options: {e}")
        raise HTTPException(status_code=503, detail=errors.ERROR_CART_UNAVAILABLE)
    if options is None:
        _raise_for_failure(CartResult.failure(CartErrorKind.ITEM_NOT_FOUND, errors.ERROR_ITEM_NOT_FOUND))

    return {
        "item_id": options.item.id,
        "product_name": options.item.product_name,
        "size_id": options.item.size_id,
        "topping_ids": list(options.item.topping_ids),
        "sizes": [
            {"id": s.id, "name": s.name, "price_add": to_float(s.price_add)}
            for s in options.sizes
        ],
        "toppings": [
            {"id": t.id, "name": t.name, "price": to_float(t.price)}
            for t in options.toppings
        ],
    }


@router.put("/cart/item/{item_id}/options")
async def edit_cart_item(
    item_id: str,
    request: EditCartItemRequest,
    user_id: Optional[str] = Depends(get_current_user_id),
):
    """Change size/toppings of an item; quantity is kept."""
    result = await _run(
        get_cart_manager().edit_configuration(
            user_id,
            item_id,
            size_id=request.size_id,
            topping_ids=request.topping_ids,
        )
    )
    response = await _cart_response(user_id)
    response["message"] = result.message
    return response


@router.delete("/cart")
async def clear_cart(user_id: Optional[str] = Depends(get_current_user_id)):
    """Empty the cart (after checkout)."""
    result = await _run(get_cart_manager().clear(user_id))
    response = await _cart_response(user_id)
    response["message"] = result.message
    return response
