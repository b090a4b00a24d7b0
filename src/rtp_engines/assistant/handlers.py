"""Action handlers: one store mutation per catalog entry.

Handlers receive arguments that already passed schema validation. They
return a success ActionResult or let StoreError / ActionArgumentError
propagate to the dispatcher.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Mapping

from rtp_core.errors import ActionArgumentError
from rtp_core.protocols.store import Store
from rtp_core.schema.action import ActionResult

from .catalog import PRODUCT_FIELDS, RECIPE_FIELDS

Handler = Callable[[Mapping[str, Any], Store], Awaitable[ActionResult]]

RECIPES_TABLE = "recipes"
PRODUCTS_TABLE = "products"

RECIPE_UPDATE_COLUMNS = (*RECIPE_FIELDS, "active")
PRODUCT_UPDATE_COLUMNS = (*PRODUCT_FIELDS, "active")


def _units(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _changes(args: Mapping[str, Any], columns: tuple[str, ...]) -> dict[str, Any]:
    # Omitted and null fields are both left untouched.
    changes = {column: args[column] for column in columns if args.get(column) is not None}
    if not changes:
        raise ActionArgumentError(f"Nothing to update for '{args.get('slug')}': no changed fields were given.")
    return changes


async def create_recipe(args: Mapping[str, Any], store: Store) -> ActionResult:
    rows = await store.insert(
        RECIPES_TABLE,
        {
            "title": args["title"],
            "slug": args["slug"],
            "description": args.get("description"),
            "difficulty": args["difficulty"],
            "servings": args["servings"],
            "ingredients": list(args["ingredients"]),
            "instructions": list(args["instructions"]),
            "images": [],
            "tips": args.get("tips"),
            "active": True,
            "featured": bool(args.get("featured", False)),
        },
    )
    recipe = rows[0]
    return ActionResult.success(
        f'✅ Recipe "{args["title"]}" created successfully!',
        link=f"/recipes/{recipe['slug']}",
        data={"id": recipe.get("id"), "slug": recipe["slug"]},
    )


async def create_product(args: Mapping[str, Any], store: Store) -> ActionResult:
    rows = await store.insert(
        PRODUCTS_TABLE,
        {
            "name": args["name"],
            "slug": args["slug"],
            "description": args.get("description"),
            "price_regular": args["price_regular"],
            "category": args["category"],
            "stock_quantity": args["stock_quantity"],
            "images": [],
            "active": True,
            "is_featured": bool(args.get("is_featured", False)),
        },
    )
    product = rows[0]
    return ActionResult.success(
        f'✅ Product "{args["name"]}" created successfully!',
        link=f"/shop/{product['slug']}",
        data={"id": product.get("id"), "slug": product["slug"]},
    )


async def update_recipe(args: Mapping[str, Any], store: Store) -> ActionResult:
    changes = _changes(args, RECIPE_UPDATE_COLUMNS)
    rows = await store.update(RECIPES_TABLE, changes, {"slug": args["slug"]})
    recipe = rows[0]
    return ActionResult.success(
        f'✅ Recipe "{recipe.get("title") or args["slug"]}" updated ({", ".join(changes)}).',
        link=f"/recipes/{recipe['slug']}",
        data={"id": recipe.get("id"), "slug": recipe["slug"]},
    )


async def update_product(args: Mapping[str, Any], store: Store) -> ActionResult:
    changes = _changes(args, PRODUCT_UPDATE_COLUMNS)
    rows = await store.update(PRODUCTS_TABLE, changes, {"slug": args["slug"]})
    product = rows[0]
    return ActionResult.success(
        f'✅ Product "{product.get("name") or args["slug"]}" updated ({", ".join(changes)}).',
        link=f"/shop/{product['slug']}",
        data={"id": product.get("id"), "slug": product["slug"]},
    )


async def delete_recipe(args: Mapping[str, Any], store: Store) -> ActionResult:
    rows = await store.delete(RECIPES_TABLE, {"slug": args["slug"]})
    return ActionResult.success(
        f'🗑️ Recipe "{args["slug"]}" deleted.',
        data={"id": rows[0].get("id"), "slug": args["slug"]},
    )


async def delete_product(args: Mapping[str, Any], store: Store) -> ActionResult:
    rows = await store.delete(PRODUCTS_TABLE, {"slug": args["slug"]})
    return ActionResult.success(
        f'🗑️ Product "{args["slug"]}" deleted.',
        data={"id": rows[0].get("id"), "slug": args["slug"]},
    )


async def update_inventory(args: Mapping[str, Any], store: Store) -> ActionResult:
    rows = await store.update(
        PRODUCTS_TABLE,
        {"stock_quantity": args["quantity"]},
        {"slug": args["product_slug"]},
    )
    product = rows[0]
    return ActionResult.success(
        f"✅ Inventory updated for {product.get('name') or args['product_slug']}: {_units(args['quantity'])} units",
        data={"id": product.get("id"), "stock_quantity": product.get("stock_quantity")},
    )


async def approve_user(args: Mapping[str, Any], store: Store) -> ActionResult:
    await store.update_user_metadata(args["email"], {"role": args["role"], "approved": True})
    return ActionResult.success(
        f"✅ User {args['email']} approved as {args['role']}!",
        data={"email": args["email"], "role": args["role"]},
    )


HANDLERS: dict[str, Handler] = {
    "create_recipe": create_recipe,
    "create_product": create_product,
    "update_recipe": update_recipe,
    "update_product": update_product,
    "delete_recipe": delete_recipe,
    "delete_product": delete_product,
    "update_inventory": update_inventory,
    "approve_user": approve_user,
}
