"""Markdown previews of proposed actions.

This is the operator's only look at an action before it runs, so it is pure
and total: every catalog name has a branch and anything else falls back to a
JSON dump of the arguments.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Mapping

from rtp_core.schema.action import ProposedAction

PROPOSAL_LEAD = "I can help you with that. Here's what I'll do:"
PROPOSAL_QUESTION = "Would you like me to proceed?"

_FIELD_LABELS = {
    "title": "Title",
    "name": "Name",
    "description": "Description",
    "difficulty": "Difficulty",
    "servings": "Servings",
    "tips": "Tips",
    "featured": "Featured",
    "is_featured": "Featured",
    "active": "Active",
    "price_regular": "Price",
    "category": "Category",
    "stock_quantity": "Stock",
}


def format_value(value: Any) -> str:
    """Render a scalar the way an operator expects to read it (2.0 -> 2, True -> yes)."""
    if value is None:
        return "not set"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _price(value: Any) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return f"${value:.2f}"
    return f"${format_value(value)}"


def _count(value: Any) -> int:
    return len(value) if isinstance(value, list) else 0


def _featured(args: Mapping[str, Any], key: str) -> list[str]:
    return ["- Will be featured ⭐"] if args.get(key) else []


def _create_recipe(args: Mapping[str, Any]) -> list[str]:
    return [
        f"**Create Recipe: {format_value(args.get('title'))}**",
        f"- Slug: {format_value(args.get('slug'))}",
        f"- Difficulty: {format_value(args.get('difficulty'))}",
        f"- Servings: {format_value(args.get('servings'))}",
        f"- {_count(args.get('ingredients'))} ingredients",
        f"- {_count(args.get('instructions'))} steps",
        *_featured(args, "featured"),
    ]


def _create_product(args: Mapping[str, Any]) -> list[str]:
    return [
        f"**Create Product: {format_value(args.get('name'))}**",
        f"- Slug: {format_value(args.get('slug'))}",
        f"- Category: {format_value(args.get('category'))}",
        f"- Price: {_price(args.get('price_regular'))}",
        f"- Initial stock: {format_value(args.get('stock_quantity'))}",
        *_featured(args, "is_featured"),
    ]


def _change_lines(args: Mapping[str, Any]) -> list[str]:
    lines: list[str] = []
    for key, value in args.items():
        if key == "slug":
            continue
        if key == "ingredients":
            lines.append(f"- Ingredients: replaced with {_count(value)} items")
        elif key == "instructions":
            lines.append(f"- Instructions: replaced with {_count(value)} steps")
        elif key == "price_regular":
            lines.append(f"- Price: {_price(value)}")
        else:
            label = _FIELD_LABELS.get(key, key)
            lines.append(f"- {label}: {format_value(value)}")
    if not lines:
        lines.append("- No changes given")
    return lines


def _update_recipe(args: Mapping[str, Any]) -> list[str]:
    return [f"**Update Recipe: {format_value(args.get('slug'))}**", *_change_lines(args)]


def _update_product(args: Mapping[str, Any]) -> list[str]:
    return [f"**Update Product: {format_value(args.get('slug'))}**", *_change_lines(args)]


def _delete_recipe(args: Mapping[str, Any]) -> list[str]:
    return [f"**Delete Recipe: {format_value(args.get('slug'))}**", "- This cannot be undone"]


def _delete_product(args: Mapping[str, Any]) -> list[str]:
    return [f"**Delete Product: {format_value(args.get('slug'))}**", "- This cannot be undone"]


def _update_inventory(args: Mapping[str, Any]) -> list[str]:
    return [
        "**Update Inventory**",
        f"- Product: {format_value(args.get('product_slug'))}",
        f"- New quantity: {format_value(args.get('quantity'))}",
    ]


def _approve_user(args: Mapping[str, Any]) -> list[str]:
    return [
        "**Approve User**",
        f"- Email: {format_value(args.get('email'))}",
        f"- Role: {format_value(args.get('role'))}",
    ]


_RENDERERS: dict[str, Callable[[Mapping[str, Any]], list[str]]] = {
    "create_recipe": _create_recipe,
    "create_product": _create_product,
    "update_recipe": _update_recipe,
    "update_product": _update_product,
    "delete_recipe": _delete_recipe,
    "delete_product": _delete_product,
    "update_inventory": _update_inventory,
    "approve_user": _approve_user,
}


def rendered_names() -> frozenset[str]:
    return frozenset(_RENDERERS)


def format_preview(action: ProposedAction) -> str:
    renderer = _RENDERERS.get(action.name)
    if renderer is None:
        return json.dumps(action.arguments, indent=2, default=str)
    return "\n".join(renderer(action.arguments))


def proposal_message(action: ProposedAction) -> str:
    return f"{PROPOSAL_LEAD}\n\n{format_preview(action)}\n\n{PROPOSAL_QUESTION}"
