"""Function catalog handed to the model oracle on every proposal.

The catalog is the closed set of actions the assistant may propose. A handler
whose schema is missing here is unreachable.
"""

from __future__ import annotations

from rtp_core.schema.catalog import FunctionSchema, ParameterSchema

CATALOG_VERSION = "2024.3"

RECIPE_DIFFICULTIES = ["Easy", "Medium", "Hard"]
PRODUCT_CATEGORIES = ["ramen-bowl", "retail-product", "merchandise"]
USER_ROLES = ["customer", "employee", "admin"]


def _string(description: str | None = None, enum: list[str] | None = None) -> ParameterSchema:
    return ParameterSchema(type="string", description=description, enum=enum)


def _number(description: str | None = None) -> ParameterSchema:
    return ParameterSchema(type="number", description=description)


def _boolean(description: str | None = None) -> ParameterSchema:
    return ParameterSchema(type="boolean", description=description)


_SLUG = _string("URL-friendly slug (lowercase, hyphens instead of spaces)")
_EXISTING_SLUG = _string("Slug of the existing entry")

_INGREDIENTS = ParameterSchema(
    type="array",
    description="List of ingredients",
    items=ParameterSchema(
        type="object",
        properties={
            "name": _string(),
            "amount": _string(),
            "unit": _string(),
            "notes": _string(),
        },
        required=["name", "amount"],
    ),
)

_INSTRUCTIONS = ParameterSchema(
    type="array",
    description="Step-by-step instructions",
    items=ParameterSchema(
        type="object",
        properties={
            "step": _number(),
            "instruction": _string(),
            "duration": _number("Duration in minutes"),
        },
        required=["step", "instruction"],
    ),
)

RECIPE_FIELDS: dict[str, ParameterSchema] = {
    "title": _string("The recipe title"),
    "description": _string("Brief description of the recipe"),
    "difficulty": _string("Difficulty level", enum=RECIPE_DIFFICULTIES),
    "servings": _number("Number of servings"),
    "ingredients": _INGREDIENTS,
    "instructions": _INSTRUCTIONS,
    "tips": _string("Optional cooking tips"),
    "featured": _boolean("Whether to feature this recipe"),
}

PRODUCT_FIELDS: dict[str, ParameterSchema] = {
    "name": _string("Product name"),
    "description": _string("Product description"),
    "price_regular": _number("Regular price"),
    "category": _string("Product category", enum=PRODUCT_CATEGORIES),
    "stock_quantity": _number("Stock quantity"),
    "is_featured": _boolean("Whether to feature this product"),
}

_ACTIVE = _boolean("Whether the entry is visible to customers")


_SCHEMAS: tuple[FunctionSchema, ...] = (
    FunctionSchema(
        name="create_recipe",
        description="Create a new recipe with ingredients, instructions, and optional images",
        parameters=ParameterSchema(
            type="object",
            properties={"slug": _SLUG, **RECIPE_FIELDS},
            required=["title", "slug", "difficulty", "servings", "ingredients", "instructions"],
        ),
    ),
    FunctionSchema(
        name="create_product",
        description="Create a new product for the shop",
        parameters=ParameterSchema(
            type="object",
            properties={"slug": _SLUG, **PRODUCT_FIELDS},
            required=["name", "slug", "price_regular", "category", "stock_quantity"],
        ),
    ),
    FunctionSchema(
        name="update_recipe",
        description="Change fields of an existing recipe. Only pass the fields that should change.",
        parameters=ParameterSchema(
            type="object",
            properties={"slug": _EXISTING_SLUG, **RECIPE_FIELDS, "active": _ACTIVE},
            required=["slug"],
        ),
    ),
    FunctionSchema(
        name="update_product",
        description="Change fields of an existing shop product. Only pass the fields that should change.",
        parameters=ParameterSchema(
            type="object",
            properties={"slug": _EXISTING_SLUG, **PRODUCT_FIELDS, "active": _ACTIVE},
            required=["slug"],
        ),
    ),
    FunctionSchema(
        name="delete_recipe",
        description="Permanently delete a recipe",
        parameters=ParameterSchema(
            type="object",
            properties={"slug": _EXISTING_SLUG},
            required=["slug"],
        ),
    ),
    FunctionSchema(
        name="delete_product",
        description="Permanently delete a shop product",
        parameters=ParameterSchema(
            type="object",
            properties={"slug": _EXISTING_SLUG},
            required=["slug"],
        ),
    ),
    FunctionSchema(
        name="update_inventory",
        description="Update product inventory quantity",
        parameters=ParameterSchema(
            type="object",
            properties={
                "product_slug": _string("Product slug to update"),
                "quantity": _number("New quantity"),
            },
            required=["product_slug", "quantity"],
        ),
    ),
    FunctionSchema(
        name="approve_user",
        description="Approve a user and set their role",
        parameters=ParameterSchema(
            type="object",
            properties={
                "email": _string("User email address"),
                "role": _string("Role to assign", enum=USER_ROLES),
            },
            required=["email", "role"],
        ),
        min_role="admin",
    ),
)

_BY_NAME: dict[str, FunctionSchema] = {schema.name: schema for schema in _SCHEMAS}
if len(_BY_NAME) != len(_SCHEMAS):
    raise RuntimeError("Duplicate function names in the assistant catalog.")


def list_schemas() -> list[FunctionSchema]:
    return list(_SCHEMAS)


def get_schema(name: str) -> FunctionSchema | None:
    return _BY_NAME.get(name)


def catalog_names() -> frozenset[str]:
    return frozenset(_BY_NAME)
