"""
Catalog and directory routes.

Handles:
- GET    /api/products       - Product catalog
- POST   /api/products       - Create/update a product
- DELETE /api/products/<id>  - Remove a product
- GET    /api/users          - User directory (passwords removed)
- GET    /api/b2b-clients    - B2B client directory

Product mutations answer with the full post-mutation catalog.
"""

from flask import Blueprint

from logging_config import get_logger
from .helpers import bad_request, forward, json_body, sanitize_text


# Module logger
logger = get_logger(__name__)

catalog_bp = Blueprint("catalog", __name__, url_prefix="/api")

# Free-text product fields cleaned before they reach the sheet
PRODUCT_TEXT_FIELDS = (
    "name",
    "category",
    "unitOfMeasure",
    "supplierName",
    "storageLocation",
)


def _without_passwords(users):
    if not isinstance(users, list):
        return users
    return [
        {k: v for k, v in user.items() if k != "password"} if isinstance(user, dict) else user
        for user in users
    ]


@catalog_bp.route("/products", methods=["GET"])
def get_products():
    return forward("getProducts", lambda ledger: ledger.get_products())


@catalog_bp.route("/products", methods=["POST"])
def add_product():
    """Create or update a product; id and name are required."""
    body = json_body()
    if body is None:
        return bad_request("Request body must be a JSON object")

    product = dict(body)
    product["id"] = str(product.get("id") or "").strip()
    for field in PRODUCT_TEXT_FIELDS:
        if field in product and product[field] is not None:
            product[field] = sanitize_text(product[field])

    if not product["id"] or not product.get("name"):
        return bad_request("Product ID and name are required")

    logger.info(f"Saving product {product['id']}")
    return forward("addProduct", lambda ledger: ledger.add_product(product))


@catalog_bp.route("/products/<product_id>", methods=["DELETE"])
def delete_product(product_id: str):
    product_id = (product_id or "").strip()
    if not product_id:
        return bad_request("Product ID is required")

    logger.info(f"Deleting product {product_id}")
    return forward("deleteProduct", lambda ledger: ledger.delete_product(product_id))


@catalog_bp.route("/users", methods=["GET"])
def get_users():
    return forward("getUsers", lambda ledger: ledger.get_users(), transform=_without_passwords)


@catalog_bp.route("/b2b-clients", methods=["GET"])
def get_b2b_clients():
    return forward("getB2BClients", lambda ledger: ledger.get_b2b_clients())
