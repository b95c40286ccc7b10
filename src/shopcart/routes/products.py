import logging

from flask import Blueprint, request

from shopcart.core.exceptions import NotFoundError, ValidationError
from shopcart.repositories.product_repository import ProductCatalog
from shopcart.routes.utils import get_service, success_response
from shopcart.schemas.cart_schemas import ProductResponse

logger = logging.getLogger(__name__)

products_bp = Blueprint("products", __name__)


@products_bp.route("", methods=["GET"])
def list_products():
    """List the catalog, optionally filtered by category or a search term."""
    catalog = get_service(ProductCatalog)
    category = request.args.get("category", "").strip()
    search_query = request.args.get("q", "").strip()

    if search_query and len(search_query) < 2:
        raise ValidationError("Search query must be at least 2 characters")
    if len(search_query) > 100:
        raise ValidationError("Search query cannot exceed 100 characters")

    if search_query:
        products = catalog.search(search_query)
        if category:
            products = [p for p in products if p.category.lower() == category.lower()]
    elif category:
        products = catalog.list_by_category(category)
    else:
        products = catalog.list_all()

    items = [ProductResponse.from_product(p).model_dump() for p in products]
    return success_response({"items": items, "count": len(items)})


@products_bp.route("/<product_id>", methods=["GET"])
def get_product(product_id: str):
    """Get a single catalog entry."""
    product = get_service(ProductCatalog).lookup(product_id)
    if product is None:
        logger.info(f"Product {product_id} not found")
        raise NotFoundError("Product", product_id)
    return success_response(ProductResponse.from_product(product).model_dump())
