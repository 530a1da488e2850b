"""Refreshing cart lines from the catalogue before checkout.

A cart can sit on a device for days. Before showing the payment screen the
client re-reads current price, stock and images for every product in the
cart. Products are fetched concurrently, one request per distinct product;
the first failure aborts the refresh.
"""

import asyncio
from dataclasses import dataclass, field

import structlog

from catalogue.product.port import ProductService, ProductSnapshot
from ordering.cart.cart import CartLine, LineKey
from shared.money import to_minor

logger = structlog.get_logger(__name__)


@dataclass
class CartRefresh:
    lines: list[CartLine]
    price_changed: set[LineKey] = field(default_factory=set)
    unavailable: set[LineKey] = field(default_factory=set)


def _refreshed_line(line: CartLine, product: ProductSnapshot) -> CartLine:
    variant = product.variant(line.variant_id)
    return line.model_copy(
        update={
            "unit_price": product.price_for(line.variant_id),
            "product_name": product.name,
            "product_image_url": product.cover_image or line.product_image_url,
            "product_note": variant.description if variant and variant.description else line.product_note,
            "available_stock": variant.stock if variant else 0,
        }
    )


async def refresh_cart_lines(lines: list[CartLine], product_service: ProductService) -> CartRefresh:
    product_ids = sorted({line.product_id for line in lines})
    products = await asyncio.gather(*(product_service.get_product(pid) for pid in product_ids))
    by_id = dict(zip(product_ids, products, strict=True))

    result = CartRefresh(lines=[])
    for line in lines:
        updated = _refreshed_line(line, by_id[line.product_id])
        if to_minor(updated.unit_price) != to_minor(line.unit_price):
            result.price_changed.add(line.key)
        if updated.available_stock == 0:
            result.unavailable.add(line.key)
        result.lines.append(updated)

    if result.price_changed or result.unavailable:
        logger.info(
            "Cart lines changed since they were added",
            price_changed=len(result.price_changed),
            unavailable=len(result.unavailable),
        )
    return result
