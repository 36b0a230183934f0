"""Application services: product image management.

Only image records are handled here; storing or deleting the files
behind the URLs is the uploader's job.
"""

from __future__ import annotations

from stockroom.application.schemas import ImageMappingInput, ProductImageInput, parse_input
from stockroom.domain.exceptions import ProductNotFoundError
from stockroom.domain.model.product import Product, ProductImage
from stockroom.domain.repository.product_repository import ProductRepository


class _ProductImageHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def _load(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product


class AddProductImagesHandler(_ProductImageHandler):

    def handle(self, product_id: str, images: list[dict]) -> Product:
        """Append images; default ordering continues after the existing ones."""
        product = self._load(product_id)
        parsed = [parse_input(ProductImageInput, raw) for raw in images]
        offset = len(product.images)
        images = [img.to_domain(offset + i) for i, img in enumerate(parsed)]
        product.add_images(images)
        if not self._product_repo.add_images(product_id, images):
            raise ProductNotFoundError(product_id)
        return product


class DeleteProductImageHandler(_ProductImageHandler):

    def handle(self, product_id: str, image_id: str) -> ProductImage:
        product = self._load(product_id)
        removed = product.remove_image(image_id)
        if not self._product_repo.remove_image(product_id, image_id):
            raise ProductNotFoundError(product_id)
        return removed


class MapProductImagesHandler(_ProductImageHandler):

    def handle(self, product_id: str, mappings: list[dict]) -> Product:
        product = self._load(product_id)
        parsed = [parse_input(ImageMappingInput, raw) for raw in mappings]
        product.map_images({m.image_id: list(m.variant_item_ids) for m in parsed})
        if not self._product_repo.update_fields(product, ["images"]):
            raise ProductNotFoundError(product_id)
        return product
