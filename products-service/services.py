from typing import List
from loguru import logger
from errors import ProductNotFoundError
from models import Product
from repository import ProductId, ProductRepository
from schemas import ProductCreate, ProductFilter, ProductUpdate


class ProductService:
    """Opérations sur les produits; le stockage est injecté par le constructeur."""

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def list(self, filters: ProductFilter) -> List[Product]:
        logger.info(f"Fetching products matching '{filters.name}'")
        return self.repository.find_by_name(filters.name)

    def create(self, data: ProductCreate) -> None:
        logger.info(f"Creating product: {data.name}")
        self.repository.insert(name=data.name, price=data.price)

    def update(self, product_id: ProductId, data: ProductUpdate) -> None:
        self._get_existing(product_id)
        values = {"name": data.name}
        if data.price is not None:
            values["price"] = data.price
        logger.bind(fields=sorted(values)).info(f"Updating product {product_id}")
        self.repository.update(product_id, values)

    def remove(self, product_id: ProductId) -> None:
        self._get_existing(product_id)
        logger.info(f"Deleting product {product_id}")
        self.repository.delete(product_id)

    def _get_existing(self, product_id: ProductId) -> Product:
        # Lecture explicite avant écriture: "product not found" distinct d'une écriture sans effet
        product = self.repository.get_by_id(product_id)
        if product is None:
            logger.warning(f"Product {product_id} not found")
            raise ProductNotFoundError(product_id)
        return product
