"""
Accès aux données de la table products.

Expose les cinq opérations de stockage utilisées par le service:
recherche filtrée, lecture par id, insertion, mise à jour et suppression.
"""
from typing import Any, Dict, List, Optional, Union
from sqlalchemy import delete, insert, select, update
from sqlalchemy.engine import Engine
from sqlalchemy.sql import func
from models import Product, products

ProductId = Union[int, float]

# Bornes d'un INTEGER SQL signé 64 bits
MIN_ID = -(2 ** 63)
MAX_ID = 2 ** 63 - 1


class ProductRepository:
    def __init__(self, engine: Engine):
        self.engine = engine

    def find_by_name(self, name_filter: str) -> List[Product]:
        """Produits dont le nom contient name_filter (littéral, % et _ échappés), triés par nom."""
        query = (
            select(products)
            .where(products.c.name.contains(name_filter, autoescape=True))
            .order_by(products.c.name)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(query).mappings().all()
        return [Product(**row) for row in rows]

    def get_by_id(self, product_id: ProductId) -> Optional[Product]:
        # Un id non entier ou hors bornes ne peut correspondre à aucune ligne
        if not isinstance(product_id, int) or not MIN_ID <= product_id <= MAX_ID:
            return None
        query = select(products).where(products.c.id == product_id)
        with self.engine.connect() as conn:
            row = conn.execute(query).mappings().first()
        return Product(**row) if row else None

    def insert(self, name: str, price: float) -> None:
        with self.engine.begin() as conn:
            conn.execute(insert(products).values(name=name, price=price))

    def update(self, product_id: ProductId, values: Dict[str, Any]) -> None:
        """Met à jour les colonnes fournies; updated_at prend l'heure du serveur SQL."""
        statement = (
            update(products)
            .where(products.c.id == product_id)
            .values(**values, updated_at=func.now())
        )
        with self.engine.begin() as conn:
            conn.execute(statement)

    def delete(self, product_id: ProductId) -> None:
        with self.engine.begin() as conn:
            conn.execute(delete(products).where(products.c.id == product_id))
