from datetime import datetime
from typing import Optional
from pydantic import BaseModel
from sqlalchemy import Column, DateTime, Float, Integer, MetaData, String, Table
from sqlalchemy.sql import func

metadata = MetaData()

# Table "products": id et timestamps générés par la base
products = Table(
    "products",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(255), nullable=False, index=True),
    Column("price", Float, nullable=False),
    Column("created_at", DateTime(timezone=True), server_default=func.now()),
    Column("updated_at", DateTime(timezone=True), server_default=func.now()),
)


class Product(BaseModel):
    id: int
    name: str
    price: float
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
