"""
Connexion à la base relationnelle (SQLAlchemy).

L'engine est créé une seule fois par le lifespan de l'application
puis injecté dans les handlers via les dépendances FastAPI.
"""
import os
from typing import Optional
from loguru import logger
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from models import metadata

DEFAULT_DATABASE_URL = "sqlite:///./products.db"


def create_db_engine(url: Optional[str] = None) -> Engine:
    """Construit un engine à partir de DATABASE_URL (ou de l'URL fournie)."""
    url = url or os.getenv("DATABASE_URL", DEFAULT_DATABASE_URL)
    if url.startswith("sqlite"):
        options = {"connect_args": {"check_same_thread": False}}
        # Base en mémoire: une seule connexion partagée, sinon chaque connexion voit une base vide
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
        engine = create_engine(url, **options)
    else:
        engine = create_engine(url, pool_pre_ping=True)
    logger.info(f"Database engine created for {engine.url.render_as_string(hide_password=True)}")
    return engine


def init_db(engine: Engine) -> None:
    """Crée la table products si elle n'existe pas encore."""
    metadata.create_all(engine)
