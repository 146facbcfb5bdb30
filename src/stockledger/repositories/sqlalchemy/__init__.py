"""SQLAlchemy repository implementations."""

from stockledger.repositories.sqlalchemy.database import (
    build_engine,
    build_session_factory,
    get_engine,
    get_session_factory,
    init_db,
    reset_database,
    Base,
)
from stockledger.repositories.sqlalchemy.product_repo import SqlAlchemyProductRepository
from stockledger.repositories.sqlalchemy.ledger_repo import SqlAlchemyLedgerRepository
from stockledger.repositories.sqlalchemy.cache_repo import SqlAlchemyCacheRepository

__all__ = [
    "build_engine",
    "build_session_factory",
    "get_engine",
    "get_session_factory",
    "init_db",
    "reset_database",
    "Base",
    "SqlAlchemyProductRepository",
    "SqlAlchemyLedgerRepository",
    "SqlAlchemyCacheRepository",
]
