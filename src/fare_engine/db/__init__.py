from .database import init_database
from .transaction import transaction

__all__ = ["init_database", "transaction"]
