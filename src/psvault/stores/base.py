"""
psvault/stores/base.py — Base comum dos stores.

Cada store recebe o sessionmaker no construtor e abre uma sessão
curta por operação. Erros do SQLAlchemy viram StoreError.
"""
import functools

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from psvault.exceptions import StoreError


def store_errors(action: str):
    """Decorator: converte SQLAlchemyError em StoreError com log."""

    def decorator(fn):
        @functools.wraps(fn)
        async def wrapper(*args, **kwargs):
            try:
                return await fn(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.error(f"💥 Falha ao {action}: {e}")
                raise StoreError(f"Falha ao {action}.") from e

        return wrapper

    return decorator


class BaseStore:

    def __init__(self, sessions: async_sessionmaker[AsyncSession]):
        self._sessions = sessions
