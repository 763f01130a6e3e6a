from abc import ABC
from contextlib import contextmanager
from typing import Callable, Iterator, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.orm import Session, sessionmaker
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)

from shopping_cart.core.config import config
from shopping_cart.core.exceptions import (
    ConflictError, DatabaseError, StoreUnavailableError
)
from shopping_cart.db import session_scope
import logging

T = TypeVar('T')

logger = logging.getLogger(__name__)


class BaseRepository(ABC):
    """
    Shared session handling for the cart and product stores.

    Driver errors are translated at this boundary so services only ever see
    the application exception hierarchy:

    - IntegrityError     -> ConflictError
    - OperationalError   -> StoreUnavailableError (connection loss, timeouts)
    - pool TimeoutError  -> StoreUnavailableError
    - other SQLAlchemy   -> DatabaseError
    """

    def __init__(self, session_factory: sessionmaker, read_retries: Optional[int] = None):
        self.session_factory = session_factory
        self.read_retries = read_retries if read_retries is not None else config.store.read_retries
        if self.read_retries < 1:
            raise ValueError("read_retries must be at least 1")

    @contextmanager
    def get_session(self, operation: str) -> Iterator[Session]:
        """Transactional session with error translation"""
        try:
            with session_scope(self.session_factory) as session:
                yield session
        except IntegrityError as e:
            logger.warning(f"{operation}: integrity violation: {e.orig}")
            raise ConflictError(f"{operation} conflicts with an existing record")
        except (OperationalError, PoolTimeoutError) as e:
            logger.error(f"{operation}: store unavailable: {str(e)}")
            raise StoreUnavailableError(operation, str(e))
        except SQLAlchemyError as e:
            logger.error(f"{operation}: database error: {str(e)}")
            raise DatabaseError(f"{operation} failed: {str(e)}", operation)

    def run_read(self, operation: str, fn: Callable[[], T]) -> T:
        """
        Run an idempotent read, retrying while the store is unavailable.

        Writes never go through here; replaying a write is the caller's
        decision.
        """
        retrying = Retrying(
            retry=retry_if_exception_type(StoreUnavailableError),
            stop=stop_after_attempt(self.read_retries),
            wait=wait_exponential(multiplier=0.05, max=1.0) + wait_random(0, 0.05),
            before_sleep=lambda state: logger.warning(
                f"{operation}: attempt {state.attempt_number} failed, retrying"
            ),
            reraise=True,
        )
        return retrying(fn)
