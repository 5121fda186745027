"""Persistence gateway: generic CRUD over the tenants/products/orders collections.

Every call runs under a caller-imposed timeout. Timeouts and connection
failures surface as ``Transient``; unique-constraint violations as ``Conflict``;
values a column type rejects as ``ValidationError``.
Reads are retried a bounded number of times, writes never.
"""
import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Optional, TypeVar

from sqlalchemy import select, func, update as sa_update, delete as sa_delete
from sqlalchemy.exc import DataError, IntegrityError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from snackdash.core.config import settings
from snackdash.core.exceptions import Conflict, Transient, ValidationError
from snackdash.core.logging import get_logger
from snackdash.models import Tenant, Product, Order


logger = get_logger(__name__)

T = TypeVar("T")

COLLECTIONS = {
    "tenants": Tenant,
    "products": Product,
    "orders": Order,
}

# Children removed together with their parent record
CASCADES = {
    "tenants": (("orders", "tenant_id"), ("products", "tenant_id")),
}


class PersistenceGateway:
    """Thin CRUD layer over one ``AsyncSession``."""

    def __init__(
        self,
        db: AsyncSession,
        timeout: Optional[float] = None,
        read_retries: Optional[int] = None,
        backoff: Optional[float] = None,
    ):
        self.db = db
        self.timeout = settings.GATEWAY_TIMEOUT_SECONDS if timeout is None else timeout
        self.read_retries = settings.GATEWAY_READ_RETRIES if read_retries is None else read_retries
        self.backoff = settings.GATEWAY_RETRY_BACKOFF_SECONDS if backoff is None else backoff

    @staticmethod
    def _model(collection: str):
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise ValueError(f"Unknown collection: {collection}") from None

    async def _rollback(self) -> None:
        try:
            await self.db.rollback()
        except Exception:
            logger.exception("Rollback after gateway failure also failed")

    async def _call(self, op: Callable[[], Awaitable[T]], *, name: str, retries: int = 0) -> T:
        attempt = 0
        while True:
            try:
                return await asyncio.wait_for(op(), timeout=self.timeout)
            except IntegrityError as e:
                await self._rollback()
                logger.info(f"Constraint violation during {name}: {e.orig}")
                raise Conflict() from e
            except DataError as e:
                # Value rejected by a column type (length, numeric precision)
                await self._rollback()
                logger.info(f"Data rejected during {name}: {e.orig}")
                raise ValidationError("A value is too long or out of range") from e
            except (asyncio.TimeoutError, OperationalError) as e:
                await self._rollback()
                if attempt < retries:
                    attempt += 1
                    logger.warning(f"Transient failure during {name} (attempt {attempt}). Retrying...")
                    await asyncio.sleep(self.backoff * attempt)
                    continue
                logger.error(f"Transient failure during {name}: {type(e).__name__}. Giving up.")
                raise Transient() from e

    def _where(self, model, query, filters: Optional[Dict[str, Any]]):
        for column, value in (filters or {}).items():
            attr = getattr(model, column)
            if isinstance(value, (list, tuple, set, frozenset)):
                query = query.where(attr.in_(list(value)))
            else:
                query = query.where(attr == value)
        return query

    async def fetch(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Any]:
        """Return records matching all equality filters (a list value means IN)."""
        model = self._model(collection)
        query = self._where(model, select(model), filters)
        if order_by:
            column = getattr(model, order_by)
            query = query.order_by(column.desc() if descending else column.asc(), model.id)
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        query = query.execution_options(populate_existing=True)

        async def run():
            result = await self.db.execute(query)
            return list(result.scalars().all())

        return await self._call(run, name=f"fetch {collection}", retries=self.read_retries)

    async def get(self, collection: str, record_id: str) -> Optional[Any]:
        rows = await self.fetch(collection, {"id": record_id}, limit=1)
        return rows[0] if rows else None

    async def count(self, collection: str, filters: Optional[Dict[str, Any]] = None) -> int:
        model = self._model(collection)
        query = self._where(model, select(func.count(model.id)), filters)

        async def run():
            result = await self.db.execute(query)
            return result.scalar() or 0

        return await self._call(run, name=f"count {collection}", retries=self.read_retries)

    async def insert(self, collection: str, values: Dict[str, Any]) -> Any:
        """Insert a record; the id is assigned here, not by the caller."""
        model = self._model(collection)
        values = {k: v for k, v in values.items() if k != "id"}
        record = model(**values)

        async def run():
            self.db.add(record)
            await self.db.commit()
            await self.db.refresh(record)
            return record

        return await self._call(run, name=f"insert {collection}")

    async def update(
        self,
        collection: str,
        record_id: str,
        values: Dict[str, Any],
        expected: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Apply ``values``; with ``expected`` the write only lands if those fields still hold.

        Returns False when no row matched (missing record or lost compare-and-swap).
        """
        model = self._model(collection)
        stmt = sa_update(model).where(model.id == record_id)
        for column, value in (expected or {}).items():
            stmt = stmt.where(getattr(model, column) == value)
        stmt = stmt.values(**values).execution_options(synchronize_session=False)

        async def run():
            result = await self.db.execute(stmt)
            await self.db.commit()
            return result.rowcount > 0

        return await self._call(run, name=f"update {collection}")

    async def delete(self, collection: str, record_id: str) -> bool:
        model = self._model(collection)

        async def run():
            for child, fk in CASCADES.get(collection, ()):
                child_model = self._model(child)
                await self.db.execute(
                    sa_delete(child_model).where(getattr(child_model, fk) == record_id)
                )
            result = await self.db.execute(sa_delete(model).where(model.id == record_id))
            await self.db.commit()
            return result.rowcount > 0

        return await self._call(run, name=f"delete {collection}")
