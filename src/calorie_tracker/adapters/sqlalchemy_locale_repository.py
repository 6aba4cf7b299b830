"""SQLAlchemy repository for locales."""

from dataclasses import dataclass

from sqlalchemy import Select, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from calorie_tracker.adapters.database import transaction
from calorie_tracker.adapters.sqlalchemy_tables import LocaleRow
from calorie_tracker.domain.locales import Locale, LocaleQuery


@dataclass
class SqlAlchemyLocaleRepository:
    """Locale repository backed by the ``locales`` table."""

    session_factory: async_sessionmaker[AsyncSession]

    async def get_locale(self, locale_id: int) -> Locale | None:
        async with transaction(self.session_factory) as session:
            row = await session.get(LocaleRow, locale_id)
            return _to_locale(row) if row is not None else None

    async def search_locales(self, query: LocaleQuery) -> tuple[list[Locale], int]:
        stmt = filter_locales(query)
        async with transaction(self.session_factory) as session:
            total = await session.scalar(
                select(func.count()).select_from(stmt.subquery())
            )
            rows = await session.scalars(
                stmt.order_by(LocaleRow.name, LocaleRow.region)
                .offset((query.page - 1) * query.limit)
                .limit(query.limit)
            )
            return [_to_locale(row) for row in rows], total or 0


def filter_locales(query: LocaleQuery) -> Select:
    """Build the locale query, matching ``text`` against name or region."""
    stmt = select(LocaleRow)
    if query.text:
        pattern = f"%{query.text}%"
        stmt = stmt.where(
            or_(LocaleRow.name.ilike(pattern), LocaleRow.region.ilike(pattern))
        )
    return stmt


def _to_locale(row: LocaleRow) -> Locale:
    return Locale(
        id=row.id,
        name=row.name,
        code=row.code,
        region=row.region,
        language_code=row.language_code,
        currency_code=row.currency_code,
    )
