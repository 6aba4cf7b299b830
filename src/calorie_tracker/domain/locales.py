"""Domain models for regional food catalogs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Locale:
    """A country or region that catalog foods can belong to."""

    id: int
    name: str
    code: str
    region: str | None = None
    language_code: str | None = None
    currency_code: str | None = None


@dataclass(frozen=True)
class LocaleQuery:
    """Filters for locale listings; ``text`` matches name or region."""

    text: str | None = None
    page: int = 1
    limit: int = 50


@dataclass(frozen=True)
class LocalePage:
    locales: list[Locale]
    total_count: int
    page: int
    total_pages: int
