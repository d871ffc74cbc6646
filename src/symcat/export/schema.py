"""
Machine-readable migration table for other tools.

``migration_schema`` turns the links of a :class:`MigrationResolver` into a
validated pydantic document; ``migration_json_schema`` publishes its JSON
Schema so consumers can validate what they receive.

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from symcat.catalog.migration import MigrationLink, MigrationResolver


class MigrationRecord(BaseModel):
    """One deprecated symbol and its recommended replacement."""

    source_standard: str = Field(description="Standard holding the deprecated symbol")
    source_code: str = Field(description="Code of the deprecated symbol")
    source_name: str | None = Field(default=None, description="Canonical name of the deprecated symbol")
    target_standard: str = Field(description="Standard holding the replacement")
    target_code: str = Field(description="Code of the replacement symbol")
    target_name: str | None = Field(default=None)
    origin: str = Field(default="manual", description="How the link was created: manual or crt")


class MigrationTable(BaseModel):
    """All migration links known to a resolver."""

    standards: list[str] = Field(default_factory=list, description="Standards involved, sorted")
    links: list[MigrationRecord] = Field(default_factory=list)


def _name(resolver: MigrationResolver, standard: str, code) -> str | None:
    std = resolver.library.find(standard)
    if std is None:
        return None
    symbol = std.symbols.get(code)
    return symbol.name if symbol is not None else None


def _record(resolver: MigrationResolver, link: MigrationLink) -> MigrationRecord:
    return MigrationRecord(
        source_standard=link.source.standard,
        source_code=str(link.source.code),
        source_name=_name(resolver, link.source.standard, link.source.code),
        target_standard=link.target.standard,
        target_code=str(link.target.code),
        target_name=_name(resolver, link.target.standard, link.target.code),
        origin=link.origin,
    )


def migration_schema(resolver: MigrationResolver, *, standard: str | None = None) -> MigrationTable:
    """Migration links as records, optionally only those leaving ``standard``."""
    links = resolver.links_from(standard) if standard is not None else resolver.links()
    records = [_record(resolver, link) for link in links]
    involved = {r.source_standard for r in records} | {r.target_standard for r in records}
    return MigrationTable(standards=sorted(involved), links=records)


def migration_json_schema() -> dict[str, Any]:
    return MigrationTable.model_json_schema()
