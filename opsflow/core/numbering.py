"""
Numérotation des documents par tenant: ``{prefix}-{tenantId}-{00001}``.

La ligne de compteur est créée si besoin (INSERT ... ON CONFLICT DO NOTHING),
verrouillée (SELECT ... FOR UPDATE) puis incrémentée par un
``UPDATE ... WHERE last_value = <lu>``, le tout dans la transaction de
l'appelant: un numéro n'est consommé que si celle-ci est validée.
"""
import logging
from typing import Optional

from sqlalchemy import UniqueConstraint, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel, Field, select

from opsflow.core.exceptions import PersistenceError

logger = logging.getLogger(__name__)

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class DocumentSequence(SQLModel, table=True):
    __tablename__ = "document_sequences"
    __table_args__ = (UniqueConstraint("tenant_id", "prefix", name="uq_document_sequences_tenant_prefix"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    tenant_id: int = Field(foreign_key="tenants.id", index=True)
    prefix: str = Field(max_length=10)
    last_value: int = Field(default=0)


def format_document_number(prefix: str, tenant_id: int, value: int) -> str:
    return f"{prefix}-{tenant_id}-{value:05d}"


async def _ensure_sequence_row(session: AsyncSession, tenant_id: int, prefix: str) -> None:
    # Deux premières réservations concurrentes: une seule insertion l'emporte, l'autre ne fait rien
    dialect = session.get_bind().dialect.name
    insert = _INSERT_BY_DIALECT.get(dialect)
    if insert is None:
        raise PersistenceError(f"Unsupported database dialect for document numbering: {dialect}")
    statement = (
        insert(DocumentSequence)
        .values(tenant_id=tenant_id, prefix=prefix, last_value=0)
        .on_conflict_do_nothing(index_elements=["tenant_id", "prefix"])
    )
    await session.execute(statement)


async def next_document_number(session: AsyncSession, tenant_id: int, prefix: str) -> str:
    """Réserve le prochain numéro de la séquence ``(tenant_id, prefix)``.

    Ne fait ni commit ni rollback: l'appelant possède la transaction.

    Raises:
        PersistenceError: Le compteur a changé entre la lecture et l'incrément.
    """
    await _ensure_sequence_row(session, tenant_id, prefix)

    where = (DocumentSequence.tenant_id == tenant_id, DocumentSequence.prefix == prefix)
    seen = await session.scalar(select(DocumentSequence.last_value).where(*where).with_for_update())
    result = await session.execute(
        update(DocumentSequence)
        .where(*where, DocumentSequence.last_value == seen)
        .values(last_value=seen + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.warning(f"[Numbering] Compteur {prefix} du tenant {tenant_id} modifié en concurrence (lu {seen})")
        raise PersistenceError("Document number sequence conflict")

    number = format_document_number(prefix, tenant_id, seen + 1)
    logger.debug(f"[Numbering] Numéro {number} réservé pour tenant {tenant_id}")
    return number
