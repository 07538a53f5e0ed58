import pytest
from unittest.mock import AsyncMock

from sqlalchemy.exc import OperationalError

from opsflow.core.exceptions import PersistenceError
from opsflow.quotes.repositories import SQLAlchemyQuoteRepository

pytestmark = pytest.mark.asyncio


@pytest.fixture
def failing_session() -> AsyncMock:
    session = AsyncMock()
    session.execute.side_effect = OperationalError("SELECT 1", {}, Exception("connection lost"))
    return session


async def test_read_error_rolls_back_and_chains(failing_session):
    repo = SQLAlchemyQuoteRepository(failing_session)

    with pytest.raises(PersistenceError) as exc_info:
        await repo.get_by_id_with_items(quote_id=1, tenant_id=1)

    failing_session.rollback.assert_awaited_once()
    assert isinstance(exc_info.value.__cause__, OperationalError)
    assert exc_info.value.original_exception is exc_info.value.__cause__


async def test_list_error_rolls_back(failing_session):
    repo = SQLAlchemyQuoteRepository(failing_session)

    with pytest.raises(PersistenceError):
        await repo.list_quotes(tenant_id=1)

    failing_session.rollback.assert_awaited_once()
