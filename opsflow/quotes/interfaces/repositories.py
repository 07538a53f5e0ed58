from abc import ABC, abstractmethod
from typing import Optional, List, Tuple

from opsflow.quotes.models import Quote


class AbstractQuoteRepository(ABC):
    """Interface abstraite pour le repository des devis (toujours filtré par tenant)."""

    @abstractmethod
    async def get_by_id_with_items(self, *, quote_id: int, tenant_id: int) -> Optional[Quote]:
        """Récupère un devis du tenant par son ID, incluant ses lignes."""
        pass

    @abstractmethod
    async def list_quotes(
        self,
        *,
        tenant_id: int,
        status: Optional[str] = None,
        customer_id: Optional[int] = None,
        project_id: Optional[int] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Tuple[List[Quote], int]:
        """Liste les devis du tenant avec filtres et pagination."""
        pass

    @abstractmethod
    async def add(self, quote: Quote) -> Quote:
        """Ajoute un devis (et ses lignes) à la transaction en cours, sans commit."""
        pass
