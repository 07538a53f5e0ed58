from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from opsflow.invoices.models import Invoice


class AbstractInvoiceRepository(ABC):
    """Interface abstraite pour le repository des factures (toujours filtré par tenant)."""

    @abstractmethod
    async def get_by_id_with_items(self, *, invoice_id: int, tenant_id: int) -> Optional[Invoice]:
        pass

    @abstractmethod
    async def list_invoices(
        self,
        *,
        tenant_id: int,
        status: Optional[str] = None,
        quote_id: Optional[int] = None,
        customer_id: Optional[int] = None,
        offset: int = 0,
        limit: int = 100,
    ) -> Tuple[List[Invoice], int]:
        pass

    @abstractmethod
    async def add(self, invoice: Invoice) -> Invoice:
        """Ajoute une facture (et ses lignes) à la transaction en cours, sans commit."""
        pass
