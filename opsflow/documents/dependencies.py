from typing import Annotated

from fastapi import Depends

from opsflow.customers.dependencies import CustomerRepositoryDep
from opsflow.documents.service import DocumentService
from opsflow.email.dependencies import DocumentEmailServiceDep
from opsflow.invoices.dependencies import InvoiceRepositoryDep
from opsflow.pdf.dependencies import PDFGeneratorDep
from opsflow.quotes.dependencies import QuoteRepositoryDep


def get_document_service(
    quote_repo: QuoteRepositoryDep,
    invoice_repo: InvoiceRepositoryDep,
    customer_repo: CustomerRepositoryDep,
    pdf_generator: PDFGeneratorDep,
    email_service: DocumentEmailServiceDep,
) -> DocumentService:
    return DocumentService(
        quote_repo=quote_repo,
        invoice_repo=invoice_repo,
        customer_repo=customer_repo,
        pdf_generator=pdf_generator,
        email_service=email_service,
    )


DocumentServiceDep = Annotated[DocumentService, Depends(get_document_service)]
