"""
Module principal de l'application FastAPI OpsFlow.

Ce module configure le logging, les middlewares (contexte de requête, CORS),
les gestionnaires d'erreurs et inclut les routeurs du workflow
devis -> visite technique -> installation -> facture.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from opsflow.config import settings
from opsflow.core.error_handlers import register_exception_handlers
from opsflow.core.logging_config import REQUEST_ID_HEADER, RequestContextMiddleware, setup_logging
from opsflow.database import create_tables

# Modèles importés pour que SQLModel.metadata soit complet
from opsflow.core.numbering import DocumentSequence  # noqa: F401
from opsflow.tenants.models import Tenant  # noqa: F401
from opsflow.customers.models import Customer  # noqa: F401
from opsflow.projects.models import Project  # noqa: F401
from opsflow.quotes.models import Quote, QuoteItem  # noqa: F401
from opsflow.surveys.models import Survey  # noqa: F401
from opsflow.installations.models import Installation  # noqa: F401
from opsflow.invoices.models import Invoice, InvoiceItem  # noqa: F401

# --- Importer les routeurs ---
from opsflow.quotes.router import router as quote_router
from opsflow.surveys.router import router as survey_router
from opsflow.installations.router import router as installation_router
from opsflow.invoices.router import router as invoice_router
from opsflow.notifications.router import router as notifications_router

setup_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.CREATE_TABLES_ON_STARTUP:
        logger.info("Création des tables au démarrage (CREATE_TABLES_ON_STARTUP)")
        await create_tables()
    yield
    logger.info("Arrêt de l'application.")


app = FastAPI(
    title="OpsFlow API",
    description="API du workflow devis, visites techniques, installations et factures (multi-tenant).",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(RequestContextMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Range", REQUEST_ID_HEADER],
)

register_exception_handlers(app)

# ======================================================
# Inclure les routeurs
# ======================================================
app.include_router(quote_router, prefix="/api")
app.include_router(survey_router, prefix="/api")
app.include_router(installation_router, prefix="/api")
app.include_router(invoice_router, prefix="/api")
app.include_router(notifications_router)


@app.get("/", tags=["Root"])
async def read_root():
    return {"message": "Bienvenue sur l'API OpsFlow"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("opsflow.main:app", host="0.0.0.0", port=8000)
