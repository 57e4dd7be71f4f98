"""
FastAPI application entry point for the Symptom Tracker service.

This module configures and creates the FastAPI application with:
- Structured JSON Logging with request ID propagation
- Dependency Injection: the persistence gateway is injected via Depends()
- Exception Handling: consistent error responses via setup_exception_handlers()
- CORS Middleware: allows the symptom form to call the API from a browser
- Lifespan Management: connection probe and user restore at startup

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                      │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware: LoggingMiddleware → CORSMiddleware             │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py    - /health, /ready                       │
    │    ├── symptoms.py  - record list / save / delete           │
    │    └── session.py   - selected user, connection, errors     │
    ├─────────────────────────────────────────────────────────────┤
    │  SymptomService (persistence gateway)                       │
    │    ├── SupabaseClient  - remote `symptoms` table            │
    │    └── LocalCache      - SQLite key-value mirror            │
    └─────────────────────────────────────────────────────────────┘
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from symptom_svc.api.routers import health_router, session_router, symptoms_router
from symptom_svc.core.config import API_HOST, API_PORT, API_RELOAD
from symptom_svc.core.dependencies import get_symptom_service
from symptom_svc.core.exceptions import setup_exception_handlers
from symptom_svc.core.logging_config import setup_logging
from symptom_svc.core.middleware import LoggingMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        - Configures structured JSON logging
        - Creates the gateway (store client + local cache)
        - Probes the remote store (status leaves "testing")
        - Restores the previously selected user and loads their records
    """
    setup_logging(level="INFO", json_format=True)

    logger = logging.getLogger(__name__)
    logger.info("Starting Symptom Tracker API...")

    service = get_symptom_service()
    app.state.symptom_service = service
    connection_status = await service.test_connection()
    user_name = await service.restore_user()
    logger.info(
        "Startup complete",
        extra={"connection_status": connection_status.value, "user_name": user_name}
    )

    yield

    logger.info("Symptom Tracker API shutting down...")


app = FastAPI(
    title="Symptom Tracker API",
    description="Log episodic symptoms (palpitations, dizziness, ...) to a remote table, "
                "with a local cache fallback when the table cannot be reached.",
    version="1.0.0",
    lifespan=lifespan
)

setup_exception_handlers(app)

# Middleware is executed in REVERSE order of registration.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(LoggingMiddleware)

app.include_router(health_router)
app.include_router(symptoms_router)
app.include_router(session_router)


if __name__ == "__main__":
    uvicorn.run(
        "symptom_svc.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD
    )
