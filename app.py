from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dotenv import load_dotenv

from docstore import DocumentStoreError

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    load_dotenv("local.env")

    from endpoints.toy_endpoints import router as toy_router

    app = FastAPI()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(DocumentStoreError)
    async def document_store_error_handler(request: Request, exc: DocumentStoreError):
        logger.exception("DOCSTORE FAILURE: %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse({"error": str(exc)}, status_code=500)

    @app.get("/healthz")
    async def healthz():
        return JSONResponse({"status": "ok"})

    app.include_router(toy_router)

    return app


app = create_app()
