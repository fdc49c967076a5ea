"""HTTP API for card extraction and contact management."""

import logging
from typing import Any

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from card_manager import errors
from card_manager.config import Settings
from card_manager.extractor.base import Extractor
from card_manager.extractor.replicate import ReplicateExtractor
from card_manager.models.contact import ContactFields, ContactRecord, ContactUpdate
from card_manager.store import InMemoryRecordStore, RecordStore

logger = logging.getLogger(__name__)


class ProcessTextRequest(BaseModel):
    text: str | None = None


class GenerateEmailRequest(BaseModel):
    card: dict[str, Any] | None = None


def create_app(
    store: RecordStore | None = None,
    extractor: Extractor | None = None,
    settings: Settings | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        store: Record store to serve. Defaults to a fresh in-memory store.
        extractor: Extractor used by the AI endpoints. Defaults to a
            ReplicateExtractor configured from ``settings``.
        settings: Runtime settings. Defaults to ``Settings.from_env()``.
    """
    settings = settings or Settings.from_env()
    store = store if store is not None else InMemoryRecordStore()
    extractor = extractor or ReplicateExtractor.from_settings(settings)

    app = FastAPI(title="Card Manager API")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.store = store
    app.state.extractor = extractor

    @app.exception_handler(errors.CardManagerError)
    async def handle_card_manager_error(request: Request, exc: errors.CardManagerError):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc, exc_info=exc)
        else:
            logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        problems = "; ".join(
            f"{'.'.join(str(p) for p in e['loc'])}: {e['msg']}" for e in exc.errors()
        )
        logger.warning("%s %s invalid request: %s", request.method, request.url.path, problems)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": f"Invalid request: {problems}"},
        )

    @app.post("/api/process-text")
    def process_text(body: ProcessTextRequest):
        if not body.text or not body.text.strip():
            raise errors.ValidationError("Text must not be empty.")
        fields = extractor.extract_fields(body.text)
        return {"data": fields.model_dump()}

    @app.post("/api/generate-email")
    def generate_email(body: GenerateEmailRequest):
        if not body.card:
            raise errors.ValidationError("Card data must not be empty.")
        try:
            card = ContactFields.model_validate(body.card)
        except PydanticValidationError as e:
            raise errors.ValidationError(f"Invalid card data: {e.error_count()} invalid field(s).") from e
        return {"email": extractor.draft_email(card)}

    @app.get("/api/cards")
    def list_cards(q: str = ""):
        cards = store.search(q) if q else store.list()
        return {"cards": [c.model_dump(mode="json", by_alias=True) for c in cards]}

    @app.post(
        "/api/cards",
        status_code=status.HTTP_201_CREATED,
        response_model=ContactRecord,
        response_model_by_alias=True,
    )
    def create_card(fields: ContactFields):
        return store.create(fields)

    @app.put("/api/cards/{card_id}", response_model=ContactRecord, response_model_by_alias=True)
    def update_card(card_id: int, changes: ContactUpdate):
        return store.update(card_id, changes)

    @app.delete("/api/cards/{card_id}", status_code=status.HTTP_204_NO_CONTENT)
    def delete_card(card_id: int):
        store.delete(card_id)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    @app.post("/api/test")
    def post_test():
        return {"message": "POST request to /api/test successful!"}

    @app.get("/api/ping")
    def ping():
        return {"message": "pong, API is alive"}

    return app
