"""Mini README: FastAPI application exposing the card ledger.

Structure:
    * create_application - application factory wiring routes to a ledger.

Routes:
    * POST /api/card-tap - tap ingress from the card reader.
    * GET /api/pending, POST /api/clear-pending - pending slot access.
    * POST /api/payment - settle a payment for the pending card.
    * GET /api/cards, POST /api/register, DELETE /api/cards/{uid},
      POST /api/topup, POST /api/wipe - card administration.

Malformed bodies are rejected with HTTP 400 before the ledger is touched.
When a write to the card file fails the mutation still stands and the
response carries a ``warning`` entry so the operator notices the risk.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..configuration import KantinSettings, get_settings
from ..ledger import (
    CardNotFoundError,
    Declined,
    DuplicateCardError,
    KantinLedger,
    LedgerValidationError,
)
from ..logging_utils import get_logger
from ..storage import JsonFileStore
from .schemas import (
    CardTapRequest,
    ClearPendingRequest,
    PaymentRequest,
    RegisterRequest,
    TopUpRequest,
)

LOGGER = get_logger(__name__)

PERSISTENCE_WARNING = "Change applied but could not be saved to disk"


def _with_warning(payload: Dict[str, Any], persisted: bool) -> Dict[str, Any]:
    if not persisted:
        payload["warning"] = PERSISTENCE_WARNING
    return payload


def create_application(
    ledger: Optional[KantinLedger] = None,
    settings: Optional[KantinSettings] = None,
) -> FastAPI:
    """Create the FastAPI application bound to a ledger instance."""

    if ledger is None:
        settings = settings or get_settings()
        ledger = KantinLedger(JsonFileStore(settings.data_file))

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        ledger.open()
        LOGGER.info("Kantin ledger ready with %s cards", len(ledger.registry))
        try:
            yield
        finally:
            ledger.close()

    app = FastAPI(title="Kantin Payment System", version="1.0.0", lifespan=lifespan)
    app.state.ledger = ledger

    @app.exception_handler(RequestValidationError)
    async def invalid_body(_: Request, error: RequestValidationError) -> JSONResponse:
        LOGGER.debug("Rejected request body: %s", error.errors())
        return JSONResponse(status_code=400, content={"detail": jsonable_encoder(error.errors())})

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "healthy", "cards": len(ledger.registry)}

    @app.post("/api/card-tap")
    def card_tap(request: CardTapRequest) -> JSONResponse:
        """Handle a tap reported by the card reader."""

        try:
            result = ledger.tap(request.uid)
        except LedgerValidationError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        if not result.known:
            return JSONResponse({"success": False, "message": "Card not registered"})
        return JSONResponse(
            {
                "success": True,
                "message": "Card detected",
                "card": {
                    "uid": result.card_id,
                    "name": result.holder_name,
                    "balance": result.balance,
                },
            }
        )

    @app.get("/api/pending")
    def pending() -> JSONResponse:
        return JSONResponse(ledger.pending().as_dict())

    @app.post("/api/clear-pending")
    def clear_pending(request: Optional[ClearPendingRequest] = None) -> JSONResponse:
        cleared = ledger.clear_pending(request.uid if request else None)
        return JSONResponse({"success": True, "cleared": cleared})

    @app.post("/api/payment")
    def payment(request: PaymentRequest) -> JSONResponse:
        """Settle a payment and clear the pending slot on success."""

        try:
            outcome = ledger.settle(request.uid, request.amount)
        except CardNotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        except LedgerValidationError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error

        if isinstance(outcome, Declined):
            return JSONResponse(
                {
                    "success": False,
                    "message": "Insufficient balance",
                    "balance": outcome.current_balance,
                }
            )
        ledger.clear_pending(request.uid)
        return JSONResponse(
            _with_warning(
                {
                    "success": True,
                    "message": "Payment successful",
                    "balance": outcome.new_balance,
                    "paid": outcome.paid,
                },
                outcome.persisted,
            )
        )

    @app.get("/api/cards")
    def list_cards() -> JSONResponse:
        payload = [
            {
                "uid": view.card_id,
                "name": view.holder_name,
                "balance": view.balance,
                "initialBalance": view.daily_allotment,
                "lastResetDate": view.last_reset_date.isoformat(),
                "needsReset": view.needs_reset,
            }
            for view in ledger.list_cards()
        ]
        return JSONResponse(payload)

    @app.post("/api/register")
    def register(request: RegisterRequest) -> JSONResponse:
        try:
            outcome = ledger.register(request.uid, request.name, request.initial_balance)
        except DuplicateCardError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        except LedgerValidationError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(
            _with_warning(
                {
                    "success": True,
                    "message": "Card registered successfully",
                    "card": outcome.card.as_dict(),
                },
                outcome.persisted,
            )
        )

    @app.delete("/api/cards/{uid}")
    def delete_card(uid: str) -> JSONResponse:
        try:
            outcome = ledger.delete(uid)
        except CardNotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        except LedgerValidationError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(
            _with_warning(
                {"success": True, "message": "Card deleted successfully"}, outcome.persisted
            )
        )

    @app.post("/api/topup")
    def top_up(request: TopUpRequest) -> JSONResponse:
        try:
            outcome = ledger.credit(request.uid, request.amount)
        except CardNotFoundError as error:
            raise HTTPException(status_code=404, detail=str(error)) from error
        except LedgerValidationError as error:
            raise HTTPException(status_code=400, detail=str(error)) from error
        return JSONResponse(
            _with_warning(
                {"success": True, "message": "Top up successful", "balance": outcome.balance},
                outcome.persisted,
            )
        )

    @app.post("/api/wipe")
    def wipe() -> JSONResponse:
        outcome = ledger.wipe()
        return JSONResponse(
            _with_warning(
                {"success": True, "message": "All data deleted", "removed": outcome.removed},
                outcome.persisted,
            )
        )

    return app
