import logging
from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from payment_gateway.config import Settings
from payment_gateway.dependencies import get_ledger, get_processor, get_settings
from payment_gateway.ledger import LedgerWriteError, OrderLedger
from payment_gateway.models import (
    OrderSavedResponse,
    PaymentIntentResponse,
    missing_order_fields,
    parse_amount,
)

logger = logging.getLogger(__name__)

router = APIRouter()

LIVENESS_MESSAGE = "¡El servidor de BigFood está en línea y listo para recibir pagos!"
INVALID_AMOUNT = "El monto es obligatorio y debe ser un número positivo."
PROCESSOR_FAILURE = "Hubo un problema al contactar al servicio de pagos: "
MISSING_ORDER_DATA = "Faltan datos del pedido."
ORDER_NOT_SAVED = "No se pudo guardar el pedido."
ORDER_SAVED = "Pedido guardado correctamente."
MISSING_CLIENT_SECRET = "el pago no devolvió un client secret."


@router.get("/", response_class=PlainTextResponse)
def liveness():
    return LIVENESS_MESSAGE


@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
def create_payment_intent_api(
    payload: Any = Body(None),
    processor=Depends(get_processor),
    settings: Settings = Depends(get_settings),
):
    raw_amount = payload.get("amount") if isinstance(payload, dict) else None
    logger.info("Payment intent requested for amount=%r", raw_amount)

    try:
        amount = parse_amount(raw_amount)
    except ValueError as e:
        logger.warning("Rejected payment intent request: %s", e)
        raise HTTPException(status_code=400, detail=INVALID_AMOUNT)

    try:
        intent = processor.create_payment_intent(amount, settings.currency)
    except Exception as e:
        logger.error("PaymentIntent creation failed for amount=%r: %s", amount, e)
        raise HTTPException(status_code=500, detail=PROCESSOR_FAILURE + str(e))

    if not isinstance(intent.client_secret, str) or not intent.client_secret:
        logger.error("PaymentIntent %s came back without a client secret", intent.id)
        raise HTTPException(status_code=500, detail=PROCESSOR_FAILURE + MISSING_CLIENT_SECRET)

    logger.info("PaymentIntent created: %s", intent.id)
    return {"clientSecret": intent.client_secret}


@router.post("/guardar-pedido", response_model=OrderSavedResponse)
def save_order_api(
    payload: Any = Body(None),
    ledger: OrderLedger = Depends(get_ledger),
):
    missing = missing_order_fields(payload)
    if missing:
        logger.warning("Rejected order, missing fields: %s", ", ".join(missing))
        raise HTTPException(status_code=400, detail=MISSING_ORDER_DATA)

    try:
        size = ledger.append(payload)
    except LedgerWriteError:
        logger.exception("Could not save order for paymentId=%s", payload["paymentId"])
        raise HTTPException(status_code=500, detail=ORDER_NOT_SAVED)

    logger.info(
        "Order saved for client=%s paymentId=%s (%d orders in ledger)",
        payload["clientName"], payload["paymentId"], size,
    )
    return {"message": ORDER_SAVED}
