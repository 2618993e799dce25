from fastapi import Request

from payment_gateway.config import Settings
from payment_gateway.ledger import OrderLedger


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_processor(request: Request):
    return request.app.state.processor


def get_ledger(request: Request) -> OrderLedger:
    return request.app.state.ledger
