"""Charge endpoints - simulate, create, fetch and cancel"""

import time
import logging
from fastapi import APIRouter, Depends, HTTPException, Request

from edunexia_charges.api.v1.schemas import (
    ChargeCreateRequest,
    ChargeDraftSchema,
    ChargeResponse,
    SimulationResponse,
)
from edunexia_charges.api.dependencies import get_fee_calculator, get_gateway_client, get_request_id
from edunexia_charges.config import settings
from edunexia_charges.domain.assembler import assemble_charge
from edunexia_charges.domain.fees import NetValueCalculator
from edunexia_charges.domain.models import ChargeResult
from edunexia_charges.domain.simulation import simulate
from edunexia_charges.domain.exceptions import (
    ArithmeticInconsistencyError,
    ChargeValidationError,
    GatewayError,
)
from edunexia_charges.infrastructure.clients.gateway import GatewayClient
from edunexia_charges.infrastructure.observability.metrics import record_submission, record_validation_failure
from edunexia_charges.infrastructure.observability.logging import log_charge_submission

router = APIRouter()


def validation_exception(e: ChargeValidationError) -> HTTPException:
    record_validation_failure(e.field)
    return HTTPException(status_code=422, detail={"field": e.field, "message": e.message})


def charge_response(result: ChargeResult) -> ChargeResponse:
    return ChargeResponse(
        charge_id=result.id,
        status=result.status,
        value_cents=result.value_cents,
        invoice_url=result.invoice_url,
        net_value_cents=result.net_value_cents,
    )


@router.post("/charges/simulate", response_model=SimulationResponse)
def simulate_charge(
    body: ChargeDraftSchema,
    calculator: NetValueCalculator = Depends(get_fee_calculator),
):
    """Installment split, rule previews and net value per rail; nothing is sent"""
    try:
        simulation = simulate(body.to_draft(), calculator)
    except ChargeValidationError as e:
        raise validation_exception(e)
    except ArithmeticInconsistencyError as e:
        logging.error(f"Installment split inconsistency: {e}")
        raise HTTPException(status_code=500, detail="Installment calculation error")

    return SimulationResponse.from_simulation(simulation)


@router.post("/charges", response_model=ChargeResponse, status_code=201)
async def create_charge(
    body: ChargeCreateRequest,
    request: Request,
    gateway: GatewayClient = Depends(get_gateway_client),
):
    """
    Validate and submit a charge to the payment gateway.

    Flow:
    1. Assemble the ChargeRequest (all validation happens here)
    2. Submit to the gateway once; no automatic retry
    3. Record metrics and logs
    """
    start_time = time.time()
    request_id = get_request_id(request)

    try:
        charge_request = assemble_charge(body.to_draft(), settings.max_installments)
    except ChargeValidationError as e:
        logging.warning(f"Charge rejected: {e.message}", extra={"request_id": request_id, "field": e.field})
        raise validation_exception(e)
    except ArithmeticInconsistencyError as e:
        logging.error(f"Installment split inconsistency: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Installment calculation error")

    installment_count = charge_request.installment_plan.count if charge_request.installment_plan else 1

    try:
        result = await gateway.create_charge(charge_request, idempotency_key=body.idempotency_key)
    except GatewayError as e:
        duration_ms = (time.time() - start_time) * 1000
        record_submission(False, installment_count)
        log_charge_submission(
            request_id, charge_request.customer_id, charge_request.total_cents, installment_count, "failed", duration_ms
        )
        logging.error(f"Gateway error: {e.message}", extra={"request_id": request_id})
        raise HTTPException(status_code=502, detail=e.message)

    duration_ms = (time.time() - start_time) * 1000
    record_submission(True, installment_count)
    log_charge_submission(
        request_id,
        charge_request.customer_id,
        charge_request.total_cents,
        installment_count,
        "submitted",
        duration_ms,
        charge_id=result.id,
    )

    return charge_response(result)


@router.get("/charges/{charge_id}", response_model=ChargeResponse)
async def get_charge(charge_id: str, gateway: GatewayClient = Depends(get_gateway_client)):
    try:
        result = await gateway.get_charge(charge_id)
    except GatewayError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail="Charge not found")
        raise HTTPException(status_code=502, detail=e.message)
    return charge_response(result)


@router.post("/charges/{charge_id}/cancel", status_code=204)
async def cancel_charge(charge_id: str, gateway: GatewayClient = Depends(get_gateway_client)):
    try:
        await gateway.cancel_charge(charge_id)
    except GatewayError as e:
        if e.status_code == 404:
            raise HTTPException(status_code=404, detail="Charge not found")
        raise HTTPException(status_code=502, detail=e.message)
