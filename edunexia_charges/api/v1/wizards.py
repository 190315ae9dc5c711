"""Payment-link wizard sessions: create, edit, navigate, summarize, submit"""

import time
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Request

from edunexia_charges.api.v1.schemas import (
    ChargeDraftSchema,
    SimulationResponse,
    WizardCreateRequest,
    WizardResponse,
    WizardUpdateRequest,
)
from edunexia_charges.api.dependencies import (
    WizardRegistry,
    get_fee_calculator,
    get_gateway_client,
    get_request_id,
    get_wizard_registry,
)
from edunexia_charges.domain.fees import NetValueCalculator
from edunexia_charges.domain.wizard import PaymentLinkWizard
from edunexia_charges.domain.exceptions import (
    ArithmeticInconsistencyError,
    ChargeValidationError,
    GatewayError,
    WizardTransitionError,
)
from edunexia_charges.infrastructure.clients.gateway import GatewayClient
from edunexia_charges.infrastructure.observability.metrics import record_submission, record_validation_failure
from edunexia_charges.infrastructure.observability.logging import log_charge_submission

router = APIRouter()


def wizard_response(wizard_id: str, wizard: PaymentLinkWizard) -> WizardResponse:
    return WizardResponse(
        wizard_id=wizard_id,
        state=wizard.state.value,
        step=wizard.step,
        draft=ChargeDraftSchema.from_draft(wizard.draft),
        last_error=wizard.last_error,
        charge_id=wizard.result.id if wizard.result else None,
    )


def load_wizard(wizard_id: str, registry: WizardRegistry) -> PaymentLinkWizard:
    wizard = registry.get(wizard_id)
    if wizard is None:
        raise HTTPException(status_code=404, detail="Wizard not found")
    return wizard


@router.post("/payment-link-wizards", response_model=WizardResponse, status_code=201)
def create_wizard(
    body: Optional[WizardCreateRequest] = None,
    registry: WizardRegistry = Depends(get_wizard_registry),
):
    wizard_id, wizard = registry.create(step_gating=body.step_gating if body else None)
    return wizard_response(wizard_id, wizard)


@router.get("/payment-link-wizards/{wizard_id}", response_model=WizardResponse)
def get_wizard(wizard_id: str, registry: WizardRegistry = Depends(get_wizard_registry)):
    return wizard_response(wizard_id, load_wizard(wizard_id, registry))


@router.patch("/payment-link-wizards/{wizard_id}", response_model=WizardResponse)
def update_wizard(
    wizard_id: str,
    body: WizardUpdateRequest,
    registry: WizardRegistry = Depends(get_wizard_registry),
):
    wizard = load_wizard(wizard_id, registry)
    try:
        wizard.update(**body.to_changes())
    except WizardTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return wizard_response(wizard_id, wizard)


@router.post("/payment-link-wizards/{wizard_id}/next", response_model=WizardResponse)
def next_step(wizard_id: str, registry: WizardRegistry = Depends(get_wizard_registry)):
    wizard = load_wizard(wizard_id, registry)
    try:
        wizard.next()
    except ChargeValidationError as e:
        record_validation_failure(e.field)
        raise HTTPException(status_code=422, detail={"field": e.field, "message": e.message})
    except WizardTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return wizard_response(wizard_id, wizard)


@router.post("/payment-link-wizards/{wizard_id}/back", response_model=WizardResponse)
def previous_step(wizard_id: str, registry: WizardRegistry = Depends(get_wizard_registry)):
    wizard = load_wizard(wizard_id, registry)
    try:
        wizard.back()
    except WizardTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return wizard_response(wizard_id, wizard)


@router.get("/payment-link-wizards/{wizard_id}/summary", response_model=SimulationResponse)
def wizard_summary(
    wizard_id: str,
    registry: WizardRegistry = Depends(get_wizard_registry),
    calculator: NetValueCalculator = Depends(get_fee_calculator),
):
    wizard = load_wizard(wizard_id, registry)
    try:
        simulation = wizard.summary(calculator)
    except ChargeValidationError as e:
        raise HTTPException(status_code=422, detail={"field": e.field, "message": e.message})
    return SimulationResponse.from_simulation(simulation)


@router.post("/payment-link-wizards/{wizard_id}/submit", response_model=WizardResponse)
async def submit_wizard(
    wizard_id: str,
    request: Request,
    registry: WizardRegistry = Depends(get_wizard_registry),
    gateway: GatewayClient = Depends(get_gateway_client),
):
    """Submit the wizard's charge; on gateway failure the wizard moves to Failed"""
    start_time = time.time()
    request_id = get_request_id(request)
    wizard = load_wizard(wizard_id, registry)
    draft = wizard.draft
    installment_count = draft.installment_count if draft.installment_enabled else 1

    try:
        result = await wizard.submit(gateway)
    except ChargeValidationError as e:
        record_validation_failure(e.field)
        raise HTTPException(status_code=422, detail={"field": e.field, "message": e.message})
    except ArithmeticInconsistencyError as e:
        logging.error(f"Installment split inconsistency: {e}", extra={"request_id": request_id})
        raise HTTPException(status_code=500, detail="Installment calculation error")
    except WizardTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except GatewayError as e:
        duration_ms = (time.time() - start_time) * 1000
        record_submission(False, installment_count)
        log_charge_submission(request_id, draft.customer_id, draft.value_cents, installment_count, "failed", duration_ms)
        raise HTTPException(status_code=502, detail=e.message)

    duration_ms = (time.time() - start_time) * 1000
    record_submission(True, installment_count)
    log_charge_submission(
        request_id, draft.customer_id, draft.value_cents, installment_count, "submitted", duration_ms, charge_id=result.id
    )
    response = wizard_response(wizard_id, wizard)
    # Submitted is terminal; the session is not needed again
    registry.discard(wizard_id)
    return response
