"""Payment-link wizard: Link Info -> Payment Methods -> Summary -> submission"""

import dataclasses
import uuid
from enum import Enum
from typing import Optional, Protocol

from edunexia_charges.domain.models import ChargeDraft, ChargeRequest, ChargeResult
from edunexia_charges.domain.assembler import (
    DEFAULT_MAX_INSTALLMENTS,
    assemble_charge,
    validate_info,
    validate_payment_options,
)
from edunexia_charges.domain.fees import NetValueCalculator
from edunexia_charges.domain.simulation import ChargeSimulation, simulate
from edunexia_charges.domain.exceptions import ChargeValidationError, WizardTransitionError


class WizardState(str, Enum):
    COLLECTING_INFO = "collecting_info"
    COLLECTING_PAYMENT_METHODS = "collecting_payment_methods"
    SUMMARY = "summary"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    FAILED = "failed"


EDITABLE_STATES = (WizardState.COLLECTING_INFO, WizardState.COLLECTING_PAYMENT_METHODS)
DRAFT_FIELDS = frozenset(f.name for f in dataclasses.fields(ChargeDraft))


class ChargeGateway(Protocol):
    async def create_charge(self, request: ChargeRequest, idempotency_key: Optional[str] = None) -> ChargeResult:
        ...


class PaymentLinkWizard:
    """
    Three-step charge wizard owning a single ChargeDraft.

    Field updates replace the draft instead of mutating it, and backward
    moves never touch the draft, so going back and forth loses nothing.
    With step_gating on, moving forward validates the current step first.
    One idempotency key is generated per wizard and reused on every
    submission attempt.
    """

    def __init__(
        self,
        draft: Optional[ChargeDraft] = None,
        step_gating: bool = True,
        max_installments: int = DEFAULT_MAX_INSTALLMENTS,
        idempotency_key: Optional[str] = None,
    ):
        self.draft = draft or ChargeDraft()
        self.step_gating = step_gating
        self.max_installments = max_installments
        self.idempotency_key = idempotency_key or str(uuid.uuid4())
        self.state = WizardState.COLLECTING_INFO
        self.request: Optional[ChargeRequest] = None
        self.result: Optional[ChargeResult] = None
        self.last_error: Optional[str] = None

    @property
    def step(self) -> int:
        """1-based step shown to the user"""
        if self.state == WizardState.COLLECTING_INFO:
            return 1
        if self.state == WizardState.COLLECTING_PAYMENT_METHODS:
            return 2
        return 3

    def update(self, **changes) -> ChargeDraft:
        """Replace draft fields; only allowed while collecting input"""
        if self.state not in EDITABLE_STATES:
            raise WizardTransitionError(f"Cannot edit fields in state {self.state.value}")
        unknown = set(changes) - DRAFT_FIELDS
        if unknown:
            name = sorted(unknown)[0]
            raise ChargeValidationError(name, f"Unknown field: {name}")
        self.draft = dataclasses.replace(self.draft, **changes)
        return self.draft

    def next(self) -> WizardState:
        if self.state == WizardState.COLLECTING_INFO:
            if self.step_gating:
                validate_info(self.draft)
            self.state = WizardState.COLLECTING_PAYMENT_METHODS
        elif self.state == WizardState.COLLECTING_PAYMENT_METHODS:
            if self.step_gating:
                validate_payment_options(self.draft, self.max_installments)
            self.state = WizardState.SUMMARY
        else:
            raise WizardTransitionError(f"No next step from {self.state.value}")
        return self.state

    def back(self) -> WizardState:
        if self.state == WizardState.SUMMARY:
            self.state = WizardState.COLLECTING_PAYMENT_METHODS
        elif self.state == WizardState.COLLECTING_PAYMENT_METHODS:
            self.state = WizardState.COLLECTING_INFO
        elif self.state == WizardState.FAILED:
            self.state = WizardState.SUMMARY
        else:
            raise WizardTransitionError(f"No previous step from {self.state.value}")
        return self.state

    def summary(self, calculator: NetValueCalculator) -> ChargeSimulation:
        return simulate(self.draft, calculator)

    async def submit(self, gateway: ChargeGateway) -> ChargeResult:
        """
        Assemble and send the charge.

        Validation and arithmetic errors are raised before any network call and
        leave the wizard in Summary. Gateway failures move it to Failed with the
        draft untouched; back() returns to Summary for a full resubmission.
        """
        if self.state == WizardState.SUBMITTING:
            raise WizardTransitionError("A submission is already in progress")
        if self.state != WizardState.SUMMARY:
            raise WizardTransitionError(f"Cannot submit from {self.state.value}")

        request = assemble_charge(self.draft, self.max_installments)

        self.state = WizardState.SUBMITTING
        self.last_error = None
        try:
            result = await gateway.create_charge(request, idempotency_key=self.idempotency_key)
        except Exception as e:
            self.state = WizardState.FAILED
            self.last_error = getattr(e, "message", None) or str(e)
            raise

        self.request = request
        self.result = result
        self.state = WizardState.SUBMITTED
        return result
