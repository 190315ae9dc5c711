"""Unit tests for the payment-link wizard state machine"""

import pytest
from datetime import date, timedelta
from edunexia_charges.domain.models import BillingMethod, ChargeDraft
from edunexia_charges.domain.wizard import PaymentLinkWizard, WizardState
from edunexia_charges.domain.exceptions import ChargeValidationError, GatewayError, WizardTransitionError


def fill_info(wizard: PaymentLinkWizard) -> None:
    wizard.update(
        customer_id="cus_1",
        description="Enrollment",
        value_cents=10000,
        due_date=date.today() + timedelta(days=7),
    )


def wizard_at_summary(**kwargs) -> PaymentLinkWizard:
    wizard = PaymentLinkWizard(**kwargs)
    fill_info(wizard)
    wizard.next()
    wizard.update(billing_methods=frozenset({BillingMethod.BOLETO_PIX}))
    wizard.next()
    return wizard


def test_wizard_happy_path_steps():
    wizard = wizard_at_summary()

    assert wizard.state == WizardState.SUMMARY
    assert wizard.step == 3


def test_wizard_gates_forward_on_missing_info():
    wizard = PaymentLinkWizard()

    with pytest.raises(ChargeValidationError) as exc_info:
        wizard.next()
    assert exc_info.value.field == "customer_id"
    assert wizard.state == WizardState.COLLECTING_INFO


def test_wizard_gates_forward_on_missing_billing_method():
    wizard = PaymentLinkWizard()
    fill_info(wizard)
    wizard.next()

    with pytest.raises(ChargeValidationError) as exc_info:
        wizard.next()
    assert exc_info.value.field == "billing_methods"
    assert wizard.state == WizardState.COLLECTING_PAYMENT_METHODS


def test_wizard_ungated_advances_freely():
    wizard = PaymentLinkWizard(step_gating=False)
    wizard.next()
    wizard.next()
    assert wizard.state == WizardState.SUMMARY


def test_back_navigation_preserves_values():
    """Step 2 -> step 1 -> step 2 keeps everything entered"""
    wizard = PaymentLinkWizard()
    fill_info(wizard)
    wizard.next()
    wizard.update(
        billing_methods=frozenset({BillingMethod.CREDIT_CARD}),
        installment_enabled=True,
        installment_count=6,
    )
    before = wizard.draft

    wizard.back()
    assert wizard.state == WizardState.COLLECTING_INFO
    wizard.next()

    assert wizard.state == WizardState.COLLECTING_PAYMENT_METHODS
    assert wizard.draft == before


def test_update_replaces_draft():
    wizard = PaymentLinkWizard()
    original = wizard.draft
    wizard.update(description="New")

    assert original.description == ""
    assert wizard.draft.description == "New"


def test_update_rejects_unknown_field():
    wizard = PaymentLinkWizard()
    with pytest.raises(ChargeValidationError):
        wizard.update(amount=10)


def test_update_not_allowed_on_summary():
    wizard = wizard_at_summary()
    with pytest.raises(WizardTransitionError):
        wizard.update(description="Changed")


def test_summary_simulation(calculator):
    wizard = wizard_at_summary()
    simulation = wizard.summary(calculator)

    assert simulation.total_cents == 10000
    assert simulation.net_value_per_installment == {BillingMethod.BOLETO_PIX: 9600}


async def test_submit_success(fake_gateway):
    wizard = wizard_at_summary()
    result = await wizard.submit(fake_gateway)

    assert wizard.state == WizardState.SUBMITTED
    assert result.id == "pay_1"
    assert wizard.result is result
    assert fake_gateway.idempotency_keys == [wizard.idempotency_key]


async def test_submit_blocked_without_billing_method(fake_gateway):
    """No gateway call when no billing method is selected"""
    wizard = PaymentLinkWizard(step_gating=False)
    fill_info(wizard)
    wizard.next()
    wizard.next()

    with pytest.raises(ChargeValidationError) as exc_info:
        await wizard.submit(fake_gateway)

    assert exc_info.value.field == "billing_methods"
    assert fake_gateway.requests == []
    assert wizard.state == WizardState.SUMMARY


async def test_submit_failure_then_retry(fake_gateway):
    wizard = wizard_at_summary()
    draft_before = wizard.draft
    fake_gateway.error = GatewayError("Customer not found", status_code=400)

    with pytest.raises(GatewayError):
        await wizard.submit(fake_gateway)

    assert wizard.state == WizardState.FAILED
    assert wizard.last_error == "Customer not found"
    assert wizard.draft == draft_before

    wizard.back()
    assert wizard.state == WizardState.SUMMARY

    fake_gateway.error = None
    await wizard.submit(fake_gateway)

    assert wizard.state == WizardState.SUBMITTED
    assert len(fake_gateway.requests) == 2
    # Same key on every attempt
    assert fake_gateway.idempotency_keys[0] == fake_gateway.idempotency_keys[1]


async def test_submit_not_allowed_twice(fake_gateway):
    wizard = wizard_at_summary()
    await wizard.submit(fake_gateway)

    with pytest.raises(WizardTransitionError):
        await wizard.submit(fake_gateway)
    assert len(fake_gateway.requests) == 1


async def test_submit_rejected_while_in_flight(fake_gateway):
    wizard = wizard_at_summary()
    wizard.state = WizardState.SUBMITTING

    with pytest.raises(WizardTransitionError):
        await wizard.submit(fake_gateway)
    assert fake_gateway.requests == []


def test_back_from_first_step_rejected():
    wizard = PaymentLinkWizard(draft=ChargeDraft())
    with pytest.raises(WizardTransitionError):
        wizard.back()


async def test_submit_requires_summary_state(fake_gateway):
    wizard = PaymentLinkWizard()
    fill_info(wizard)

    with pytest.raises(WizardTransitionError):
        await wizard.submit(fake_gateway)
    assert fake_gateway.requests == []
