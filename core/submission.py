"""Submit and checkout orchestration.

These functions sit between the validated form and the external
collaborators. Collaborator failures are logged and returned as a failed
result; the form passed in is never modified.
"""
from __future__ import annotations

from datetime import date
from typing import Callable, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, Field

from core import integrations
from core.normalizer import build_persistence_record, build_vendor_payload
from core.validation import SubmissionIssue, validate_step, validate_submission
from rentwise.models import ApplicationForm, AuthUser, PaymentTotals, PetInfo, Property, SelectionMap, Unit
from rentwise.presets import DEFAULT_CREDIT_SCORE, PET_INSURANCE, STEP_REVIEW
from rentwise.pricing import amount_in_cents, line_items


class SubmissionResult(BaseModel):
    success: bool
    message: str
    issue: Optional[SubmissionIssue] = None
    vendor_payload: Dict = Field(default_factory=dict)
    record: Dict = Field(default_factory=dict)
    application_id: str = ""
    documents_uploaded: int = 0


class CheckoutResult(BaseModel):
    success: bool
    message: str
    amount_cents: int = 0
    checkout_url: str = ""
    simulated: bool = False


class UploadResult(BaseModel):
    success: bool
    message: str
    uploaded: List[str] = Field(default_factory=list)


def submit_application(
    form: ApplicationForm,
    user: Optional[AuthUser] = None,
    prop: Optional[Property] = None,
    unit: Optional[Unit] = None,
    store: Callable[..., Dict] = integrations.store_application,
    today: Optional[date] = None,
) -> SubmissionResult:
    """Validate, build both outbound shapes and hand the record to the store."""
    today = today or date.today()
    review = validate_step(form, STEP_REVIEW, today=today)
    if not review.is_valid:
        issue = SubmissionIssue(
            code="BACKGROUND_CHECK_REQUIRED",
            message=review.errors["background_check_permission"],
            step=STEP_REVIEW,
        )
        logger.info("Submission blocked: {} (step {})", issue.code, issue.step)
        return SubmissionResult(success=False, message=issue.message, issue=issue)
    issue = validate_submission(form, today=today)
    if issue is not None:
        return SubmissionResult(success=False, message=issue.message, issue=issue)

    payload = build_vendor_payload(form)
    record = build_persistence_record(form, prop=prop, unit=unit, user=user)
    try:
        response = store(record, list(form.documents.id), user.uid if user else "")
    except Exception:
        logger.exception("Application store write failed")
        return SubmissionResult(
            success=False,
            message="Application was formatted but failed to save. Please try again.",
            vendor_payload=payload,
            record=record,
        )
    if not response.get("success"):
        logger.error("Application store rejected the submission: {}", response.get("error", "unknown error"))
        return SubmissionResult(
            success=False,
            message="Application was formatted but failed to save. Please try again.",
            vendor_payload=payload,
            record=record,
        )
    uploaded = int(response.get("documents_uploaded", 0))
    return SubmissionResult(
        success=True,
        message=f"Your application has been submitted with {uploaded} documents uploaded.",
        vendor_payload=payload,
        record=record,
        application_id=str(response.get("id", "")),
        documents_uploaded=uploaded,
    )


def checkout(
    totals: PaymentTotals,
    selections: SelectionMap,
    base_rent: float,
    user: Optional[AuthUser] = None,
    pet_info: Optional[PetInfo] = None,
    credit_score: int = DEFAULT_CREDIT_SCORE,
    gateway: Callable[..., str] = integrations.create_checkout_session,
) -> CheckoutResult:
    """Hand the final totals to the payment collaborator.

    Without a signed-in user the payment is simulated as successful.
    """
    pet = selections.get(PET_INSURANCE)
    if pet is not None and pet.selected and not (pet_info and pet_info.type):
        return CheckoutResult(
            success=False,
            message="Please provide your pet's information to continue with pet insurance.",
        )
    amount = amount_in_cents(totals.total)
    if user is None:
        logger.info("No signed-in user; simulating a successful checkout")
        return CheckoutResult(
            success=True,
            message="Test mode: payment simulated.",
            amount_cents=amount,
            simulated=True,
        )
    items = line_items(selections, base_rent, credit_score)
    try:
        url = gateway(amount, items, user.email or None)
    except Exception:
        logger.exception("Checkout session creation failed")
        return CheckoutResult(
            success=False,
            message="We couldn't start the payment. Please try again.",
            amount_cents=amount,
        )
    return CheckoutResult(success=True, message="Redirecting to payment.", amount_cents=amount, checkout_url=url)


def upload_documents(
    form: ApplicationForm,
    files: List[Tuple[str, bytes]],
    user: Optional[AuthUser] = None,
    uploader: Callable[..., str] = integrations.upload_document,
) -> Tuple[ApplicationForm, UploadResult]:
    """Upload ID documents and record them on a new form.

    Guests have the file names recorded without an upload. On any failure the
    original form is returned unchanged.
    """
    uploaded: List[str] = []
    if user is None:
        logger.info("No signed-in user; recording {} document name(s) without uploading", len(files))
        uploaded = [name for name, _ in files]
        message = f"Test mode: {len(uploaded)} document(s) recorded."
    else:
        try:
            for name, data in files:
                uploaded.append(uploader(name, data, user.uid))
        except Exception:
            logger.exception("Document upload failed after {} of {} files", len(uploaded), len(files))
            return form, UploadResult(success=False, message="Document upload failed. Please try again.")
        message = f"{len(uploaded)} document(s) uploaded."
    documents = form.documents.model_copy(update={"id": [*form.documents.id, *uploaded]})
    return form.model_copy(update={"documents": documents}), UploadResult(
        success=True, message=message, uploaded=uploaded
    )

