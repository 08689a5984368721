"""Draft storage and the per-tab form session.

The draft is a single JSON slot (``applicationFormData`` by default) holding an
unsubmitted application so the form can resume after a reload. All mutation
helpers here return new objects and leave their inputs untouched.
"""
from __future__ import annotations

import json
import os
import threading
from typing import Any, Dict, List, Optional, TypeVar

from loguru import logger
from pydantic import BaseModel

from core.config import get_settings
from core.validation import StepValidation, validate_step
from rentwise.models import ApplicationForm, AuthUser
from rentwise.presets import STEP_TITLES

# Draft fields that must be lists. Older or hand-edited drafts sometimes hold
# ``null`` or an object here.
ARRAY_FIELDS = ["lease_holders", "guarantors", "additional_occupants", "pets", "vehicles"]
PERSON_ARRAY_FIELDS = ["employers"]
ADDRESS_FIELDS = ["current_street", "current_city", "current_state", "current_zip", "current_duration"]

T = TypeVar("T", bound=BaseModel)


def _coerce_list(container: Dict[str, Any], key: str, where: str) -> None:
    if key in container and not isinstance(container[key], list):
        logger.debug("Draft field {}.{} is not a list; using []", where, key)
        container[key] = []


def coerce_arrays(data: Dict[str, Any]) -> Dict[str, Any]:
    """Replace any non-list value in a list-shaped draft field with ``[]``."""
    data = dict(data)
    for key in ARRAY_FIELDS:
        _coerce_list(data, key, "form")
    if isinstance(data.get("applicant"), dict):
        data["applicant"] = dict(data["applicant"])
        for key in PERSON_ARRAY_FIELDS:
            _coerce_list(data["applicant"], key, "applicant")
    for key in ("lease_holders", "guarantors"):
        people = []
        for person in data.get(key, []):
            if isinstance(person, dict):
                person = dict(person)
                for field in PERSON_ARRAY_FIELDS:
                    _coerce_list(person, field, key)
            people.append(person)
        if key in data:
            data[key] = people
    if isinstance(data.get("documents"), dict):
        data["documents"] = dict(data["documents"])
        _coerce_list(data["documents"], "id", "documents")
    return data


def load_draft(path: Optional[str] = None, key: Optional[str] = None) -> ApplicationForm:
    """Rehydrate the draft slot, or return a fresh form.

    A missing file is a normal first visit. Unreadable or malformed drafts are
    logged and replaced by a fresh form.
    """
    settings = get_settings()
    path = path or settings.draft_file
    key = key or settings.draft_key
    if not os.path.exists(path):
        return ApplicationForm()
    try:
        with open(path, "r", encoding="utf-8") as f:
            stored = json.load(f)
        data = stored.get(key) if isinstance(stored, dict) else None
        if not isinstance(data, dict):
            return ApplicationForm()
        return ApplicationForm.model_validate(coerce_arrays(data))
    except (OSError, ValueError) as exc:
        # Decode errors and pydantic validation errors are both ValueErrors.
        logger.warning("Discarding unreadable draft {}: {}", path, exc.__class__.__name__)
        return ApplicationForm()


def save_draft(form: ApplicationForm, path: Optional[str] = None, key: Optional[str] = None) -> bool:
    """Overwrite the draft slot. Failures are logged, never raised."""
    settings = get_settings()
    path = path or settings.draft_file
    key = key or settings.draft_key
    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump({key: form.model_dump(mode="json")}, f)
    except (OSError, TypeError) as exc:
        logger.error("Could not write draft {}: {}", path, exc)
        return False
    logger.debug("Draft saved to {}", path)
    return True


def clear_draft(path: Optional[str] = None) -> None:
    path = path or get_settings().draft_file
    if os.path.exists(path):
        os.remove(path)
        logger.debug("Draft {} cleared", path)


class FormSession:
    """One open application form: the aggregate, the current step and the draft timer.

    Each browser tab owns its own session. Only one draft save is ever pending;
    new input cancels it and starts the debounce window again. Draft writes and
    ``close`` hold the same lock, so a cleared draft stays cleared.
    """

    def __init__(
        self,
        form: Optional[ApplicationForm] = None,
        draft_path: Optional[str] = None,
        debounce_seconds: Optional[float] = None,
    ):
        settings = get_settings()
        self.draft_path = draft_path or settings.draft_file
        self.debounce_seconds = settings.draft_debounce_seconds if debounce_seconds is None else debounce_seconds
        self.form = form if form is not None else load_draft(self.draft_path)
        self.current_step = 0
        self.closed = False
        self._timer: Optional[threading.Timer] = None
        self._lock = threading.RLock()

    @property
    def pending_save(self) -> bool:
        return self._timer is not None

    def update(self, form: ApplicationForm) -> None:
        """Replace the aggregate and restart the draft debounce."""
        with self._lock:
            if self.closed:
                raise RuntimeError("form session is closed")
            self.form = form
            self._schedule_save()

    def _schedule_save(self) -> None:
        self._cancel_timer()
        timer = threading.Timer(self.debounce_seconds, lambda: self._fire(timer))
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _cancel_timer(self) -> None:
        # Callers hold the lock.
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _fire(self, timer: threading.Timer) -> None:
        with self._lock:
            # A superseded timer, or one that outlived the session, must not save.
            if self.closed or self._timer is not timer:
                return
            self._timer = None
            save_draft(self.form, self.draft_path)

    def flush(self) -> bool:
        """Write the draft immediately if a save is pending."""
        with self._lock:
            if self._timer is None:
                return False
            self._cancel_timer()
            return save_draft(self.form, self.draft_path)

    def validate_current_step(self, today=None) -> StepValidation:
        return validate_step(self.form, self.current_step, today=today)

    def next_step(self, today=None) -> StepValidation:
        """Advance only when the current step's gate passes."""
        result = self.validate_current_step(today=today)
        if result.is_valid and self.current_step < len(STEP_TITLES) - 1:
            self.current_step += 1
        return result

    def prev_step(self) -> None:
        if self.current_step > 0:
            self.current_step -= 1

    def jump_to_step(self, step: int) -> None:
        if not 0 <= step < len(STEP_TITLES):
            raise ValueError(f"no such step: {step}")
        self.current_step = step

    def close(self, clear: bool = False) -> None:
        """Tear the session down.

        ``clear`` drops the draft (after a successful submit); otherwise any
        pending edit is written first.
        """
        with self._lock:
            if clear:
                self._cancel_timer()
                clear_draft(self.draft_path)
            else:
                self.flush()
            self.closed = True


def prefill_from_user(form: ApplicationForm, user: Optional[AuthUser]) -> ApplicationForm:
    """Default the applicant's name and email from the signed-in profile."""
    if user is None:
        return form
    a = form.applicant
    update = {}
    if not a.first_name and user.first_name:
        update["first_name"] = user.first_name
    if not a.last_name and user.last_name:
        update["last_name"] = user.last_name
    if not a.email and user.email:
        update["email"] = user.email
    if not update:
        return form
    return form.model_copy(update={"applicant": a.model_copy(update=update)})


def replace_entry(items: List[T], entry: T) -> List[T]:
    """New list with the entry sharing ``entry.id`` swapped out."""
    return [entry if item.id == entry.id else item for item in items]


def remove_entry(items: List[T], entity_id: str) -> List[T]:
    return [item for item in items if item.id != entity_id]


def set_same_as_primary(form: ApplicationForm, entity_id: str, checked: bool) -> ApplicationForm:
    """Toggle a lease holder's or guarantor's "same as primary" address.

    Checking copies the applicant's current address as it is right now; later
    edits to the applicant do not follow. Unchecking clears the copied fields.
    """
    a = form.applicant
    if checked:
        address = {name: getattr(a, name) for name in ADDRESS_FIELDS}
    else:
        address = {name: "" for name in ADDRESS_FIELDS}
    update = dict(address, same_as_primary=checked)

    for field in ("lease_holders", "guarantors"):
        people = getattr(form, field)
        for person in people:
            if person.id == entity_id:
                changed = replace_entry(people, person.model_copy(update=update))
                return form.model_copy(update={field: changed})
    raise ValueError(f"no lease holder or guarantor with id {entity_id!r}")
