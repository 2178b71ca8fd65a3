"""
The public entry submission wizard.

Each visitor's progress lives in their session under ``SESSION_KEY``:

    details -> review -> processing -> complete
                  ^           |
                  |           v
                  +------- failed

Only the moves listed in ``TRANSITIONS`` are allowed; anything else raises
InvalidTransitionError.
"""

import logging
import secrets

from django.core.exceptions import ObjectDoesNotExist
from django.db import models

from awards.models import Award
from core.exceptions import AwardsError
from organisations.models import Organisation
from .exceptions import InvalidTransitionError, PaymentGatewayError
from .fees import calculate_fees
from .models import Entry
from .services import create_entry_records, start_checkout

logger = logging.getLogger(__name__)

SESSION_KEY = 'entry_submission'


def new_submission_key():
    return secrets.token_hex(16)


class WizardStep(models.TextChoices):
    DETAILS = 'details', 'Details'
    REVIEW = 'review', 'Review'
    PROCESSING = 'processing', 'Processing'
    COMPLETE = 'complete', 'Complete'
    FAILED = 'failed', 'Failed'


TRANSITIONS = {
    WizardStep.DETAILS: {WizardStep.REVIEW},
    WizardStep.REVIEW: {WizardStep.DETAILS, WizardStep.PROCESSING},
    WizardStep.PROCESSING: {WizardStep.COMPLETE, WizardStep.FAILED},
    WizardStep.FAILED: {WizardStep.REVIEW},
    WizardStep.COMPLETE: set(),
}


class SubmissionWizard:

    def __init__(self, state=WizardStep.DETAILS, details=None, entry_id=None, checkout_url='', error='',
                 submission_key=''):
        self.state = WizardStep(state)
        self.details = details or {}
        self.entry_id = entry_id
        self.checkout_url = checkout_url
        self.error = error
        self.submission_key = submission_key

    @classmethod
    def load(cls, session):
        data = session.get(SESSION_KEY)
        if not data:
            return cls()
        try:
            return cls(**data)
        except (TypeError, ValueError):
            logger.warning("Discarding unreadable submission state from session.")
            return cls()

    def save(self, session):
        session[SESSION_KEY] = {
            'state': self.state.value,
            'details': self.details,
            'entry_id': self.entry_id,
            'checkout_url': self.checkout_url,
            'error': self.error,
            'submission_key': self.submission_key,
        }

    def reset(self):
        self.state = WizardStep.DETAILS
        self.details = {}
        self.entry_id = None
        self.checkout_url = ''
        self.error = ''
        self.submission_key = ''

    def can_transition(self, target):
        return WizardStep(target) in TRANSITIONS[self.state]

    def transition(self, target):
        target = WizardStep(target)
        if not self.can_transition(target):
            raise InvalidTransitionError(
                f"Cannot move from '{self.state.label}' to '{target.label}'."
            )
        logger.debug("Submission wizard %s -> %s", self.state, target)
        self.state = target

    # --- Steps ---

    def submit_details(self, details):
        """Stores already-validated details and moves to the review step."""
        if self.state == WizardStep.COMPLETE:
            # A finished submission; the visitor is starting another one.
            self.reset()
        self.transition(WizardStep.REVIEW)
        self.details = details
        self.error = ''
        self.submission_key = new_submission_key()

    def back(self):
        self.transition(WizardStep.DETAILS)

    def review_summary(self):
        if not self.details:
            return None
        award = Award.objects.filter(pk=self.details.get('award_id')).first()
        organisation_name = self.details.get('new_company_name', '')
        if self.details.get('organisation_id'):
            organisation = Organisation.objects.filter(pk=self.details['organisation_id']).first()
            organisation_name = organisation.company_name if organisation else ''
        fees = calculate_fees(award.effective_entry_fee if award else None)
        return {
            'award_name': award.award_name if award else '',
            'organisation_name': organisation_name,
            'entry_title': self.details.get('entry_title', ''),
            'contact_email': self.details.get('contact_email', ''),
            'fees': fees.as_dict(),
        }

    def confirm(self, gateway):
        """
        Creates the entry and opens checkout. On a payment service failure the
        wizard is left in FAILED (the entry has already been voided) and the
        error propagates to the caller.

        Confirming the same submission twice, e.g. from two overlapping
        requests, ends with one entry and one checkout session.
        """
        if self.state == WizardStep.FAILED:
            self.transition(WizardStep.REVIEW)
            # The voided entry keeps the old key.
            self.submission_key = new_submission_key()
        self.transition(WizardStep.PROCESSING)
        if not self.submission_key:
            self.submission_key = new_submission_key()

        try:
            entry, created = create_entry_records(self.details, submission_key=self.submission_key)
        except ObjectDoesNotExist:
            self._fail("The selected award or organisation is no longer available.")
            raise AwardsError(self.error)
        self.entry_id = entry.pk

        if not created and entry.status == Entry.Status.VOID:
            self._fail("This submission could not be completed. Please try again.")
            raise AwardsError(self.error)
        if not created and entry.payment_status == Entry.PaymentStatus.PAID:
            self.error = ''
            self.transition(WizardStep.COMPLETE)
            return entry

        try:
            session = start_checkout(entry, gateway)
        except PaymentGatewayError as e:
            self._fail(e.message)
            raise

        self.checkout_url = session.get('url', '')
        self.error = ''
        self.transition(WizardStep.COMPLETE)
        return entry

    def _fail(self, message):
        self.transition(WizardStep.FAILED)
        self.error = message

    def as_dict(self):
        return {
            'state': self.state.value,
            'details': self.details,
            'entry_id': self.entry_id,
            'checkout_url': self.checkout_url,
            'error': self.error,
            'summary': self.review_summary() if self.state == WizardStep.REVIEW else None,
        }
