# voting/services.py
import logging
from datetime import timedelta

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from core.models import ActivityLog
from core.paging import load_all
from entries.models import Entry
from .exceptions import AlreadyVotedError, EntryNotVotableError, InvalidVerificationTokenError
from .models import Vote
from .notifications import send_vote_verification_email

logger = logging.getLogger(__name__)


def normalise_email(email):
    return (email or '').strip().lower()


def counts_on_verification():
    return getattr(settings, 'VOTING_COUNT_VERIFIED_ONLY', False)


def votable_queryset():
    return Entry.objects.select_related('organisation', 'award').filter(
        is_public=True,
        allow_public_voting=True,
        status__in=Entry.VOTABLE_STATUSES,
    )


def votable_entries(award_id=None):
    """ Entries open to public voting, most votes first. """
    queryset = votable_queryset()
    if award_id is not None:
        queryset = queryset.filter(award_id=award_id)
    return load_all(queryset.order_by('-public_votes', 'entry_title', 'id'))


def voted_entry_ids(email):
    email = normalise_email(email)
    if not email:
        return set()
    return set(Vote.objects.filter(voter_email=email).values_list('entry_id', flat=True))


def get_votable_entry(entry_id=None, entry_number=None):
    queryset = votable_queryset()
    if entry_number:
        entry = queryset.filter(entry_number=entry_number).first()
    elif entry_id is not None:
        entry = queryset.filter(pk=entry_id).first()
    else:
        entry = None
    if entry is None:
        raise EntryNotVotableError()
    return entry


def total_votes(entries):
    return sum(entry.public_votes for entry in entries)


def cast_vote(entry_id, voter_email, voter_name='', voter_ip='unknown'):
    """
    Records one vote for an entry and returns ``(vote, public_votes)``.

    The insert relies on the (entry, voter_email) unique constraint: a second
    vote from the same address, sequential or concurrent, fails in the database
    and surfaces as AlreadyVotedError.
    """
    entry = get_votable_entry(entry_id=entry_id)
    email = normalise_email(voter_email)
    count_now = not counts_on_verification()

    try:
        with transaction.atomic():
            vote = Vote.objects.create(
                entry=entry,
                voter_email=email,
                voter_name=(voter_name or '').strip(),
                voter_ip=voter_ip or 'unknown',
                vote_value=1,
                email_verified=False,
            )
            if count_now:
                Entry.objects.filter(pk=entry.pk).update(public_votes=F('public_votes') + 1)
    except IntegrityError:
        logger.info("Duplicate vote for entry %s from %s rejected", entry.entry_number, email)
        raise AlreadyVotedError()

    entry.refresh_from_db(fields=['public_votes'])
    logger.info("Vote %s recorded for entry %s", vote.pk, entry.entry_number)

    if send_vote_verification_email(vote, entry):
        vote.verification_sent_at = timezone.now()
        vote.save(update_fields=['verification_sent_at'])

    return vote, entry.public_votes


def verify_vote(token):
    """
    Confirms the voter's email address. Verifying twice is harmless; links older
    than VOTE_VERIFICATION_MAX_AGE_DAYS are refused.
    """
    max_age = timedelta(days=getattr(settings, 'VOTE_VERIFICATION_MAX_AGE_DAYS', 7))
    with transaction.atomic():
        vote = Vote.objects.select_for_update().select_related('entry').filter(verification_token=token).first()
        if vote is None:
            raise InvalidVerificationTokenError()
        if vote.email_verified:
            return vote
        if vote.created_at < timezone.now() - max_age:
            raise InvalidVerificationTokenError("This verification link has expired.")

        vote.email_verified = True
        vote.verified_at = timezone.now()
        vote.save(update_fields=['email_verified', 'verified_at'])
        if counts_on_verification():
            Entry.objects.filter(pk=vote.entry_id).update(public_votes=F('public_votes') + 1)
        ActivityLog.record(vote, 'vote_verified', details=f"Entry {vote.entry.entry_number}",
                           performed_by=vote.voter_email)

    logger.info("Vote %s verified", vote.pk)
    return vote
