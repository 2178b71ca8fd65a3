import logging

from django.conf import settings
from django.core.mail import send_mail
from django.urls import reverse

logger = logging.getLogger(__name__)


def send_vote_verification_email(vote, entry):
    """
    Asks the voter to confirm their address. Failures are logged and reported
    as False; the vote itself stands either way.
    """
    site_name = getattr(settings, 'SITE_NAME', 'Awards')
    site_url = getattr(settings, 'APP_SITE_URL', 'http://127.0.0.1:8000').rstrip('/')
    verify_url = site_url + reverse('voting:verify_vote', args=[vote.verification_token])

    greeting = f"Dear {vote.voter_name}," if vote.voter_name else "Hello,"
    body = (
        f"{greeting}\n\n"
        f"Thank you for voting for '{entry.entry_title}' ({entry.organisation.company_name}) "
        f"in the {entry.award.award_name} category.\n\n"
        f"Please confirm your vote by visiting:\n{verify_url}\n\n"
        f"If you did not vote, you can ignore this email.\n\n"
        f"{site_name}"
    )
    try:
        send_mail(f"{site_name}: please confirm your vote", body, settings.DEFAULT_FROM_EMAIL, [vote.voter_email])
        return True
    except Exception as e:
        logger.error("Error sending vote verification to %s: %s", vote.voter_email, e)
        return False
