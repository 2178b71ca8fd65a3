# voting/exceptions.py
from core.exceptions import AwardsError


class AlreadyVotedError(AwardsError):
    status_code = 409
    default_message = "You have already voted for this entry!"


class EntryNotVotableError(AwardsError):
    status_code = 404
    default_message = "This entry is not open for public voting."


class InvalidVerificationTokenError(AwardsError):
    default_message = "This verification link is invalid or has expired."
