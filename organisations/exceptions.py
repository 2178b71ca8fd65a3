# organisations/exceptions.py
from core.exceptions import AwardsError


class AlreadyAssignedError(AwardsError):
    status_code = 409
    default_message = "This company is already assigned to the award."


class InvalidAssignmentStatusError(AwardsError):
    default_message = "Unknown assignment status."


class InvalidJudgeScoreError(AwardsError):
    default_message = "Judge score must be a whole number between 0 and 10."
