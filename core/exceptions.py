# core/exceptions.py


class AwardsError(Exception):
    """Base class for errors raised by the awards back office."""

    status_code = 400
    default_message = "The request could not be completed."

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)
