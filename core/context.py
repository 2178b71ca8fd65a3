# core/context.py
from dataclasses import dataclass, field
from typing import Mapping

from .utils import parse_int


@dataclass(frozen=True)
class AdminContext:
    """
    State for one admin request: who is acting and which filters they asked for.
    Built per request and handed to the listing services.
    """
    user_email: str
    params: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_request(cls, request):
        user = request.user
        email = getattr(user, 'email', '') if user.is_authenticated else ''
        return cls(user_email=email or '', params=request.GET.dict())

    def text(self, name):
        return (self.params.get(name) or '').strip()

    def integer(self, name, default=None):
        return parse_int(self.params.get(name), default)
