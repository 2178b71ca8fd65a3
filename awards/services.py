# awards/services.py
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Optional

from core.paging import load_all
from organisations.models import Assignment
from .models import Award

logger = logging.getLogger(__name__)


def empty_counts():
    counts = {'total': 0}
    counts.update({status: 0 for status in Assignment.Status.values})
    return counts


def assignment_counts():
    """ Groups every assignment row by award: {award_id: {'total': n, 'nominated': n, ...}}. """
    counts = defaultdict(empty_counts)
    for award_id, status in Assignment.objects.values_list('award_id', 'status'):
        counts[award_id]['total'] += 1
        counts[award_id][status] = counts[award_id].get(status, 0) + 1
    return counts


def load_awards():
    """
    Loads the full awards table page by page and attaches ``assignment_counts``
    to each award. Counting failures leave zeroed counts rather than failing the load.
    """
    awards = load_all(Award.objects.all())
    try:
        counts = assignment_counts()
    except Exception:
        logger.exception("Could not load assignment counts; showing zero counts.")
        counts = {}
    for award in awards:
        award.assignment_counts = counts.get(award.id, empty_counts())
    return awards


@dataclass(frozen=True)
class AwardFilters:
    year: Optional[int] = None
    sector: str = ''
    region: str = ''
    search: str = ''

    @classmethod
    def from_context(cls, ctx):
        return cls(
            year=ctx.integer('year'),
            sector=ctx.text('sector'),
            region=ctx.text('region'),
            search=ctx.text('search').lower(),
        )

    def matches(self, award):
        if self.year is not None and award.year != self.year:
            return False
        if self.sector and award.sector != self.sector:
            return False
        if self.region and award.region != self.region:
            return False
        if self.search:
            haystacks = (award.winner, award.award_name, award.category)
            if not any(self.search in (value or '').lower() for value in haystacks):
                return False
        return True


def filter_awards(awards, filters):
    return [award for award in awards if filters.matches(award)]


def filter_options(awards):
    """ Distinct values for the year/sector/region dropdowns. """
    return {
        'years': sorted({a.year for a in awards if a.year}, reverse=True),
        'sectors': sorted({a.sector for a in awards if a.sector}),
        'regions': sorted({a.region for a in awards if a.region}),
    }


def set_award_status(award, status):
    if status not in Award.Status.values:
        raise ValueError(f"Unknown award status '{status}'.")
    award.status = status
    award.save(update_fields=['status', 'updated_at'])
    logger.info("Award %s marked as %s", award.pk, status)
    return award
