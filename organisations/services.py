# organisations/services.py
import logging
from dataclasses import dataclass
from typing import Optional

from django.db import IntegrityError, transaction
from django.utils import timezone

from core.models import ActivityLog
from core.paging import load_all
from .exceptions import AlreadyAssignedError, InvalidAssignmentStatusError, InvalidJudgeScoreError
from .models import Assignment, Organisation

logger = logging.getLogger(__name__)


def load_organisations():
    return load_all(Organisation.objects.order_by('company_name', 'pk'))


def filter_organisations(organisations, search):
    """ Case-insensitive substring match on company name, contact name and email. """
    search = (search or '').strip().lower()
    if not search:
        return list(organisations)
    return [
        org for org in organisations
        if search in (org.company_name or '').lower()
        or search in (org.contact_name or '').lower()
        or search in (org.email or '').lower()
    ]


def assignments_for_award(award):
    return list(
        Assignment.objects.filter(award=award)
        .select_related('organisation')
        .order_by('organisation__company_name')
    )


def assign_organisation(award, organisation, assigned_by=''):
    try:
        with transaction.atomic():
            assignment = Assignment.objects.create(
                award=award,
                organisation=organisation,
                status=Assignment.Status.NOMINATED,
                assigned_by=assigned_by,
            )
    except IntegrityError:
        raise AlreadyAssignedError(f"{organisation.company_name} is already assigned to {award.award_name}.")
    logger.info("Organisation %s assigned to award %s by '%s'", organisation.pk, award.pk, assigned_by)
    return assignment


def bulk_assign(award, organisation_ids, assigned_by=''):
    """
    Nominates every listed organisation for ``award``. Organisations that are
    already assigned are skipped. Returns the number of new assignments.
    """
    already_assigned = set(
        Assignment.objects.filter(award=award, organisation_id__in=organisation_ids)
        .values_list('organisation_id', flat=True)
    )
    organisations = Organisation.objects.filter(pk__in=organisation_ids).exclude(pk__in=already_assigned)
    new_assignments = [
        Assignment(award=award, organisation=org, status=Assignment.Status.NOMINATED, assigned_by=assigned_by)
        for org in organisations
    ]
    Assignment.objects.bulk_create(new_assignments, ignore_conflicts=True)
    logger.info("Bulk assigned %d organisations to award %s", len(new_assignments), award.pk)
    return len(new_assignments)


def remove_assignment(assignment):
    with transaction.atomic():
        if assignment.status == Assignment.Status.WINNER:
            _release_award_winner(assignment)
        assignment.delete()


def change_status(assignment, new_status, performed_by=''):
    """
    Moves an assignment to ``new_status``. Marking a winner stamps today's
    announcement date and records the winner on the award. Demoting a winner
    hands the award's winner name to another remaining winner, or clears it.
    The announcement date is left untouched in both directions.
    """
    if new_status not in Assignment.Status.values:
        raise InvalidAssignmentStatusError(f"Unknown assignment status '{new_status}'.")

    with transaction.atomic():
        was_winner = assignment.status == Assignment.Status.WINNER
        assignment.status = new_status
        update_fields = ['status', 'updated_at']
        if new_status == Assignment.Status.WINNER:
            assignment.announcement_date = timezone.localdate()
            update_fields.append('announcement_date')
            award = assignment.award
            award.winner = assignment.organisation.company_name
            award.save(update_fields=['winner', 'updated_at'])
        elif was_winner:
            _release_award_winner(assignment)
        assignment.save(update_fields=update_fields)
        ActivityLog.record(
            assignment, 'status_changed',
            details=f"Status changed to {assignment.get_status_display()}",
            performed_by=performed_by,
        )
    return assignment


def _release_award_winner(assignment):
    award = assignment.award
    if award.winner != assignment.organisation.company_name:
        return
    remaining = (
        Assignment.objects.filter(award=award, status=Assignment.Status.WINNER)
        .exclude(pk=assignment.pk)
        .select_related('organisation')
        .order_by('-announcement_date', 'organisation__company_name')
        .first()
    )
    award.winner = remaining.organisation.company_name if remaining else ''
    award.save(update_fields=['winner', 'updated_at'])


def set_judge_score(assignment, score):
    if score is None:
        assignment.judge_score = None
    else:
        try:
            score = int(score)
        except (TypeError, ValueError):
            raise InvalidJudgeScoreError()
        if not 0 <= score <= 10:
            raise InvalidJudgeScoreError()
        assignment.judge_score = score
    assignment.save(update_fields=['judge_score', 'updated_at'])
    return assignment


# --- Winners ---

@dataclass(frozen=True)
class WinnerFilters:
    year: Optional[int] = None
    sector: str = ''
    category: str = ''
    search: str = ''

    @classmethod
    def from_context(cls, ctx):
        return cls(
            year=ctx.integer('year'),
            sector=ctx.text('sector'),
            category=ctx.text('category'),
            search=ctx.text('search').lower(),
        )

    def matches(self, assignment):
        award = assignment.award
        if self.year is not None and award.year != self.year:
            return False
        if self.sector and award.sector != self.sector:
            return False
        if self.category and award.category != self.category:
            return False
        if self.search:
            haystacks = (assignment.organisation.company_name, award.award_name, award.category)
            if not any(self.search in (value or '').lower() for value in haystacks):
                return False
        return True


def load_winners():
    """ Every winning assignment, newest award year first. """
    return load_all(
        Assignment.objects.filter(status=Assignment.Status.WINNER)
        .select_related('award', 'organisation')
        .order_by('-award__year', 'award__award_name', 'organisation__company_name', 'pk')
    )


def filter_winners(winners, filters):
    return [winner for winner in winners if filters.matches(winner)]


def winner_filter_options(winners):
    return {
        'years': sorted({w.award.year for w in winners if w.award.year}, reverse=True),
        'sectors': sorted({w.award.sector for w in winners if w.award.sector}),
        'categories': sorted({w.award.category for w in winners if w.award.category}),
    }
