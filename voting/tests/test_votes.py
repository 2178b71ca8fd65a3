import json
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.core import mail
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone

from awards.models import Award
from entries.models import Entry
from organisations.models import Organisation
from voting import services
from voting.exceptions import AlreadyVotedError, EntryNotVotableError, InvalidVerificationTokenError
from voting.models import Vote


class VotingTestCase(TestCase):
    def setUp(self):
        self.award = Award.objects.create(award_name="People's Choice", year=2024)
        self.org = Organisation.objects.create(company_name="Acme Ltd")
        self.entry = self.make_entry("Open to votes")

    def make_entry(self, title, status=Entry.Status.SHORTLISTED, is_public=True, allow_public_voting=True, award=None):
        return Entry.objects.create(
            organisation=self.org, award=award or self.award, entry_title=title, why_should_win="Because.",
            contact_name="Sam", contact_email="sam@acme.test", entry_fee=Decimal('195.00'),
            status=status, is_public=is_public, allow_public_voting=allow_public_voting,
        )


class CastVoteTests(VotingTestCase):
    def test_first_vote_counts(self):
        vote, count = services.cast_vote(self.entry.pk, ' Voter@Example.com ', 'Jo', '203.0.113.9')
        self.assertEqual(count, 1)
        self.assertEqual(vote.voter_email, 'voter@example.com')
        self.assertFalse(vote.email_verified)
        self.assertTrue(vote.verification_token)
        self.assertIsNotNone(vote.verification_sent_at)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(vote.verification_token, mail.outbox[0].body)

    def test_duplicate_vote_rejected_and_count_unchanged(self):
        services.cast_vote(self.entry.pk, 'voter@example.com')
        with self.assertRaisesMessage(AlreadyVotedError, "You have already voted for this entry!"):
            services.cast_vote(self.entry.pk, 'VOTER@example.com')
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.public_votes, 1)
        self.assertEqual(Vote.objects.filter(entry=self.entry).count(), 1)

    def test_existing_row_conflicts_without_prior_read(self):
        # A vote that landed between any check and the insert still hits the constraint.
        Vote.objects.create(entry=self.entry, voter_email='racer@example.com')
        with self.assertRaises(AlreadyVotedError):
            services.cast_vote(self.entry.pk, 'racer@example.com')
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.public_votes, 0)

    def test_same_voter_may_vote_for_different_entries(self):
        other = self.make_entry("Another one")
        services.cast_vote(self.entry.pk, 'voter@example.com')
        services.cast_vote(other.pk, 'voter@example.com')
        self.assertEqual(services.voted_entry_ids('voter@example.com'), {self.entry.pk, other.pk})

    def test_disabled_voting_is_neither_listed_nor_accepted(self):
        closed = self.make_entry("Closed", allow_public_voting=False)
        hidden = self.make_entry("Hidden", is_public=False)
        draft = self.make_entry("Unpaid", status=Entry.Status.DRAFT)

        listed = {e.pk for e in services.votable_entries()}
        self.assertEqual(listed, {self.entry.pk})

        for entry in (closed, hidden, draft):
            with self.assertRaises(EntryNotVotableError):
                services.cast_vote(entry.pk, 'voter@example.com')
        self.assertFalse(Vote.objects.exclude(entry=self.entry).exists())

    def test_listing_ordered_by_votes_and_filtered_by_award(self):
        runner_up = self.make_entry("Runner up")
        Entry.objects.filter(pk=runner_up.pk).update(public_votes=5)
        other_award = Award.objects.create(award_name="Innovation", year=2024)
        elsewhere = self.make_entry("Elsewhere", award=other_award)

        self.assertEqual([e.pk for e in services.votable_entries()][:1], [runner_up.pk])
        self.assertEqual([e.pk for e in services.votable_entries(award_id=other_award.pk)], [elsewhere.pk])

    def test_email_failure_keeps_vote(self):
        with mock.patch('voting.notifications.send_mail', side_effect=OSError('smtp down')):
            vote, count = services.cast_vote(self.entry.pk, 'voter@example.com')
        self.assertEqual(count, 1)
        vote.refresh_from_db()
        self.assertIsNone(vote.verification_sent_at)

    @override_settings(VOTING_COUNT_VERIFIED_ONLY=True)
    def test_verified_only_mode_counts_on_verification(self):
        vote, count = services.cast_vote(self.entry.pk, 'voter@example.com')
        self.assertEqual(count, 0)
        services.verify_vote(vote.verification_token)
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.public_votes, 1)

        # Verifying again does not count twice.
        services.verify_vote(vote.verification_token)
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.public_votes, 1)


class VerifyVoteTests(VotingTestCase):
    def setUp(self):
        super().setUp()
        self.vote, _ = services.cast_vote(self.entry.pk, 'voter@example.com')

    def test_verify_marks_vote(self):
        services.verify_vote(self.vote.verification_token)
        self.vote.refresh_from_db()
        self.assertTrue(self.vote.email_verified)
        self.assertIsNotNone(self.vote.verified_at)
        self.entry.refresh_from_db()
        self.assertEqual(self.entry.public_votes, 1)

    def test_unknown_token(self):
        with self.assertRaises(InvalidVerificationTokenError):
            services.verify_vote('not-a-token')

    def test_expired_token(self):
        Vote.objects.filter(pk=self.vote.pk).update(created_at=timezone.now() - timedelta(days=8))
        with self.assertRaises(InvalidVerificationTokenError):
            services.verify_vote(self.vote.verification_token)

    def test_verify_endpoint(self):
        response = self.client.get(reverse('voting:verify_vote', args=[self.vote.verification_token]))
        self.assertEqual(response.status_code, 200)
        response = self.client.get(reverse('voting:verify_vote', args=['bogus']))
        self.assertEqual(response.status_code, 400)


class VotingViewTests(VotingTestCase):
    def cast(self, payload, **extra):
        return self.client.post(reverse('voting:cast_vote'), json.dumps(payload),
                                content_type='application/json', **extra)

    def test_cast_records_forwarded_ip(self):
        response = self.cast({'entry_id': self.entry.pk, 'voter_email': 'voter@example.com'},
                             HTTP_X_FORWARDED_FOR='198.51.100.7, 10.0.0.1')
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()['public_votes'], 1)
        self.assertEqual(Vote.objects.get().voter_ip, '198.51.100.7')

    def test_duplicate_returns_409(self):
        self.cast({'entry_id': self.entry.pk, 'voter_email': 'voter@example.com'})
        response = self.cast({'entry_id': self.entry.pk, 'voter_email': 'voter@example.com'})
        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.json()['message'], "You have already voted for this entry!")

    def test_email_required_and_validated(self):
        response = self.cast({'entry_id': self.entry.pk, 'voter_email': ''})
        self.assertEqual(response.status_code, 400)
        response = self.cast({'entry_id': self.entry.pk, 'voter_email': 'nope'})
        self.assertEqual(response.status_code, 400)
        self.assertFalse(Vote.objects.exists())

    def test_closed_entry_returns_404(self):
        closed = self.make_entry("Closed", allow_public_voting=False)
        response = self.cast({'entry_id': closed.pk, 'voter_email': 'voter@example.com'})
        self.assertEqual(response.status_code, 404)

    def test_entries_listing_flags_votes(self):
        services.cast_vote(self.entry.pk, 'voter@example.com')
        response = self.client.get(reverse('voting:voting_entries'),
                                   {'award': self.award.pk, 'email': 'VOTER@example.com'})
        data = response.json()
        self.assertEqual(data['count'], 1)
        self.assertEqual(data['total_votes'], 1)
        self.assertTrue(data['entries'][0]['has_voted'])

    def test_nominee_by_entry_number(self):
        response = self.client.get(reverse('voting:nominee_detail'), {'entry': self.entry.entry_number})
        self.assertEqual(response.json()['entry']['entry_title'], "Open to votes")
        self.assertFalse(response.json()['entry']['has_voted'])

        response = self.client.get(reverse('voting:nominee_detail'))
        self.assertEqual(response.status_code, 400)
