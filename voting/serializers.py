# voting/serializers.py
from rest_framework import serializers

from entries.serializers import PublicEntrySerializer


class CastVoteSerializer(serializers.Serializer):
    entry_id = serializers.IntegerField()
    voter_email = serializers.EmailField(error_messages={
        'required': "Please enter your email address to vote.",
        'blank': "Please enter your email address to vote.",
        'invalid': "Please enter a valid email address.",
    })
    voter_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')

    def validate_voter_email(self, value):
        return value.strip().lower()


class VotableEntrySerializer(PublicEntrySerializer):
    """ Adds whether the current voter has already voted for the entry. """
    has_voted = serializers.SerializerMethodField()

    class Meta(PublicEntrySerializer.Meta):
        fields = PublicEntrySerializer.Meta.fields + ['has_voted']
        read_only_fields = fields

    def get_has_voted(self, obj):
        return obj.pk in self.context.get('voted_ids', set())
