# entries/serializers.py
from rest_framework import serializers

from awards.models import Award
from organisations.models import Organisation
from .models import Entry, Invoice


class EntryDetailsSerializer(serializers.Serializer):
    """
    Everything the entrant fills in before reviewing their entry.
    Either an existing organisation or a new company name is required.
    """
    organisation_id = serializers.IntegerField(required=False, allow_null=True)
    new_company_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    new_company_website = serializers.URLField(required=False, allow_blank=True, default='')
    new_company_description = serializers.CharField(required=False, allow_blank=True, default='')

    award_id = serializers.IntegerField()
    entry_title = serializers.CharField(max_length=255)
    entry_description = serializers.CharField(required=False, allow_blank=True, default='')
    why_should_win = serializers.CharField()
    supporting_information = serializers.CharField(required=False, allow_blank=True, default='')

    contact_name = serializers.CharField(max_length=150)
    contact_email = serializers.EmailField()
    contact_phone = serializers.CharField(max_length=50, required=False, allow_blank=True, default='')
    contact_position = serializers.CharField(max_length=150, required=False, allow_blank=True, default='')

    videos = serializers.ListField(
        child=serializers.CharField(allow_blank=True), required=False, default=list
    )

    def validate_award_id(self, value):
        if not Award.objects.filter(pk=value, is_active=True).exists():
            raise serializers.ValidationError("Please select an award that is open for entries.")
        return value

    def validate_organisation_id(self, value):
        if value and not Organisation.objects.filter(pk=value, status=Organisation.Status.ACTIVE).exists():
            raise serializers.ValidationError("Please select an active organisation.")
        return value

    def validate_videos(self, value):
        return [link.strip() for link in value if link and link.strip()]

    def validate(self, attrs):
        if not attrs.get('organisation_id') and not attrs.get('new_company_name', '').strip():
            raise serializers.ValidationError(
                {'organisation_id': "Select an organisation or enter a new company name."}
            )
        return attrs


class InvoiceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_type', 'status', 'total_amount', 'currency',
            'paid_date', 'payment_method', 'payment_reference', 'created_at',
        ]
        read_only_fields = fields


class EntrySerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='organisation.company_name', read_only=True)
    award_name = serializers.CharField(source='award.award_name', read_only=True)

    class Meta:
        model = Entry
        fields = [
            'id', 'entry_number', 'organisation', 'company_name', 'award', 'award_name',
            'entry_title', 'entry_description', 'why_should_win', 'supporting_information', 'videos',
            'contact_name', 'contact_email', 'contact_phone', 'contact_position',
            'entry_fee', 'status', 'payment_status', 'payment_reference', 'submission_date',
            'is_public', 'allow_public_voting', 'public_votes', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PaymentStatusSerializer(serializers.ModelSerializer):
    class Meta:
        model = Entry
        fields = ['id', 'entry_number', 'status', 'payment_status', 'entry_fee', 'submission_date']
        read_only_fields = fields


class PublicEntrySerializer(serializers.ModelSerializer):
    """ What a public voter sees about an entry. """
    company_name = serializers.CharField(source='organisation.company_name', read_only=True)
    logo_url = serializers.CharField(source='organisation.logo_url', read_only=True)
    award_name = serializers.CharField(source='award.award_name', read_only=True)

    class Meta:
        model = Entry
        fields = [
            'id', 'entry_number', 'entry_title', 'entry_description', 'videos',
            'company_name', 'logo_url', 'award', 'award_name', 'public_votes',
        ]
        read_only_fields = fields


class InvoiceReportSerializer(InvoiceSerializer):
    company_name = serializers.CharField(source='organisation.company_name', read_only=True, default='')
    entry_number = serializers.CharField(source='entry.entry_number', read_only=True, default='')

    class Meta(InvoiceSerializer.Meta):
        fields = InvoiceSerializer.Meta.fields + ['organisation', 'company_name', 'entry', 'entry_number']
        read_only_fields = fields


class VotingFlagsSerializer(serializers.Serializer):
    is_public = serializers.BooleanField(required=False)
    allow_public_voting = serializers.BooleanField(required=False)
