# organisations/serializers.py
from rest_framework import serializers
from .models import Assignment, Organisation


class OrganisationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Organisation
        fields = [
            'id', 'company_name', 'contact_name', 'email', 'phone', 'website',
            'logo_url', 'description', 'status', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class AssignmentSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='organisation.company_name', read_only=True)
    company_email = serializers.CharField(source='organisation.email', read_only=True)
    logo_url = serializers.CharField(source='organisation.logo_url', read_only=True)

    class Meta:
        model = Assignment
        fields = [
            'id', 'award', 'organisation', 'company_name', 'company_email', 'logo_url',
            'status', 'judge_score', 'announcement_date', 'assigned_by', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class WinnerSerializer(serializers.ModelSerializer):
    company_name = serializers.CharField(source='organisation.company_name', read_only=True)
    logo_url = serializers.CharField(source='organisation.logo_url', read_only=True)
    award_name = serializers.CharField(source='award.award_name', read_only=True)
    category = serializers.CharField(source='award.category', read_only=True)
    sector = serializers.CharField(source='award.sector', read_only=True)
    region = serializers.CharField(source='award.region', read_only=True)
    year = serializers.IntegerField(source='award.year', read_only=True)

    class Meta:
        model = Assignment
        fields = [
            'id', 'award', 'organisation', 'company_name', 'logo_url', 'award_name',
            'category', 'sector', 'region', 'year', 'judge_score', 'announcement_date',
        ]
        read_only_fields = fields
