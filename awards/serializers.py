# awards/serializers.py
from rest_framework import serializers
from .models import Award


class AwardSerializer(serializers.ModelSerializer):
    """
    Award record as shown in the admin table. ``assignment_counts`` is only
    present on awards loaded through ``services.load_awards``.
    """
    assignment_counts = serializers.SerializerMethodField()
    effective_entry_fee = serializers.DecimalField(max_digits=8, decimal_places=2, read_only=True)

    class Meta:
        model = Award
        fields = [
            'id', 'award_name', 'category', 'sector', 'region', 'year', 'description',
            'is_active', 'entry_fee', 'effective_entry_fee', 'status', 'winner',
            'assignment_counts', 'created_at', 'updated_at',
        ]
        read_only_fields = ['id', 'status', 'created_at', 'updated_at']

    def get_assignment_counts(self, obj):
        return getattr(obj, 'assignment_counts', None)


class PublicAwardSerializer(serializers.ModelSerializer):
    effective_entry_fee = serializers.DecimalField(max_digits=8, decimal_places=2, read_only=True)

    class Meta:
        model = Award
        fields = ['id', 'award_name', 'category', 'effective_entry_fee']
