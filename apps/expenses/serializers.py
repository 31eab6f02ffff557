from decimal import Decimal

from rest_framework import serializers

from apps.accounts.serializers import UserMinimalSerializer
from .models import Category, Expense, ExpenseShare


class ExpenseShareSerializer(serializers.ModelSerializer):
    """One member's share of a group expense."""

    user = UserMinimalSerializer(read_only=True)
    share_index = serializers.IntegerField(source='position', read_only=True)

    class Meta:
        model = ExpenseShare
        fields = ['share_index', 'user', 'amount', 'is_paid', 'paid_at']
        read_only_fields = fields


class ExpenseSerializer(serializers.ModelSerializer):
    """Main serializer for expenses."""

    paid_by = UserMinimalSerializer(read_only=True)
    group_name = serializers.SerializerMethodField()
    shares = ExpenseShareSerializer(many=True, read_only=True)
    obligated_members = serializers.ListField(
        source='obligated_member_ids', child=serializers.UUIDField(), read_only=True
    )
    paid_members = serializers.ListField(
        source='paid_member_ids', child=serializers.UUIDField(), read_only=True
    )

    class Meta:
        model = Expense
        fields = [
            'id',
            'title',
            'amount',
            'category',
            'paid_by',
            'group',
            'group_name',
            'receipt_url',
            'period',
            'shares',
            'obligated_members',
            'paid_members',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_group_name(self, obj):
        return obj.group.name if obj.group_id else None


class ExpenseCreateSerializer(serializers.Serializer):
    """Input for creating an expense."""

    title = serializers.CharField(max_length=200)
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0.01'))
    category = serializers.ChoiceField(choices=Category.choices)
    group_id = serializers.UUIDField(required=False, allow_null=True)
    obligated_member_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        allow_empty=True,
    )
    receipt_url = serializers.CharField(max_length=500, required=False, allow_blank=True)
    created_at = serializers.DateTimeField(required=False)


class ExpenseUpdateSerializer(serializers.Serializer):
    """Only the title and receipt can change after creation."""

    title = serializers.CharField(max_length=200, required=False)
    receipt_url = serializers.CharField(max_length=500, required=False, allow_blank=True)


class ExpenseFilterSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=Category.choices, required=False)
    group_id = serializers.UUIDField(required=False)
    start_date = serializers.DateTimeField(required=False)
    end_date = serializers.DateTimeField(required=False)


class MarkSharePaidSerializer(serializers.Serializer):
    """Pick a share by index, by user, or default to the caller's own."""

    share_index = serializers.IntegerField(min_value=0, required=False)
    user_id = serializers.UUIDField(required=False)


class DebtSummarySerializer(serializers.Serializer):
    you_owe = serializers.DecimalField(max_digits=12, decimal_places=2)
    you_are_owed = serializers.DecimalField(max_digits=12, decimal_places=2)
    owe_count = serializers.IntegerField()
    owed_count = serializers.IntegerField()
