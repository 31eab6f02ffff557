from decimal import Decimal

from rest_framework import serializers

from apps.accounts.models import User
from apps.accounts.serializers import UserMinimalSerializer
from .models import Settlement


class SettlementSerializer(serializers.ModelSerializer):

    from_user = UserMinimalSerializer(read_only=True)
    to_user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = Settlement
        fields = [
            'id',
            'group',
            'from_user',
            'to_user',
            'amount',
            'description',
            'status',
            'completed_at',
            'created_at',
        ]
        read_only_fields = fields


class SettlementCreateSerializer(serializers.Serializer):
    """The sender is always the authenticated user."""

    to_user_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)


class DebtSerializer(serializers.Serializer):
    from_user = UserMinimalSerializer()
    to_user = UserMinimalSerializer()
    amount = serializers.DecimalField(max_digits=12, decimal_places=2)

    @staticmethod
    def with_users(debts):
        """Replace user ids in ``debts`` with User instances."""
        ids = {debt['from_user'] for debt in debts} | {debt['to_user'] for debt in debts}
        users = User.objects.in_bulk(ids)
        return [
            {**debt, 'from_user': users[debt['from_user']], 'to_user': users[debt['to_user']]}
            for debt in debts
        ]
