from decimal import Decimal

from rest_framework import serializers

from apps.expenses.models import Category
from .models import Budget, BudgetStatus


class BudgetSerializer(serializers.ModelSerializer):
    """Budget with its current spend."""

    percentage = serializers.SerializerMethodField()

    class Meta:
        model = Budget
        fields = [
            'id',
            'category',
            'period',
            'limit',
            'spent_this_period',
            'percentage',
            'alerts_enabled',
            'alert_threshold_pct',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_percentage(self, obj):
        percentage = obj.percentage
        return None if percentage is None else percentage.quantize(Decimal('0.01'))


class BudgetCreateSerializer(serializers.Serializer):
    category = serializers.ChoiceField(choices=Category.choices)
    period = serializers.RegexField(r'^\d{4}-(0[1-9]|1[0-2])$', help_text='YYYY-MM')
    limit = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'))
    alerts_enabled = serializers.BooleanField(required=False, default=True)
    alert_threshold_pct = serializers.IntegerField(min_value=0, max_value=100, required=False)


class BudgetUpdateSerializer(serializers.Serializer):
    """Limit and alert settings only; spend is tracked automatically."""

    limit = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=Decimal('0'), required=False)
    alerts_enabled = serializers.BooleanField(required=False)
    alert_threshold_pct = serializers.IntegerField(min_value=0, max_value=100, required=False)


class PeriodQuerySerializer(serializers.Serializer):
    period = serializers.RegexField(
        r'^\d{4}-(0[1-9]|1[0-2])$',
        error_messages={'invalid': 'Invalid period format. Use YYYY-MM'},
    )


class BudgetVsActualSerializer(serializers.Serializer):
    category = serializers.CharField()
    budget = serializers.DecimalField(max_digits=12, decimal_places=2)
    actual = serializers.DecimalField(max_digits=12, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=12, decimal_places=2)
    percentage = serializers.DecimalField(max_digits=8, decimal_places=2)
    status = serializers.ChoiceField(choices=BudgetStatus.choices)
    alert = serializers.BooleanField()


class BudgetAlertSerializer(serializers.Serializer):
    category = serializers.CharField()
    budget = serializers.DecimalField(max_digits=12, decimal_places=2)
    actual = serializers.DecimalField(max_digits=12, decimal_places=2)
    percentage = serializers.DecimalField(max_digits=8, decimal_places=2)
    threshold = serializers.IntegerField()
    type = serializers.CharField()


class CategoryBreakdownSerializer(serializers.Serializer):
    category = serializers.CharField()
    budget = serializers.DecimalField(max_digits=12, decimal_places=2)
    spent = serializers.DecimalField(max_digits=12, decimal_places=2)
    remaining = serializers.DecimalField(max_digits=12, decimal_places=2)
    percentage = serializers.DecimalField(max_digits=8, decimal_places=2)


class MonthlySummarySerializer(serializers.Serializer):
    period = serializers.CharField()
    total_budget = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_spent = serializers.DecimalField(max_digits=14, decimal_places=2)
    total_remaining = serializers.DecimalField(max_digits=14, decimal_places=2)
    category_breakdown = CategoryBreakdownSerializer(many=True)
    budget_count = serializers.IntegerField()
    expense_count = serializers.IntegerField()
