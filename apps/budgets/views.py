from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    BudgetSerializer,
    BudgetCreateSerializer,
    BudgetUpdateSerializer,
    PeriodQuerySerializer,
    BudgetVsActualSerializer,
    BudgetAlertSerializer,
    MonthlySummarySerializer,
)
from apps.budgets.services import (
    create_budget,
    get_budget,
    list_budgets,
    update_budget,
    delete_budget,
    get_budget_vs_actual,
    get_budget_alerts,
    get_monthly_summary,
)

PERIOD_PARAMETER = OpenApiParameter('period', str, required=True, description='YYYY-MM')


class BudgetViewSet(viewsets.GenericViewSet):
    """
    The current user's budgets and reports.

    list: Budgets, optionally for one ?period=
    create: Create a budget for a category and month
    retrieve: Get a budget
    partial_update: Change limit or alert settings
    destroy: Delete a budget
    vs_actual / alerts / monthly_summary: Reports for ?period=
    """

    serializer_class = BudgetSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def _period(self, request):
        serializer = PeriodQuerySerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)
        return serializer.validated_data['period']

    @extend_schema(parameters=[OpenApiParameter('period', str, description='YYYY-MM')])
    def list(self, request):
        budgets = list_budgets(user=request.user, period=request.query_params.get('period'))
        return Response(BudgetSerializer(budgets, many=True).data)

    @extend_schema(request=BudgetCreateSerializer, responses={201: BudgetSerializer})
    def create(self, request):
        serializer = BudgetCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        budget = create_budget(user=request.user, **serializer.validated_data)
        return Response(BudgetSerializer(budget).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        budget = get_budget(budget_id=pk, user=request.user)
        return Response(BudgetSerializer(budget).data)

    @extend_schema(request=BudgetUpdateSerializer, responses={200: BudgetSerializer})
    def partial_update(self, request, pk=None):
        serializer = BudgetUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        budget = update_budget(budget_id=pk, user=request.user, **serializer.validated_data)
        return Response(BudgetSerializer(budget).data)

    def destroy(self, request, pk=None):
        delete_budget(budget_id=pk, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(parameters=[PERIOD_PARAMETER], responses={200: BudgetVsActualSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def vs_actual(self, request):
        rows = get_budget_vs_actual(user=request.user, period=self._period(request))
        return Response(BudgetVsActualSerializer(rows, many=True).data)

    @extend_schema(parameters=[PERIOD_PARAMETER], responses={200: BudgetAlertSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def alerts(self, request):
        alerts = get_budget_alerts(user=request.user, period=self._period(request))
        return Response(BudgetAlertSerializer(alerts, many=True).data)

    @extend_schema(parameters=[PERIOD_PARAMETER], responses={200: MonthlySummarySerializer})
    @action(detail=False, methods=['get'])
    def monthly_summary(self, request):
        summary = get_monthly_summary(user=request.user, period=self._period(request))
        return Response(MonthlySummarySerializer(summary).data)
