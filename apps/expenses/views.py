from django.http import HttpResponse
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema, OpenApiParameter

from .serializers import (
    ExpenseSerializer,
    ExpenseCreateSerializer,
    ExpenseUpdateSerializer,
    ExpenseFilterSerializer,
    MarkSharePaidSerializer,
    DebtSummarySerializer,
)
from apps.expenses.services import (
    create_expense,
    get_expense,
    list_user_expenses,
    update_expense,
    delete_expense,
    write_expenses_csv,
)
from apps.ledger.services import mark_share_paid, get_user_debt_summary


class ExpensePagination(PageNumberPagination):
    page_size = 50
    page_size_query_param = 'page_size'
    max_page_size = 100


FILTER_PARAMETERS = [
    OpenApiParameter('category', str, description='Filter by category'),
    OpenApiParameter('group_id', str, description='Filter by group'),
    OpenApiParameter('start_date', str, description='ISO datetime, inclusive'),
    OpenApiParameter('end_date', str, description='ISO datetime, inclusive'),
]


class ExpenseViewSet(viewsets.ModelViewSet):
    """
    ViewSet for expenses.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Expenses the user paid or shares in
    create: Record a personal or group expense
    retrieve: Get a specific expense
    partial_update: Change title or receipt (payer only)
    destroy: Delete an expense (payer only)
    """

    serializer_class = ExpenseSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = ExpensePagination
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def _filters(self):
        serializer = ExpenseFilterSerializer(data=self.request.query_params)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        return {
            'category': data.get('category'),
            'group_id': data.get('group_id'),
            'start': data.get('start_date'),
            'end': data.get('end_date'),
        }

    def get_queryset(self):
        return list_user_expenses(user=self.request.user, **self._filters())

    def get_serializer_class(self):
        if self.action == 'create':
            return ExpenseCreateSerializer
        if self.action == 'partial_update':
            return ExpenseUpdateSerializer
        return ExpenseSerializer

    @extend_schema(parameters=FILTER_PARAMETERS)
    def list(self, request, *args, **kwargs):
        return super().list(request, *args, **kwargs)

    @extend_schema(request=ExpenseCreateSerializer, responses={201: ExpenseSerializer})
    def create(self, request, *args, **kwargs):
        serializer = ExpenseCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        expense = create_expense(
            payer=request.user,
            title=data['title'],
            amount=data['amount'],
            category=data['category'],
            group_id=data.get('group_id'),
            obligated_member_ids=data.get('obligated_member_ids'),
            receipt_url=data.get('receipt_url'),
            created_at=data.get('created_at'),
        )
        return Response(ExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        expense = get_expense(expense_id=kwargs['pk'], user=request.user)
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(request=ExpenseUpdateSerializer, responses={200: ExpenseSerializer})
    def partial_update(self, request, *args, **kwargs):
        serializer = ExpenseUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        expense = update_expense(
            expense_id=kwargs['pk'],
            requester=request.user,
            title=serializer.validated_data.get('title'),
            receipt_url=serializer.validated_data.get('receipt_url'),
        )
        return Response(ExpenseSerializer(expense).data)

    def destroy(self, request, *args, **kwargs):
        delete_expense(expense_id=kwargs['pk'], requester=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=MarkSharePaidSerializer, responses={200: ExpenseSerializer})
    @action(detail=True, methods=['patch'])
    def mark_paid(self, request, pk=None):
        """Mark a share of a group expense as paid."""
        serializer = MarkSharePaidSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        expense = mark_share_paid(
            expense_id=pk,
            acting_user=request.user,
            share_index=serializer.validated_data.get('share_index'),
            user_id=serializer.validated_data.get('user_id'),
        )
        return Response(ExpenseSerializer(expense).data)

    @extend_schema(responses={200: DebtSummarySerializer})
    @action(detail=False, methods=['get'])
    def debt_summary(self, request):
        """What the user owes and is owed across groups."""
        summary = get_user_debt_summary(user=request.user)
        return Response(DebtSummarySerializer(summary).data)

    @extend_schema(parameters=FILTER_PARAMETERS, responses={(200, 'text/csv'): str})
    @action(detail=False, methods=['get'])
    def export(self, request):
        """Download the filtered expenses as CSV."""
        response = HttpResponse(content_type='text/csv')
        response['Content-Disposition'] = 'attachment; filename=expenses.csv'
        write_expenses_csv(expenses=self.get_queryset(), stream=response)
        return response
