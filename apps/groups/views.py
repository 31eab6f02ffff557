from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from drf_spectacular.utils import extend_schema

from .serializers import (
    GroupSerializer,
    GroupCreateSerializer,
    GroupUpdateSerializer,
    GroupMemberSerializer,
    JoinGroupSerializer,
    MemberSerializer,
    AddMemberSerializer,
    UpdateMemberRoleSerializer,
)

from apps.groups.services import (
    create_group,
    update_group,
    delete_group,
    get_group_by_id,
    list_user_groups,
    require_membership,
    join_group_by_code,
    leave_group,
    add_member,
    remove_member,
    get_group_members,
    update_member_role,
)
from apps.expenses.serializers import ExpenseSerializer
from apps.expenses.services import list_group_expenses
from apps.ledger.serializers import DebtSerializer, SettlementSerializer, SettlementCreateSerializer
from apps.ledger.services import get_group_debts, create_settlement, list_group_settlements


class GroupPagination(PageNumberPagination):
    """Custom pagination for groups."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class GroupViewSet(viewsets.GenericViewSet):
    """
    ViewSet for groups, their members, expenses, debts and settlements.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Groups the user is a member of
    create: Create a new group (creator becomes admin)
    retrieve: Get a group (members only)
    partial_update: Rename a group (admin only)
    destroy: Delete a group and its expenses and settlements (creator only)
    """

    serializer_class = GroupSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = GroupPagination
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def get_queryset(self):
        return list_user_groups(user=self.request.user)

    def list(self, request):
        page = self.paginate_queryset(self.get_queryset())
        serializer = GroupSerializer(page, many=True, context={'request': request})
        return self.get_paginated_response(serializer.data)

    @extend_schema(request=GroupCreateSerializer, responses={201: GroupSerializer})
    def create(self, request):
        """Create a new group."""
        serializer = GroupCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = create_group(
            name=serializer.validated_data['name'],
            creator=request.user,
            code=serializer.validated_data.get('code'),
        )

        output_serializer = GroupSerializer(group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    def retrieve(self, request, pk=None):
        require_membership(group_id=pk, user=request.user)
        group = get_group_by_id(group_id=pk)
        return Response(GroupSerializer(group, context={'request': request}).data)

    @extend_schema(request=GroupUpdateSerializer, responses={200: GroupSerializer})
    def partial_update(self, request, pk=None):
        serializer = GroupUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        group = update_group(group_id=pk, user=request.user, name=serializer.validated_data['name'])
        return Response(GroupSerializer(group, context={'request': request}).data)

    def destroy(self, request, pk=None):
        """Delete a group."""
        delete_group(group_id=pk, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # -------------------------------------------------------------------------
    # Membership
    # -------------------------------------------------------------------------

    @extend_schema(request=JoinGroupSerializer, responses={201: GroupSerializer})
    @action(detail=False, methods=['post'])
    def join(self, request):
        """Join a group using its code."""
        serializer = JoinGroupSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        membership = join_group_by_code(code=serializer.validated_data['code'], user=request.user)

        output_serializer = GroupSerializer(membership.group, context={'request': request})
        return Response(output_serializer.data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={204: None})
    @action(detail=True, methods=['post'])
    def leave(self, request, pk=None):
        """Leave a group."""
        leave_group(group_id=pk, user=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: GroupMemberSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def members(self, request, pk=None):
        """Get all members of the group."""
        memberships = get_group_members(group_id=pk, requester=request.user)
        serializer = GroupMemberSerializer(memberships, many=True)
        return Response(serializer.data)

    @extend_schema(request=AddMemberSerializer, responses={201: GroupMemberSerializer})
    @action(detail=True, methods=['post'])
    def add_member(self, request, pk=None):
        """Add a user to the group (admin only)."""
        serializer = AddMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        membership = add_member(
            group_id=pk,
            user_id=serializer.validated_data['user_id'],
            added_by=request.user,
            role=serializer.validated_data['role'],
        )
        return Response(GroupMemberSerializer(membership).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=MemberSerializer, responses={204: None})
    @action(detail=True, methods=['delete'])
    def remove_member(self, request, pk=None):
        """Remove a member from the group (admin only)."""
        serializer = MemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        remove_member(group_id=pk, user_id=serializer.validated_data['user_id'], removed_by=request.user)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=UpdateMemberRoleSerializer, responses={200: GroupMemberSerializer})
    @action(detail=True, methods=['post'])
    def update_member_role(self, request, pk=None):
        """Update member's role (admin only)."""
        serializer = UpdateMemberRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        membership = update_member_role(
            group_id=pk,
            user_id=serializer.validated_data['user_id'],
            new_role=serializer.validated_data['role'],
            updated_by=request.user
        )
        return Response(GroupMemberSerializer(membership).data)

    # -------------------------------------------------------------------------
    # Expenses, debts and settlements
    # -------------------------------------------------------------------------

    @extend_schema(responses={200: ExpenseSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def expenses(self, request, pk=None):
        """Expenses recorded in the group."""
        expenses = list_group_expenses(group_id=pk, requester=request.user)
        return Response(ExpenseSerializer(expenses, many=True).data)

    @extend_schema(responses={200: DebtSerializer(many=True)})
    @action(detail=True, methods=['get'])
    def debts(self, request, pk=None):
        """Who owes whom in the group."""
        debts = get_group_debts(group_id=pk, requester=request.user)
        return Response(DebtSerializer(DebtSerializer.with_users(debts), many=True).data)

    @extend_schema(
        methods=['GET'],
        responses={200: SettlementSerializer(many=True)},
    )
    @extend_schema(
        methods=['POST'],
        request=SettlementCreateSerializer,
        responses={201: SettlementSerializer},
    )
    @action(detail=True, methods=['get', 'post'])
    def settlements(self, request, pk=None):
        """List the group's settlements or record a new one."""
        if request.method == 'GET':
            settlements = list_group_settlements(group_id=pk, requester=request.user)
            return Response(SettlementSerializer(settlements, many=True).data)

        serializer = SettlementCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        settlement = create_settlement(
            group_id=pk,
            from_user=request.user,
            to_user_id=serializer.validated_data['to_user_id'],
            amount=serializer.validated_data['amount'],
            description=serializer.validated_data.get('description', ''),
        )
        return Response(SettlementSerializer(settlement).data, status=status.HTTP_201_CREATED)
