from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import SettlementSerializer
from apps.ledger.services import complete_settlement, list_user_settlements


class SettlementViewSet(viewsets.GenericViewSet):
    """
    Settlements of the current user.

    list: Settlements the user sent or received
    complete: Mark a pending settlement completed (either party)

    Group-scoped listing and creation live under /api/groups/{id}/settlements/.
    """

    serializer_class = SettlementSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def list(self, request):
        settlements = list_user_settlements(user=request.user)
        return Response(SettlementSerializer(settlements, many=True).data)

    @extend_schema(request=None, responses={200: SettlementSerializer})
    @action(detail=True, methods=['post'])
    def complete(self, request, pk=None):
        settlement = complete_settlement(settlement_id=pk, user=request.user)
        return Response(SettlementSerializer(settlement).data)
