from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import NotificationSerializer, UnreadCountSerializer
from .services import (
    list_notifications,
    get_unread_count,
    mark_notification_read,
    mark_all_read,
)


class NotificationViewSet(viewsets.GenericViewSet):
    """
    The current user's notification inbox.

    list: Latest notifications (newest first)
    unread_count: Number of unread notifications
    read: Mark one notification as read
    read_all: Mark every notification as read
    """

    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    lookup_value_regex = '[0-9a-fA-F-]{36}'

    def list(self, request):
        notifications = list_notifications(user=request.user)
        serializer = NotificationSerializer(notifications, many=True)
        return Response(serializer.data)

    @extend_schema(responses={200: UnreadCountSerializer})
    @action(detail=False, methods=['get'])
    def unread_count(self, request):
        return Response({'count': get_unread_count(user=request.user)})

    @extend_schema(request=None, responses={200: NotificationSerializer})
    @action(detail=True, methods=['patch'])
    def read(self, request, pk=None):
        notification = mark_notification_read(notification_id=pk, user=request.user)
        return Response(NotificationSerializer(notification).data)

    @extend_schema(request=None, responses={200: UnreadCountSerializer})
    @action(detail=False, methods=['post'])
    def read_all(self, request):
        updated = mark_all_read(user=request.user)
        return Response({'count': updated})
