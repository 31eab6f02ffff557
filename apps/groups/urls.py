from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'groups'

# Router for ViewSets
router = DefaultRouter()
router.register(r'', views.GroupViewSet, basename='group')

urlpatterns = [
    # Group ViewSet routes
    # GET    /api/groups/              - List user's groups
    # POST   /api/groups/              - Create group
    # GET    /api/groups/{id}/         - Get group details (members)
    # PATCH  /api/groups/{id}/         - Rename group (admin)
    # DELETE /api/groups/{id}/         - Delete group (creator)

    # Membership actions
    # POST   /api/groups/join/                      - Join with group code
    # POST   /api/groups/{id}/leave/                - Leave group
    # GET    /api/groups/{id}/members/              - List members
    # POST   /api/groups/{id}/add_member/           - Add member (admin)
    # DELETE /api/groups/{id}/remove_member/        - Remove member (admin)
    # POST   /api/groups/{id}/update_member_role/   - Update member role (admin)

    # Ledger actions
    # GET    /api/groups/{id}/expenses/             - Group expenses
    # GET    /api/groups/{id}/debts/                - Who owes whom
    # GET    /api/groups/{id}/settlements/          - Group settlements
    # POST   /api/groups/{id}/settlements/          - Record settlement

    # Include router URLs
    path('', include(router.urls)),
]
