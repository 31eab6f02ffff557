from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'ledger'

router = DefaultRouter()
router.register(r'', views.SettlementViewSet, basename='settlement')

urlpatterns = [
    # GET  /api/settlements/                 - Settlements of the current user
    # POST /api/settlements/{id}/complete/   - Complete a settlement
    path('', include(router.urls)),
]
