from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'expenses'

router = DefaultRouter()
router.register(r'', views.ExpenseViewSet, basename='expense')

urlpatterns = [
    # GET    /api/expenses/                  - List expenses (filters: category, group_id, start_date, end_date)
    # POST   /api/expenses/                  - Create expense
    # GET    /api/expenses/{id}/             - Get expense
    # PATCH  /api/expenses/{id}/             - Update title/receipt (payer)
    # DELETE /api/expenses/{id}/             - Delete expense (payer)
    # PATCH  /api/expenses/{id}/mark_paid/   - Mark a share as paid
    # GET    /api/expenses/debt_summary/     - Debt summary for current user
    # GET    /api/expenses/export/           - CSV export
    path('', include(router.urls)),
]
