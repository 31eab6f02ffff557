from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'budgets'

router = DefaultRouter()
router.register(r'', views.BudgetViewSet, basename='budget')

urlpatterns = [
    # GET    /api/budgets/                          - List budgets (?period=)
    # POST   /api/budgets/                          - Create budget
    # GET    /api/budgets/{id}/                     - Get budget
    # PATCH  /api/budgets/{id}/                     - Update limit/alerts
    # DELETE /api/budgets/{id}/                     - Delete budget
    # GET    /api/budgets/vs_actual/?period=        - Budget vs actual
    # GET    /api/budgets/alerts/?period=           - Budgets at/over threshold
    # GET    /api/budgets/monthly_summary/?period=  - Month totals
    path('', include(router.urls)),
]
