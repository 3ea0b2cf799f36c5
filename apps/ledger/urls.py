from django.urls import path
from . import views

app_name = 'ledger'

urlpatterns = [
    path('me/', views.my_balance, name='my-balance'),
    path('history/', views.history, name='history'),
    path('users/', views.user_balances, name='user-balances'),
    path('users/<uuid:user_id>/', views.user_balance_detail, name='user-balance-detail'),
    path('users/<uuid:user_id>/verify/', views.verify, name='verify'),
    path('adjust/', views.adjust, name='adjust'),
    path('stats/', views.stats, name='stats'),
]
