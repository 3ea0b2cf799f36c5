from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # Session
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('user/', views.get_current_user, name='current-user'),
    path('password/', views.password_change, name='password-change'),

    # User directory
    path('users/', views.user_list_create, name='user-list-create'),
    path('users/<uuid:pk>/', views.user_update, name='user-update'),
    path('users/<uuid:pk>/reset-password/', views.user_password_reset, name='user-password-reset'),
]
