from django.urls import path, include
from rest_framework.routers import SimpleRouter
from . import views

app_name = 'companies'

router = SimpleRouter()
router.register(r'', views.CompanyViewSet, basename='company')

urlpatterns = [
    path('permissions/', views.permission_matrix, name='permission-matrix'),
    path('permissions/<uuid:user_id>/', views.user_permissions, name='user-permissions'),
    path('permissions/<uuid:user_id>/grant/', views.grant_permission, name='grant-permission'),
    path('permissions/<uuid:user_id>/revoke/', views.revoke_permission, name='revoke-permission'),
    path('', include(router.urls)),
]
