from django.urls import path
from . import views

app_name = 'advances'

urlpatterns = [
    path('', views.advance_list_create, name='list-create'),
    path('<uuid:pk>/', views.advance_detail, name='detail'),
    path('<uuid:pk>/transfer/', views.advance_transfer, name='transfer'),
    path('<uuid:pk>/settle/', views.advance_settle, name='settle'),
]
