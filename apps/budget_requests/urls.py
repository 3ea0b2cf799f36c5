from django.urls import path
from . import views

app_name = 'budget_requests'

urlpatterns = [
    path('', views.budget_request_list_create, name='list-create'),
    path('review/', views.budget_request_review_list, name='review-list'),
    path('pending-count/', views.pending_count, name='pending-count'),
    path('bulk-delete/', views.bulk_delete, name='bulk-delete'),
    path('<uuid:pk>/', views.budget_request_detail, name='detail'),
    path('<uuid:pk>/review/', views.review, name='review'),
    path('<uuid:pk>/transfer/', views.transfer, name='transfer'),
    path('<uuid:pk>/settle/', views.settle, name='settle'),
    path('<uuid:pk>/invoices/', views.related_invoices, name='related-invoices'),
]
