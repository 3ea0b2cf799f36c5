from django.urls import path
from . import views

app_name = 'invoices'

urlpatterns = [
    path('', views.invoice_list_create, name='list-create'),
    path('review/', views.invoice_review_list, name='review-list'),

    path('deletion-requests/', views.deletion_request_list, name='deletion-request-list'),
    path('deletion-requests/mine/', views.deletion_request_mine, name='deletion-request-mine'),
    path('deletion-requests/<uuid:pk>/', views.deletion_request_cancel, name='deletion-request-cancel'),
    path('deletion-requests/<uuid:pk>/review/', views.deletion_request_review, name='deletion-request-review'),

    path('<uuid:pk>/', views.InvoiceDetailView.as_view(), name='detail'),
    path('<uuid:pk>/image/', views.invoice_image, name='image'),
    path('<uuid:pk>/claim/', views.invoice_claim, name='claim'),
    path('<uuid:pk>/heartbeat/', views.invoice_heartbeat, name='heartbeat'),
    path('<uuid:pk>/release/', views.invoice_release, name='release'),
    path('<uuid:pk>/history/', views.invoice_history, name='history'),
    path('<uuid:pk>/review/', views.invoice_review, name='review'),
    path('<uuid:pk>/mark-transferred/', views.invoice_mark_transferred, name='mark-transferred'),
    path('<uuid:pk>/deletion-request/', views.deletion_request_create, name='deletion-request-create'),
]
