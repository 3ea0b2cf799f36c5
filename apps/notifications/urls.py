from django.urls import path
from . import views

app_name = 'notifications'

urlpatterns = [
    path('', views.notification_list, name='list'),
    path('unread-count/', views.unread_count, name='unread-count'),
    path('read-all/', views.notification_mark_all_read, name='mark-all-read'),
    path('<uuid:pk>/read/', views.notification_mark_read, name='mark-read'),
]
