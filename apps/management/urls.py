from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

router = DefaultRouter()
router.register(r'users', views.ManagementUserViewSet, basename='management-users')
router.register(r'jobs', views.ManagementJobViewSet, basename='management-jobs')
router.register(r'payments', views.ManagementPaymentViewSet, basename='management-payments')
router.register(r'management-logs', views.ManagementLogViewSet, basename='management-logs')

urlpatterns = [
    path('dashboard/', views.DashboardView.as_view(), name='management_dashboard'),
    path('', include(router.urls)),
]
