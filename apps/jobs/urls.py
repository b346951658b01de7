from django.urls import path
from .views import (
    JobCreateView, JobListView, JobDetailView, CustomerDashboardView,
    WorkerDashboardView, JobCompleteView
)

urlpatterns = [
    path('jobs/create/', JobCreateView.as_view(), name='job_create'),
    path('jobs/', JobListView.as_view(), name='job_list'),
    path('jobs/<int:pk>/details/', JobDetailView.as_view(), name='job_details'),
    path('jobs/<int:pk>/complete/', JobCompleteView.as_view(), name='job_complete'),
    path('customer/dashboard/', CustomerDashboardView.as_view(), name='customer_dashboard'),
    path('worker/dashboard/', WorkerDashboardView.as_view(), name='worker_dashboard'),
]
