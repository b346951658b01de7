from django.urls import path
from .views import AuthSignupView, AuthLoginView, LogoutView, UserProfileView, WorkerListView

urlpatterns = [
    # Authentication
    path('auth/signup/', AuthSignupView.as_view(), name='auth_signup'),
    path('auth/login/', AuthLoginView.as_view(), name='auth_login'),
    path('auth/logout/', LogoutView.as_view(), name='auth_logout'),

    # Profile Management
    path('profile/', UserProfileView.as_view(), name='user_profile'),

    # Directory
    path('workers/', WorkerListView.as_view(), name='worker_list'),
]
