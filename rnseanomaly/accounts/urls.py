from django.urls import path
from . import views

urlpatterns = [
    path('api/auth/signup', views.SignupView.as_view(), name='signup'),
    path('api/auth/login', views.LoginView.as_view(), name='login'),
]
