from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView
from .api_views import *


app_name = "Accounts"


urlpatterns = [
    path("register/", RegisterCustomerAPIView.as_view(), name="register"),
    path("login/", LoginAPIView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token-refresh"),
    path("user/", CurrentUserView.as_view(), name="current-user"),
    path("employees/", EmployeeListCreateAPIView.as_view(), name="employee-list"),
]
