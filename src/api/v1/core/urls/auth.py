from django.urls import path

from api.v1.core.views.auth import LoginAPIView, RefreshAPIView, TokenVerifyAPIView

app_name = "auth"

urlpatterns = [
    path("token/", LoginAPIView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", RefreshAPIView.as_view(), name="token_refresh"),
    path("token/verify/", TokenVerifyAPIView.as_view(), name="token_verify"),
]
