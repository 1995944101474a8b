from drf_spectacular.utils import extend_schema
from rest_framework_simplejwt.serializers import TokenVerifySerializer
from rest_framework_simplejwt.views import (
    TokenObtainPairView,
    TokenRefreshView,
    TokenVerifyView,
)

from core.api.views import BaseAPIView


@extend_schema(
    tags=["Auth"],
    summary="Login with credentials and get JWT tokens",
    description="Authenticates user credentials and returns JWT access and refresh tokens.",
)
class LoginAPIView(TokenObtainPairView, BaseAPIView):
    pass


@extend_schema(
    tags=["Auth"],
    summary="Refresh JWT access token",
    description="Validates a refresh token and issues a new access token.",
)
class RefreshAPIView(TokenRefreshView, BaseAPIView):
    pass


@extend_schema(
    tags=["Auth"],
    summary="Verify JWT token",
    description="Checks whether the provided JWT token is valid and not expired.",
)
class TokenVerifyAPIView(TokenVerifyView, BaseAPIView):
    def post(self, request, *args, **kwargs):
        response = super().post(request, *args, **kwargs)

        if response.status_code == 200:
            serializer = TokenVerifySerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            response.data = {"detail": "Token is valid"}

        return response
