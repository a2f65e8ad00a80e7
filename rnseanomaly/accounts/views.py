import logging
from django.contrib.auth import authenticate, get_user_model
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from rnseanomaly.accounts.serializers import (
    CredentialsSerializer,
    SessionSerializer,
    SignupSerializer,
)

logger = logging.getLogger(__name__)


def _session_payload(user) -> dict:
    token, _ = Token.objects.get_or_create(user=user)
    return SessionSerializer({
        "session_token": token.key,
        "email": user.email,
        "user_id": user.pk,
    }).data


class SignupView(APIView):
    """
    Create an account and return a session token
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Sign up",
        request=SignupSerializer,
        responses={201: SessionSerializer, 400: {"type": "object", "properties": {"detail": {"type": "string"}}}}
    )
    def post(self, request):
        serializer = SignupSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"detail": _first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        email = serializer.validated_data["email"]
        user = get_user_model().objects.create_user(
            username=email,
            email=email,
            password=serializer.validated_data["password"],
        )
        logger.info(f"Created account {user.pk}")
        return Response(_session_payload(user), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """
    Exchange email and password for the account's session token
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    @extend_schema(
        summary="Log in",
        request=CredentialsSerializer,
        responses={200: SessionSerializer, 401: {"type": "object", "properties": {"detail": {"type": "string"}}}}
    )
    def post(self, request):
        serializer = CredentialsSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({"detail": _first_error(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        user = authenticate(
            request,
            username=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            return Response({"detail": "Invalid email or password"}, status=status.HTTP_401_UNAUTHORIZED)

        return Response(_session_payload(user))


def _first_error(errors) -> str:
    """Flatten DRF validation errors into the single message the client shows."""
    for field, messages in errors.items():
        message = messages[0] if isinstance(messages, list) else messages
        return f"{field}: {message}"
    return "Invalid request"
