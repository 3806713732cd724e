import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from drf_spectacular.utils import extend_schema
from rest_framework import serializers, status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.api.errors import error_response
from core.exceptions import ServiceError
from users.services.seed import seed_operator
from users.tokens import issue_token

logger = logging.getLogger("auth")

User = get_user_model()

# ---------------------------
# SERIALIZERS (LOCAL, SIMPLE)
# ---------------------------


class LoginSerializer(serializers.Serializer):
    # the web front-end posts `name`; `username` is accepted too
    name = serializers.CharField(required=False, allow_blank=True)
    username = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        ident = (attrs.get("username") or attrs.get("name") or "").strip()
        if not ident:
            raise serializers.ValidationError({"name": "name is required"})
        attrs["identifier"] = ident
        return attrs


class LoginResponseSerializer(serializers.Serializer):
    token = serializers.CharField()
    role = serializers.CharField()
    bases = serializers.ListField(child=serializers.CharField())
    user_id = serializers.UUIDField()


class SeedAdminSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True)
    password = serializers.CharField(required=False, allow_blank=True, write_only=True)
    role = serializers.CharField(required=False, allow_blank=True)
    base_names = serializers.ListField(
        child=serializers.CharField(allow_blank=True), required=False
    )


# ---------------------------
# VIEWS
# ---------------------------


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = LoginSerializer

    @extend_schema(
        tags=["auth"],
        request=LoginSerializer,
        responses={200: LoginResponseSerializer},
        description="Authenticate an operator and issue a bearer token",
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        ident = serializer.validated_data["identifier"]
        password = serializer.validated_data["password"]

        user = User.objects.filter(username=ident).first()
        if not user or not user.is_active or not user.check_password(password):
            logger.info("Login rejected", extra={"username": ident})
            return Response(
                {"error": "unauthorised", "reason": "invalid-credentials", "detail": "Invalid credentials"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        return Response(
            {
                "token": issue_token(user),
                "role": user.role,
                "bases": user.base_names(),
                "user_id": user.id,
            }
        )


class SeedAdminView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []
    serializer_class = SeedAdminSerializer

    @extend_schema(
        tags=["auth"],
        request=SeedAdminSerializer,
        responses={200: dict},
        description="DEV ONLY: upsert an operator and map bases (DEV_SEED_ENABLED)",
    )
    def post(self, request):
        if not getattr(settings, "DEV_SEED_ENABLED", False):
            return Response(
                {"error": "forbidden", "reason": "seed-disabled", "detail": "seed disabled"},
                status=status.HTTP_403_FORBIDDEN,
            )

        s = SeedAdminSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            user, bases = seed_operator(
                username=data.get("name", ""),
                password=data.get("password", ""),
                role=data.get("role", ""),
                base_names=data.get("base_names") or [],
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(
            {"user_id": user.id, "role": user.role, "bases": bases, "message": "seed ok"},
            status=status.HTTP_200_OK,
        )
