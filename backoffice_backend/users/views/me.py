from drf_spectacular.utils import extend_schema
from rest_framework import serializers
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.claims import claims_for_request

# ---------------------------
# SERIALIZER
# ---------------------------


class MeSerializer(serializers.Serializer):
    uid = serializers.CharField()
    username = serializers.CharField()
    role = serializers.CharField()
    bases = serializers.ListField(child=serializers.CharField())


# ---------------------------
# VIEW
# ---------------------------


class MeView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = MeSerializer

    @extend_schema(
        tags=["auth"],
        responses={200: MeSerializer},
        description="Claims of the current operator",
    )
    def get(self, request):
        claims = claims_for_request(request)

        return Response(
            {
                "uid": claims.uid,
                "username": claims.username,
                "role": claims.role,
                "bases": list(claims.bases),
            }
        )
