# bases/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from bases.api.serializers import BaseCreateSerializer, BaseSerializer
from bases.models import Base
from bases.services import create_base
from core.api.errors import error_response
from core.exceptions import ServiceError
from permissions.roles import CAP_MASTERDATA_EDIT, HasCapability
from users.claims import claims_for_request


class BaseListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = BaseSerializer

    @extend_schema(tags=["bases"], responses=BaseSerializer(many=True))
    def get(self, request):
        claims = claims_for_request(request)
        qs = claims.scope(Base.objects.all(), "id").order_by("name")

        status_filter = (request.query_params.get("status") or "").strip()
        if status_filter:
            qs = qs.filter(status=status_filter)

        return Response(
            {"records": BaseSerializer(qs, many=True).data, "total": qs.count()},
            status=status.HTTP_200_OK,
        )


class BaseCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_MASTERDATA_EDIT
    serializer_class = BaseCreateSerializer

    @extend_schema(
        tags=["bases"],
        request=BaseCreateSerializer,
        responses={201: BaseSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            base = create_base(**s.validated_data)
        except ServiceError as exc:
            return error_response(exc)

        return Response(BaseSerializer(base).data, status=status.HTTP_201_CREATED)
