# suppliers/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import error_response
from core.api.params import require_id
from core.exceptions import ServiceError
from permissions.roles import CAP_MASTERDATA_EDIT, HasCapability
from suppliers.api.serializers import SupplierSerializer, SupplierWriteSerializer
from suppliers.models import Supplier
from suppliers.services import create_supplier, update_supplier


class SupplierListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = SupplierSerializer

    @extend_schema(tags=["suppliers"], responses=SupplierSerializer(many=True))
    def get(self, request):
        qs = Supplier.objects.all().order_by("name")

        name = (request.query_params.get("name") or "").strip()
        if name:
            qs = qs.filter(name__icontains=name)

        settlement_type = (request.query_params.get("settlement_type") or "").strip()
        if settlement_type:
            qs = qs.filter(settlement_type=settlement_type)

        page = self.paginate_queryset(qs)
        return self.get_paginated_response(SupplierSerializer(page, many=True).data)


class SupplierCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_MASTERDATA_EDIT
    serializer_class = SupplierWriteSerializer

    @extend_schema(
        tags=["suppliers"],
        request=SupplierWriteSerializer,
        responses={201: SupplierSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            supplier = create_supplier(**s.validated_data)
        except ServiceError as exc:
            return error_response(exc)

        return Response(SupplierSerializer(supplier).data, status=status.HTTP_201_CREATED)


class SupplierUpdateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_MASTERDATA_EDIT
    serializer_class = SupplierWriteSerializer

    @extend_schema(
        tags=["suppliers"],
        request=SupplierWriteSerializer,
        responses={200: SupplierSerializer},
    )
    def put(self, request):
        s = self.get_serializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)

        try:
            supplier = update_supplier(supplier_id=require_id(request), **s.validated_data)
        except ServiceError as exc:
            return error_response(exc)

        return Response(SupplierSerializer(supplier).data, status=status.HTTP_200_OK)
