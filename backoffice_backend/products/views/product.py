# products/views/product.py

"""
PRODUCT CATALOG VIEWS

Read endpoints are open to any operator; writes need masterdata.edit (admin).
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import error_response
from core.api.params import parse_uuid
from core.exceptions import BadRequest, ServiceError
from permissions.roles import CAP_MASTERDATA_EDIT, HasCapability
from products.models import Product, ProductPurchaseParam, ProductUnitSpec
from products.serializers.product import (
    ProductPurchaseParamSerializer,
    ProductSerializer,
    ProductUnitSpecSerializer,
    PurchaseParamUpsertSerializer,
    SupplierPriceCreateSerializer,
    SupplierProductPriceSerializer,
    UnitSpecUpsertSerializer,
)
from products.services.catalog import (
    record_supplier_price,
    upsert_purchase_param,
    upsert_unit_spec,
)


def _product_id_param(request):
    raw = (request.query_params.get("product_id") or "").strip()
    if not raw:
        raise BadRequest("product_id is required")
    return parse_uuid(raw, field="product_id")


class ProductListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductSerializer

    @extend_schema(tags=["products"], responses=ProductSerializer(many=True))
    def get(self, request):
        qs = Product.objects.select_related("supplier").order_by("name")

        name = (request.query_params.get("name") or "").strip()
        if name:
            qs = qs.filter(name__icontains=name)

        supplier_id = (request.query_params.get("supplier_id") or "").strip()
        if supplier_id:
            try:
                qs = qs.filter(supplier_id=parse_uuid(supplier_id, field="supplier_id"))
            except ServiceError as exc:
                return error_response(exc)

        page = self.paginate_queryset(qs)
        return self.get_paginated_response(ProductSerializer(page, many=True).data)


class ProductUnitSpecListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductUnitSpecSerializer

    @extend_schema(tags=["products"], responses=ProductUnitSpecSerializer(many=True))
    def get(self, request):
        try:
            product_id = _product_id_param(request)
        except ServiceError as exc:
            return error_response(exc)

        qs = ProductUnitSpec.objects.filter(product_id=product_id).order_by("unit")
        return Response(ProductUnitSpecSerializer(qs, many=True).data, status=status.HTTP_200_OK)


class ProductUnitSpecUpsertView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_MASTERDATA_EDIT
    serializer_class = UnitSpecUpsertSerializer

    @extend_schema(
        tags=["products"],
        request=UnitSpecUpsertSerializer,
        responses={200: ProductUnitSpecSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            spec = upsert_unit_spec(
                product_id=data["product_id"],
                unit=data["unit"],
                factor_to_base=data["factor_to_base"],
                kind=data.get("kind", ""),
                is_default=data.get("is_default", False),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(ProductUnitSpecSerializer(spec).data, status=status.HTTP_200_OK)


class ProductPurchaseParamView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ProductPurchaseParamSerializer

    @extend_schema(tags=["products"], responses=ProductPurchaseParamSerializer)
    def get(self, request):
        try:
            product_id = _product_id_param(request)
        except ServiceError as exc:
            return error_response(exc)

        param = ProductPurchaseParam.objects.filter(product_id=product_id).first()
        if param is None:
            return Response(
                {"error": "not-found", "reason": "not-found", "detail": "No purchase param"},
                status=status.HTTP_404_NOT_FOUND,
            )
        return Response(ProductPurchaseParamSerializer(param).data, status=status.HTTP_200_OK)


class ProductPurchaseParamUpsertView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_MASTERDATA_EDIT
    serializer_class = PurchaseParamUpsertSerializer

    @extend_schema(
        tags=["products"],
        request=PurchaseParamUpsertSerializer,
        responses={200: ProductPurchaseParamSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            param = upsert_purchase_param(
                product_id=data["product_id"],
                unit=data["unit"],
                factor_to_base=data["factor_to_base"],
                purchase_price=data.get("purchase_price"),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(ProductPurchaseParamSerializer(param).data, status=status.HTTP_200_OK)


class SupplierPriceCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_MASTERDATA_EDIT
    serializer_class = SupplierPriceCreateSerializer

    @extend_schema(
        tags=["products"],
        request=SupplierPriceCreateSerializer,
        responses={201: SupplierProductPriceSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            row = record_supplier_price(
                supplier_id=data["supplier_id"],
                product_id=data["product_id"],
                price=data["price"],
                effective_from=data["effective_from"],
                currency=data.get("currency", ""),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(SupplierProductPriceSerializer(row).data, status=status.HTTP_201_CREATED)
