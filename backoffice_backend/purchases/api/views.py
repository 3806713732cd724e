# purchases/api/views.py

"""
PURCHASE API

Writes go through purchases.services.purchase_service; every view converts
ServiceError into the shared error body. base_agent callers are confined to
their bases (list filtered, mutations rejected with base-scope).
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import error_response
from core.api.params import parse_date, parse_uuid, require_id
from core.exceptions import BadRequest, ServiceError, SupplierMissing
from core.idempotency import key_from_request
from permissions.roles import (
    CAP_PURCHASE_BATCH_DELETE,
    CAP_PURCHASE_WRITE,
    HasCapability,
)
from purchases.api.filters import PurchaseEntryFilter
from purchases.api.serializers import (
    BatchDeleteSerializer,
    PurchaseEntrySerializer,
    PurchaseWriteSerializer,
)
from purchases.models import PurchaseEntry
from purchases.services.purchase_service import (
    batch_delete_purchases,
    create_purchase,
    delete_purchase,
    update_purchase,
)
from purchases.services.suggestions import product_suggestions, suggest_price
from suppliers.models import Supplier
from users.claims import claims_for_request

IDEMPOTENCY_HEADER = OpenApiParameter(
    name="Idempotency-Key",
    location=OpenApiParameter.HEADER,
    required=False,
    type=str,
)


def _supplier_param(request) -> Supplier:
    supplier_id = require_id(request, field="supplier_id")
    supplier = Supplier.objects.filter(id=supplier_id).first()
    if supplier is None:
        raise SupplierMissing()
    return supplier


class PurchaseCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASE_WRITE
    serializer_class = PurchaseWriteSerializer

    @extend_schema(
        tags=["purchases"],
        request=PurchaseWriteSerializer,
        parameters=[IDEMPOTENCY_HEADER],
        responses={201: PurchaseEntrySerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = create_purchase(
                data=s.validated_data,
                user=request.user,
                claims=claims_for_request(request),
                idempotency_key=key_from_request(request),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(PurchaseEntrySerializer(result.purchase).data, status=status.HTTP_201_CREATED)


class PurchaseListView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASE_WRITE
    serializer_class = PurchaseEntrySerializer
    filterset_class = PurchaseEntryFilter

    def get_queryset(self):
        qs = (
            PurchaseEntry.objects.select_related("supplier", "base")
            .prefetch_related("items")
            .order_by("-purchase_date", "-created_at")
        )
        return claims_for_request(self.request).scope(qs)

    @extend_schema(tags=["purchases"], responses=PurchaseEntrySerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(PurchaseEntrySerializer(page, many=True).data)


class PurchaseUpdateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASE_WRITE
    serializer_class = PurchaseWriteSerializer

    @extend_schema(
        tags=["purchases"],
        request=PurchaseWriteSerializer,
        responses={200: PurchaseEntrySerializer},
    )
    def put(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            purchase = update_purchase(
                purchase_id=require_id(request),
                data=s.validated_data,
                user=request.user,
                claims=claims_for_request(request),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(PurchaseEntrySerializer(purchase).data, status=status.HTTP_200_OK)


class PurchaseDeleteView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASE_WRITE

    @extend_schema(tags=["purchases"], request=None, responses={200: OpenApiTypes.OBJECT})
    def delete(self, request):
        try:
            purchase_id = require_id(request)
            delete_purchase(purchase_id=purchase_id, claims=claims_for_request(request))
        except ServiceError as exc:
            return error_response(exc)

        return Response({"deleted": str(purchase_id)}, status=status.HTTP_200_OK)


class PurchaseBatchDeleteView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASE_BATCH_DELETE
    serializer_class = BatchDeleteSerializer

    @extend_schema(
        tags=["purchases"],
        request=BatchDeleteSerializer,
        responses={200: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            count = batch_delete_purchases(
                purchase_ids=s.validated_data["ids"],
                claims=claims_for_request(request),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response({"deleted_count": count}, status=status.HTTP_200_OK)


class PurchaseSuggestPriceView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASE_WRITE

    @extend_schema(tags=["purchases"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        params = request.query_params
        try:
            supplier = _supplier_param(request)
            product_id = (params.get("product_id") or "").strip()
            product_name = (params.get("product_name") or "").strip()
            if not product_id and not product_name:
                raise BadRequest("product_id or product_name is required")

            result = suggest_price(
                supplier=supplier,
                product_id=parse_uuid(product_id, field="product_id") if product_id else None,
                product_name=product_name,
                purchase_date=parse_date(params.get("purchase_date"), field="purchase_date"),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class PurchaseProductSuggestionsView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PURCHASE_WRITE

    @extend_schema(tags=["purchases"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        try:
            supplier = _supplier_param(request)
            limit = int(request.query_params.get("limit") or 20)
        except ValueError:
            return error_response(BadRequest("limit must be an integer"))
        except ServiceError as exc:
            return error_response(exc)

        records = product_suggestions(
            supplier=supplier,
            q=request.query_params.get("q") or "",
            limit=min(max(limit, 1), 100),
        )
        return Response({"records": records, "total": len(records)}, status=status.HTTP_200_OK)
