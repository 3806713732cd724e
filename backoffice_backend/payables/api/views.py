# payables/api/views.py

"""
======================================================
PATH: payables/api/views.py
======================================================
PAYABLE + PAYMENT API

- payable/list, detail, summary, overdue   admin + base_agent (base scoped)
- payable/update-status                    admin only
- payment/create, list                     admin + base_agent (base scoped)
- payment/delete                           admin only
"""

from django.db.models import Prefetch
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import error_response
from core.api.params import require_id
from core.exceptions import PayableMissing, ServiceError
from core.idempotency import key_from_request
from payables.api.filters import PayableRecordFilter, PaymentRecordFilter
from payables.api.serializers import (
    PayableDetailSerializer,
    PayableRecordSerializer,
    PayableStatusSerializer,
    PaymentCreateSerializer,
    PaymentRecordSerializer,
)
from payables.models import PayableLink, PayableRecord, PaymentRecord
from payables.services.payment_service import create_payment, delete_payment
from payables.services.reports import overdue_payables, payable_summary
from payables.services.status_service import set_payable_status
from permissions.roles import (
    CAP_PAYABLE_SET_STATUS,
    CAP_PAYABLE_VIEW,
    CAP_PAYMENT_CREATE,
    CAP_PAYMENT_DELETE,
    HasCapability,
)
from users.claims import claims_for_request


def _scoped_payables(request):
    qs = PayableRecord.objects.select_related("supplier", "base")
    return claims_for_request(request).scope(qs)


def _links_prefetch():
    return Prefetch(
        "links",
        queryset=PayableLink.objects.select_related(
            "purchase_entry__supplier", "purchase_entry__base"
        ).prefetch_related("purchase_entry__items"),
    )


# =========================================================
# PAYABLES
# =========================================================
class PayableListView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYABLE_VIEW
    serializer_class = PayableRecordSerializer
    filterset_class = PayableRecordFilter

    def get_queryset(self):
        return _scoped_payables(self.request).order_by("-created_at")

    @extend_schema(tags=["payables"], responses=PayableRecordSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(PayableRecordSerializer(page, many=True).data)


class PayableDetailView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYABLE_VIEW
    serializer_class = PayableDetailSerializer

    @extend_schema(
        tags=["payables"],
        parameters=[OpenApiParameter("id", OpenApiTypes.UUID, OpenApiParameter.QUERY)],
        responses=PayableDetailSerializer,
    )
    def get(self, request):
        try:
            payable_id = require_id(request)
            payable = (
                _scoped_payables(request)
                .select_related("purchase_entry__supplier", "purchase_entry__base")
                .prefetch_related(
                    "purchase_entry__items",
                    "payments",
                    _links_prefetch(),
                )
                .filter(id=payable_id)
                .first()
            )
            if payable is None:
                raise PayableMissing()
        except ServiceError as exc:
            return error_response(exc)

        return Response(PayableDetailSerializer(payable).data, status=status.HTTP_200_OK)


class PayableUpdateStatusView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYABLE_SET_STATUS
    serializer_class = PayableStatusSerializer

    @extend_schema(
        tags=["payables"],
        request=PayableStatusSerializer,
        responses={200: PayableRecordSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            payable = set_payable_status(
                payable_id=require_id(request),
                status=s.validated_data["status"],
                user=request.user,
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(PayableRecordSerializer(payable).data, status=status.HTTP_200_OK)


class PayableSummaryView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYABLE_VIEW
    filterset_class = PayableRecordFilter

    def get_queryset(self):
        return _scoped_payables(self.request)

    @extend_schema(tags=["payables"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        return Response(payable_summary(qs), status=status.HTTP_200_OK)


class PayableOverdueView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYABLE_VIEW
    serializer_class = PayableRecordSerializer
    filterset_class = PayableRecordFilter

    def get_queryset(self):
        return _scoped_payables(self.request)

    @extend_schema(tags=["payables"], responses=PayableRecordSerializer(many=True))
    def get(self, request):
        qs = overdue_payables(self.filter_queryset(self.get_queryset()))
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(PayableRecordSerializer(page, many=True).data)


# =========================================================
# PAYMENTS
# =========================================================
class PaymentCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYMENT_CREATE
    serializer_class = PaymentCreateSerializer

    @extend_schema(
        tags=["payments"],
        request=PaymentCreateSerializer,
        parameters=[
            OpenApiParameter("Idempotency-Key", OpenApiTypes.STR, OpenApiParameter.HEADER),
        ],
        responses={201: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)
        data = s.validated_data

        try:
            result = create_payment(
                payable_id=data["payable_id"],
                amount=data["amount"],
                payment_date=data.get("payment_date"),
                payment_method=data.get("payment_method", ""),
                reference_number=data.get("reference", ""),
                notes=data.get("note", ""),
                user=request.user if getattr(request.user, "pk", None) else None,
                claims=claims_for_request(request),
                idempotency_key=key_from_request(request),
            )
        except ServiceError as exc:
            return error_response(exc)

        payable = PayableRecord.objects.select_related("supplier", "base").get(
            id=result.payment.payable_id
        )
        return Response(
            {
                "payment": PaymentRecordSerializer(result.payment).data,
                "payable": PayableRecordSerializer(payable).data,
            },
            status=status.HTTP_201_CREATED,
        )


class PaymentListView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYABLE_VIEW
    serializer_class = PaymentRecordSerializer
    filterset_class = PaymentRecordFilter

    def get_queryset(self):
        qs = PaymentRecord.objects.select_related("payable").order_by("-payment_date", "-created_at")
        return claims_for_request(self.request).scope(qs, "payable__base_id")

    @extend_schema(tags=["payments"], responses=PaymentRecordSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(PaymentRecordSerializer(page, many=True).data)


class PaymentDeleteView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYMENT_DELETE

    @extend_schema(
        tags=["payments"],
        parameters=[OpenApiParameter("id", OpenApiTypes.UUID, OpenApiParameter.QUERY)],
        request=None,
        responses={200: PayableRecordSerializer},
    )
    def delete(self, request):
        try:
            payable = delete_payment(payment_id=require_id(request))
        except ServiceError as exc:
            return error_response(exc)

        return Response(PayableRecordSerializer(payable).data, status=status.HTTP_200_OK)
