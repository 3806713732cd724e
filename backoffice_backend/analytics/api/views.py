# analytics/api/views.py

"""
======================================================
PATH: analytics/api/views.py
======================================================
ROLLUPS + ANALYTICS + RATES

- admin/refresh-monthly          admin only, ?month=YYYY-MM (default current)
- admin/refresh-monthly-range    admin only, ?start=&end= (inclusive)
- analytics/supplier-spend       admin + base_agent (base scoped)
- analytics/base-expense         admin + base_agent (base scoped)
- rate/list                      any authenticated user
"""

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from analytics.api.serializers import ExchangeRateSerializer
from analytics.models import ExchangeRate
from analytics.services.reports import base_expense, supplier_spend
from analytics.services.rollups import recompute_monthly, recompute_range
from core.api.errors import error_response
from core.api.params import parse_date, parse_month
from core.exceptions import ServiceError
from permissions.roles import CAP_ANALYTICS_VIEW, CAP_ROLLUP_REFRESH, HasCapability
from users.claims import claims_for_request

DATE_RANGE_PARAMS = [
    OpenApiParameter("start_date", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=True),
    OpenApiParameter("end_date", OpenApiTypes.DATE, OpenApiParameter.QUERY, required=True),
]


# =========================================================
# ROLLUP REFRESH (ADMIN)
# =========================================================
class RefreshMonthlyView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ROLLUP_REFRESH

    @extend_schema(
        tags=["admin"],
        parameters=[OpenApiParameter("month", OpenApiTypes.STR, OpenApiParameter.QUERY)],
        request=None,
        responses={200: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        try:
            result = recompute_monthly(parse_month(request.query_params.get("month")))
        except ServiceError as exc:
            return error_response(exc)

        return Response(result, status=status.HTTP_200_OK)


class RefreshMonthlyRangeView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ROLLUP_REFRESH

    @extend_schema(
        tags=["admin"],
        parameters=[
            OpenApiParameter("start", OpenApiTypes.STR, OpenApiParameter.QUERY),
            OpenApiParameter("end", OpenApiTypes.STR, OpenApiParameter.QUERY),
        ],
        request=None,
        responses={200: OpenApiTypes.OBJECT},
    )
    def post(self, request):
        try:
            months = recompute_range(
                parse_month(request.query_params.get("start"), field="start"),
                parse_month(request.query_params.get("end"), field="end"),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response({"months": months, "count": len(months)}, status=status.HTTP_200_OK)


# =========================================================
# ANALYTICS
# =========================================================
class SupplierSpendView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ANALYTICS_VIEW

    @extend_schema(tags=["analytics"], parameters=DATE_RANGE_PARAMS, responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        try:
            data = supplier_spend(
                start=parse_date(request.query_params.get("start_date"), field="start_date"),
                end=parse_date(request.query_params.get("end_date"), field="end_date"),
                base_ids=claims_for_request(request).allowed_base_ids(),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(data, status=status.HTTP_200_OK)


class BaseExpenseView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_ANALYTICS_VIEW

    @extend_schema(tags=["analytics"], parameters=DATE_RANGE_PARAMS, responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        try:
            data = base_expense(
                start=parse_date(request.query_params.get("start_date"), field="start_date"),
                end=parse_date(request.query_params.get("end_date"), field="end_date"),
                base_ids=claims_for_request(request).allowed_base_ids(),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(data, status=status.HTTP_200_OK)


# =========================================================
# RATES
# =========================================================
class ExchangeRateListView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = ExchangeRateSerializer

    @extend_schema(tags=["rates"], responses=ExchangeRateSerializer(many=True))
    def get(self, request):
        qs = ExchangeRate.objects.order_by("currency")
        return Response(
            {"records": ExchangeRateSerializer(qs, many=True).data, "total": qs.count()},
            status=status.HTTP_200_OK,
        )
