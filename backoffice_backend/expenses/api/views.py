# expenses/api/views.py

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from core.api.errors import error_response
from core.exceptions import ServiceError
from expenses.api.filters import BaseExpenseFilter
from expenses.api.serializers import (
    BaseExpenseCreateSerializer,
    BaseExpenseSerializer,
    ExpenseCategorySerializer,
)
from expenses.models import BaseExpense, ExpenseCategory
from expenses.services import create_category, create_expense
from permissions.roles import CAP_EXPENSE_WRITE, CAP_MASTERDATA_EDIT, HasCapability
from users.claims import claims_for_request


class ExpenseListView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_EXPENSE_WRITE
    serializer_class = BaseExpenseSerializer
    filterset_class = BaseExpenseFilter

    def get_queryset(self):
        qs = BaseExpense.objects.select_related("base", "category").order_by("-date", "-created_at")
        return claims_for_request(self.request).scope(qs)

    @extend_schema(tags=["expenses"], responses=BaseExpenseSerializer(many=True))
    def get(self, request):
        qs = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(qs)
        return self.get_paginated_response(BaseExpenseSerializer(page, many=True).data)


class ExpenseCreateView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_EXPENSE_WRITE
    serializer_class = BaseExpenseCreateSerializer

    @extend_schema(
        tags=["expenses"],
        request=BaseExpenseCreateSerializer,
        responses={201: BaseExpenseSerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            expense = create_expense(
                **s.validated_data,
                user=request.user,
                claims=claims_for_request(request),
            )
        except ServiceError as exc:
            return error_response(exc)

        return Response(BaseExpenseSerializer(expense).data, status=status.HTTP_201_CREATED)


class ExpenseCategoryView(GenericAPIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capabilities = {"GET": CAP_EXPENSE_WRITE, "POST": CAP_MASTERDATA_EDIT}
    serializer_class = ExpenseCategorySerializer

    @extend_schema(tags=["expenses"], responses=ExpenseCategorySerializer(many=True))
    def get(self, request):
        qs = ExpenseCategory.objects.filter(status=ExpenseCategory.STATUS_ACTIVE).order_by("name")
        return Response(
            {"records": ExpenseCategorySerializer(qs, many=True).data, "total": qs.count()},
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        tags=["expenses"],
        request=ExpenseCategorySerializer,
        responses={201: ExpenseCategorySerializer},
    )
    def post(self, request):
        s = self.get_serializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            category = create_category(name=s.validated_data["name"])
        except ServiceError as exc:
            return error_response(exc)

        return Response(ExpenseCategorySerializer(category).data, status=status.HTTP_201_CREATED)
