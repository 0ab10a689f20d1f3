import logging
from rest_framework import generics
from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.core.exceptions import ValidationError
from django.http import HttpResponse
from Accounts.permissions import IsCustomer
from Applications.api_views import get_application_for
from .exceptions import PaymentNotFound
from .models import PaymentOrder
from .serializers import PaymentOrderSerializer, VerifyPaymentSerializer
from . import services

logger = logging.getLogger(__name__)


class CreatePaymentOrderAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    def post(self, request, pk):
        application = get_application_for(request.user, pk)
        return Response(services.create_payment_order(application, request.user))


class VerifyPaymentAPIView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    def post(self, request, pk):
        application = get_application_for(request.user, pk)
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = services.verify_payment(
            application,
            request.user,
            serializer.validated_data["external_payment_id"],
            serializer.validated_data["signature"],
            external_order_id=serializer.validated_data.get("external_order_id") or None,
        )
        order.application.refresh_from_db(fields=["status"])
        return Response({
            "message": "Payment verified and application submitted successfully",
            "application_status": order.application.status,
            "payment": PaymentOrderSerializer(order).data,
        })


class PaymentListAPIView(generics.ListAPIView):
    """Customers: their own payments. Admins: everything."""
    serializer_class = PaymentOrderSerializer
    permission_classes = [IsAuthenticated]

    def get_queryset(self):
        qs = services.visible_payments(self.request.user)
        status_filter = self.request.query_params.get("status")
        if status_filter:
            qs = qs.filter(status=status_filter)
        return qs


class PaymentReceiptAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, pk):
        try:
            order = services.visible_payments(request.user).get(pk=pk)
        except (PaymentOrder.DoesNotExist, ValidationError):
            raise PaymentNotFound()

        receipt = services.build_receipt(order)

        if request.query_params.get("output") == "pdf":
            response = HttpResponse(services.render_receipt_pdf(receipt), content_type="application/pdf")
            response["Content-Disposition"] = f'attachment; filename="receipt-{receipt["receipt_number"]}.pdf"'
            return response

        return Response(receipt)
