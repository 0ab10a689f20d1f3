from django.urls import path
from . import api_views


app_name = "Finance"


urlpatterns = [
    path("applications/<uuid:pk>/create-payment/", api_views.CreatePaymentOrderAPIView.as_view(), name="create-payment"),
    path("applications/<uuid:pk>/verify-payment/", api_views.VerifyPaymentAPIView.as_view(), name="verify-payment"),
    path("payments/", api_views.PaymentListAPIView.as_view(), name="payment-list"),
    path("payments/<uuid:pk>/receipt/", api_views.PaymentReceiptAPIView.as_view(), name="payment-receipt"),
]
