from django.dispatch import Signal

# Sent once a gateway payment has been verified and the order marked paid.
# kwargs: order (PaymentOrder), application (VisaApplication), user (the payer)
payment_verified = Signal()
