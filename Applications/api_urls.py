from django.urls import path
from . import api_views


app_name = "Applications"


urlpatterns = [
    path("countries/", api_views.CountryListAPIView.as_view(), name="country-list"),
    path("countries/<uuid:country_id>/visa-types/", api_views.VisaTypeListAPIView.as_view(), name="visa-type-list"),
    path("applications/", api_views.VisaApplicationListCreateAPIView.as_view(), name="application-list"),
    path("applications/bulk-action/", api_views.BulkActionAPIView.as_view(), name="application-bulk-action"),
    path("applications/<uuid:pk>/", api_views.VisaApplicationDetailAPIView.as_view(), name="application-detail"),
    path("applications/<uuid:pk>/history/", api_views.ApplicationHistoryAPIView.as_view(), name="application-history"),
    path("applications/<uuid:pk>/submit/", api_views.SubmitApplicationAPIView.as_view(), name="application-submit"),
    path("applications/<uuid:pk>/status/", api_views.ApplicationStatusAPIView.as_view(), name="application-status"),
    path("applications/<uuid:pk>/assign/", api_views.AssignApplicationAPIView.as_view(), name="application-assign"),
]
