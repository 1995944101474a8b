from django.urls import path

from api.v1.fleet.views import FleetExportAPIView, FleetImportAPIView

app_name = "fleet"

urlpatterns = [
    path("export/", FleetExportAPIView.as_view(), name="fleet-export"),
    path("import/", FleetImportAPIView.as_view(), name="fleet-import"),
]
