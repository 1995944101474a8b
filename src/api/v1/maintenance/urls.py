from django.urls import path

from api.v1.maintenance.views import (
    MaintenanceRecordDetailAPIView,
    MaintenanceTaskTypeViewSet,
    OverdueMaintenanceAPIView,
    ProcessRecordAPIView,
)

app_name = "maintenance"

task_type_list = MaintenanceTaskTypeViewSet.as_view({"get": "list", "post": "create"})
task_type_detail = MaintenanceTaskTypeViewSet.as_view({"delete": "destroy"})

urlpatterns = [
    path(
        "records/<int:pk>/",
        MaintenanceRecordDetailAPIView.as_view(),
        name="maintenance-record-detail",
    ),
    path(
        "records/<int:pk>/process/",
        ProcessRecordAPIView.as_view(),
        name="maintenance-record-process",
    ),
    path("overdue/", OverdueMaintenanceAPIView.as_view(), name="maintenance-overdue"),
    path("task-types/", task_type_list, name="task-type-list"),
    path("task-types/<int:pk>/", task_type_detail, name="task-type-detail"),
]
