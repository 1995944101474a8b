from django.db import migrations

DEFAULT_TASK_TYPES = (
    "Rear tyre replacement",
    "Front tyre replacement",
    "Inner tube replacement",
    "Chain replacement",
    "Brake adjustment",
    "Gear adjustment",
)


def create_default_task_types(apps, schema_editor):
    MaintenanceTaskType = apps.get_model("maintenance", "MaintenanceTaskType")
    for name in DEFAULT_TASK_TYPES:
        MaintenanceTaskType.objects.get_or_create(name=name)


def remove_default_task_types(apps, schema_editor):
    MaintenanceTaskType = apps.get_model("maintenance", "MaintenanceTaskType")
    MaintenanceTaskType.objects.filter(name__in=DEFAULT_TASK_TYPES).delete()


class Migration(migrations.Migration):
    dependencies = [
        ("maintenance", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(create_default_task_types, remove_default_task_types),
    ]
