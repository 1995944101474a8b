from django.db import models
from django.utils.translation import gettext_lazy as _


class BikeStatus(models.TextChoices):
    AVAILABLE = "available", _("Available")
    RENTED = "rented", _("Rented")
    IN_MAINTENANCE = "in_maintenance", _("In Maintenance")


class BikeSize(models.TextChoices):
    S = "S", _("S")
    M = "M", _("M")
    L = "L", _("L")
    XL = "XL", _("XL")


class MaintenanceStatus(models.TextChoices):
    PENDING = "pending", _("Pending")
    RESOLVED = "resolved", _("Resolved")
