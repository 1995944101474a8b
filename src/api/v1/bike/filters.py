from django_filters import rest_framework as filters

from bike.models import Bike
from bike.services import BikeService
from core.utils.constants import BikeSize, BikeStatus


class BikeFilterSet(filters.FilterSet):
    q = filters.CharFilter()
    status = filters.ChoiceFilter(choices=BikeStatus.choices)
    size = filters.ChoiceFilter(choices=BikeSize.choices)
    brand = filters.CharFilter()
    model = filters.CharFilter()
    available_from = filters.DateFilter()
    available_to = filters.DateFilter()

    class Meta:
        model = Bike
        fields = (
            "q",
            "status",
            "size",
            "brand",
            "model",
            "available_from",
            "available_to",
        )

    def filter_queryset(self, queryset):
        # The availability window overrides the status filter, so the whole
        # combination is resolved in one place.
        data = self.form.cleaned_data
        return BikeService.filter_bikes(
            queryset=queryset,
            q=data.get("q"),
            status=data.get("status"),
            size=data.get("size"),
            brand=data.get("brand"),
            model=data.get("model"),
            available_from=data.get("available_from"),
            available_to=data.get("available_to"),
        )
