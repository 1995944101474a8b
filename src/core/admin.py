from unfold.admin import ModelAdmin


class BaseModelAdmin(ModelAdmin):
    readonly_fields = ("created_at", "updated_at")
    list_per_page = 50
