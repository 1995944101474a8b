from config.urls.base import urlpatterns

__all__ = ("urlpatterns",)
