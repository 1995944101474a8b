from rest_framework import generics, mixins, status
from rest_framework.response import Response
from rest_framework.viewsets import ModelViewSet

from core.api.serializers import SchemaFallbackSerializer
from core.utils.pagination import CustomPagination


class PaginatedListMixin:
    pagination_class = CustomPagination

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())  # noqa
        page = self.paginate_queryset(queryset)  # noqa
        if page is not None:
            serializer = self.get_serializer(page, many=True)  # noqa
            return self.get_paginated_response(serializer.data)  # noqa

        serializer = self.get_serializer(queryset, many=True)  # noqa
        return Response(serializer.data)


class CustomResponseMixin:
    """
    Wraps every DRF response into the fleet API envelope.

    - success: {"success": true, "message": "OK", "data": <payload>}
    - error:   {"success": false, "message": "NOT OK", "error": <payload>}

    Responses that already carry "success" and "message" (paginated pages and
    bodies produced by core.api.exceptions.custom_exception_handler) pass through.
    """

    SUCCESS_MESSAGE = "OK"
    ERROR_MESSAGE = "NOT OK"
    NO_BODY_STATUS_CODES = {
        status.HTTP_204_NO_CONTENT,
        status.HTTP_205_RESET_CONTENT,
        status.HTTP_304_NOT_MODIFIED,
    }

    def finalize_response(self, request, response, *args, **kwargs):
        response = super().finalize_response(request, response, *args, **kwargs)  # noqa

        if response.status_code in self.NO_BODY_STATUS_CODES:
            return response

        if not hasattr(response, "data") or self._is_structured_response(response):
            return response

        if response.status_code < 400:
            response = self._success_response(response=response)
        else:
            response = self._error_response(response=response)

        return response

    def _success_response(self, response: Response):
        response.data = {
            "success": True,
            "message": self.SUCCESS_MESSAGE,
            "data": response.data,
        }
        return response

    def _error_response(self, response: Response):
        response.data = {
            "success": False,
            "message": self.ERROR_MESSAGE,
            "error": response.data,
        }
        return response

    @staticmethod
    def _is_structured_response(response: Response) -> bool:
        return (
            isinstance(response.data, dict)
            and "success" in response.data
            and "message" in response.data
        )


class BaseAPIView(CustomResponseMixin, generics.GenericAPIView):
    serializer_class = SchemaFallbackSerializer


class ListAPIView(mixins.ListModelMixin, PaginatedListMixin, BaseAPIView):
    def get(self, request, *args, **kwargs):
        return self.list(request, *args, **kwargs)


class RetrieveAPIView(mixins.RetrieveModelMixin, BaseAPIView):
    def get(self, request, *args, **kwargs):
        return self.retrieve(request, *args, **kwargs)


class BaseModelViewSet(PaginatedListMixin, CustomResponseMixin, ModelViewSet):
    serializer_class = SchemaFallbackSerializer
