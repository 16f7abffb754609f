"""
ModelViewSet base that wraps every action in the standard response envelope.
"""
from rest_framework import viewsets, status

from apps.common.utils import success_response, paginated_response


class EnvelopeModelViewSet(viewsets.ModelViewSet):
    """
    ModelViewSet with custom response format.

    Subclasses set `resource_name` for the response messages.
    """
    resource_name = 'Resource'

    def list(self, request, *args, **kwargs):
        queryset = self.filter_queryset(self.get_queryset())
        return paginated_response(
            queryset, self.get_serializer_class(), request,
            f'{self.resource_name} list retrieved successfully'
        )

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        self.perform_create(serializer)
        return success_response(serializer.data, f'{self.resource_name} created successfully', status.HTTP_201_CREATED)

    def retrieve(self, request, *args, **kwargs):
        instance = self.get_object()
        serializer = self.get_serializer(instance)
        return success_response(serializer.data, f'{self.resource_name} retrieved successfully')

    def update(self, request, *args, **kwargs):
        partial = kwargs.pop('partial', False)
        instance = self.get_object()
        serializer = self.get_serializer(instance, data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)
        self.perform_update(serializer)
        return success_response(serializer.data, f'{self.resource_name} updated successfully')

    def partial_update(self, request, *args, **kwargs):
        kwargs['partial'] = True
        return self.update(request, *args, **kwargs)

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        self.perform_destroy(instance)
        return success_response(None, f'{self.resource_name} deleted successfully')
