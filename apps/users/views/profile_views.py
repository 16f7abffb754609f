"""
User profile management views.
"""
from rest_framework.views import APIView
from rest_framework.permissions import IsAuthenticated

from apps.common.utils import success_response, error_response
from ..serializers import UserDetailSerializer, UserUpdateSerializer


class UserProfileView(APIView):
    """Read and update the current user's profile"""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = UserDetailSerializer(request.user, context={'request': request})
        return success_response(serializer.data, 'User info retrieved successfully')

    def put(self, request):
        serializer = UserUpdateSerializer(request.user, data=request.data, partial=True, context={'request': request})
        if serializer.is_valid():
            serializer.save()
            updated_data = UserDetailSerializer(request.user, context={'request': request}).data
            return success_response(updated_data, 'Profile updated successfully')
        return error_response('Profile update failed', serializer.errors)

    def patch(self, request):
        return self.put(request)
