"""
User authentication views.
"""
import logging

from django.contrib.auth import authenticate
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from apps.common.utils import success_response, error_response
from ..models import User
from ..serializers import UserDetailSerializer, UserRegistrationSerializer

logger = logging.getLogger(__name__)


def _token_payload(user, request):
    refresh = RefreshToken.for_user(user)
    return {
        'token': str(refresh.access_token),
        'refresh': str(refresh),
        'user': UserDetailSerializer(user, context={'request': request}).data
    }


class RegisterView(APIView):
    """User registration endpoint"""
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        if serializer.is_valid():
            user = serializer.save()
            logger.info(f"Registered user {user.id}")
            return success_response(_token_payload(user, request), 'Registration successful')
        return error_response('Registration failed', serializer.errors)


class PasswordLoginView(APIView):
    """Password-based login with username or email"""
    permission_classes = [AllowAny]

    def post(self, request):
        password = request.data.get('password')
        username = request.data.get('username')
        email = request.data.get('email')

        if not password:
            return error_response('Password is required')

        if not username and email:
            user = User.objects.filter(email__iexact=email).first()
            username = user.username if user else None

        if not username:
            return error_response('Username or email is required')

        user = authenticate(request, username=username, password=password)
        if user is None:
            logger.warning(f"Failed login for {username}")
            return error_response('Invalid credentials', status_code=401)

        return success_response(_token_payload(user, request), 'Login successful')
