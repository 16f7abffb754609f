"""
User serializers for detail, registration, and update operations.
"""
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from ..models import User


class UserListSerializer(serializers.ModelSerializer):
    """
    Serializer for user list view - minimal fields for list display.
    """
    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'role', 'created_at']
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    """
    Serializer for user detail view.
    Does not include sensitive fields like password.
    """
    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'phone', 'first_name', 'last_name',
            'country', 'avatar', 'role', 'is_staff', 'date_joined', 'updated_at'
        ]
        read_only_fields = ['id', 'role', 'is_staff', 'date_joined', 'updated_at']


class UserRegistrationSerializer(serializers.ModelSerializer):
    """
    Serializer for user registration.
    Used for: POST /api/users/register/
    """
    password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)
    email = serializers.EmailField()

    class Meta:
        model = User
        fields = [
            'username', 'email', 'phone', 'password', 'confirm_password',
            'first_name', 'last_name', 'country'
        ]

    def validate_email(self, value):
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value.lower()

    def validate(self, attrs):
        if attrs.get('password') != attrs.get('confirm_password'):
            raise serializers.ValidationError({
                'confirm_password': "Passwords don't match"
            })
        validate_password(attrs['password'])
        return attrs

    def create(self, validated_data):
        validated_data.pop('confirm_password')
        password = validated_data.pop('password')
        user = User(**validated_data)
        user.set_password(password)
        user.save()
        return user


class UserUpdateSerializer(serializers.ModelSerializer):
    """
    Serializer for profile updates. Supports partial updates.
    """
    email = serializers.EmailField(required=False)

    class Meta:
        model = User
        fields = ['email', 'phone', 'first_name', 'last_name', 'country', 'avatar']

    def validate_email(self, value):
        if value and User.objects.filter(email__iexact=value).exclude(pk=self.instance.pk).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value
