from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.cache import cache
from django.utils import timezone
from core.constants import ACCOUNT_TYPE_CHOICES, DASHBOARD_BY_ACCOUNT_TYPE

import logging

User = get_user_model()
logger = logging.getLogger(__name__)

LOGIN_ATTEMPT_LIMIT = 5
LOGIN_LOCKOUT_SECONDS = 900


class SignupSerializer(serializers.Serializer):
    name = serializers.CharField(
        max_length=150,
        min_length=2,
        error_messages={'min_length': 'Name must be at least 2 characters long.'}
    )
    email = serializers.EmailField(max_length=254)
    password = serializers.CharField(
        max_length=128,
        write_only=True,
        min_length=6,
        error_messages={'min_length': 'Password must be at least 6 characters long.'}
    )
    account_type = serializers.ChoiceField(choices=ACCOUNT_TYPE_CHOICES, default='customer')

    def validate_email(self, value):
        value = value.strip().lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already in use.")
        return value

    def validate(self, data):
        try:
            validate_password(data['password'], User(email=data['email'], name=data['name']))
        except Exception as e:
            raise serializers.ValidationError({"password": list(e.messages)})
        return data

    def save(self):
        email = self.validated_data['email']
        base_username = email.split('@')[0].lower()
        username = base_username
        counter = 1
        while User.objects.filter(username=username).exists():
            username = f"{base_username}{counter}"
            counter += 1
        user = User(
            username=username,
            email=email,
            name=self.validated_data['name'].strip(),
            account_type=self.validated_data['account_type'],
        )
        user.set_password(self.validated_data['password'])
        user.save()
        logger.info(f"User {user.id} signed up: email={user.email}, account_type={user.account_type}")
        return user


class LoginSerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=255, trim_whitespace=True)
    password = serializers.CharField(max_length=128, write_only=True)

    def validate(self, data):
        identifier = data.get('identifier').strip().lower()
        password = data.get('password')
        logger.debug(f"Login attempt for identifier: {identifier}")
        cache_key = f'login_attempts_{identifier}'
        attempts = cache.get(cache_key, 0)
        if attempts >= LOGIN_ATTEMPT_LIMIT:
            logger.warning(f"Too many login attempts for {identifier}")
            raise serializers.ValidationError("Too many login attempts. Please try again in 15 minutes.")
        user = User.get_by_identifier(identifier)
        if not user:
            logger.warning(f"No user found for identifier: {identifier}")
            cache.set(cache_key, attempts + 1, LOGIN_LOCKOUT_SECONDS)
            raise serializers.ValidationError("No user found with this email or username.")
        if not user.check_password(password):
            logger.warning(f"Password incorrect for user: {user.email}")
            cache.set(cache_key, attempts + 1, LOGIN_LOCKOUT_SECONDS)
            raise serializers.ValidationError("Incorrect password.")
        if user.is_suspended or not user.is_active:
            logger.warning(f"Suspended user attempted login: {user.email}")
            raise serializers.ValidationError("User account is suspended. Please contact support.")
        logger.info(f"Login successful for user: {user.email}")
        cache.delete(cache_key)
        data['user'] = user
        return data

    def save(self):
        user = self.validated_data['user']
        user.last_login = timezone.now()
        user.save(update_fields=['last_login'])
        return user


class UserSerializer(serializers.ModelSerializer):
    is_admin = serializers.BooleanField(read_only=True)
    dashboard = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'name', 'account_type', 'status',
            'phone_number', 'location', 'photo_url', 'bio', 'is_admin',
            'dashboard', 'created_at'
        ]
        read_only_fields = ['id', 'username', 'email', 'account_type', 'status', 'created_at']

    def get_dashboard(self, obj):
        return DASHBOARD_BY_ACCOUNT_TYPE.get(obj.account_type, 'home')


class PublicUserSerializer(serializers.ModelSerializer):
    """Profile fields any participant may see; contact details stay hidden."""

    class Meta:
        model = User
        fields = ['id', 'name', 'account_type', 'photo_url', 'bio']
        read_only_fields = fields


class WorkerListSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'name', 'photo_url', 'bio', 'location', 'created_at']
        read_only_fields = fields
