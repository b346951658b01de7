from django.db import models
from django.contrib.auth.models import AbstractUser
from core.constants import ACCOUNT_TYPE_CHOICES, ACCOUNT_STATUS_CHOICES


class User(AbstractUser):
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=150)
    account_type = models.CharField(max_length=10, choices=ACCOUNT_TYPE_CHOICES, default='customer')
    status = models.CharField(max_length=10, choices=ACCOUNT_STATUS_CHOICES, default='approved')
    phone_number = models.CharField(max_length=20, blank=True, null=True)
    location = models.CharField(max_length=255, blank=True, null=True)
    photo_url = models.URLField(max_length=500, blank=True, null=True)
    bio = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def is_customer(self):
        return self.account_type == 'customer'

    @property
    def is_worker(self):
        return self.account_type == 'worker'

    @property
    def is_seller(self):
        return self.account_type == 'seller'

    @property
    def is_admin(self):
        return self.is_superuser

    @property
    def is_suspended(self):
        return self.status == 'suspended'

    @staticmethod
    def get_by_identifier(identifier):
        return User.objects.filter(
            models.Q(email__iexact=identifier) | models.Q(username__iexact=identifier)
        ).first()

    def __str__(self):
        return f"{self.name or self.username} ({self.get_account_type_display()})"
