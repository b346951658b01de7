from django.db import models
from django.conf import settings


class ManagementLog(models.Model):
    """Log management actions (e.g., worker approval, suspension)."""
    admin = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='management_logs')
    action = models.CharField(max_length=100)
    details = models.TextField()
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp', '-id']

    def __str__(self):
        return f"{self.admin.username} - {self.action} at {self.timestamp}"
