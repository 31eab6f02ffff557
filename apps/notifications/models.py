from django.db import models
import uuid


class NotificationKind(models.TextChoices):
    REMINDER = 'reminder', 'Reminder'
    ALERT = 'alert', 'Alert'


class Notification(models.Model):
    """
    Message delivered to a single user.

    Append-only: the only change after creation is ``is_read`` going
    from False to True.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='notifications')
    message = models.TextField()
    kind = models.CharField(max_length=20, choices=NotificationKind.choices, default=NotificationKind.REMINDER)
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        indexes = [
            models.Index(fields=['user', 'is_read'], name='notificatio_user_id_2e9c1f_idx'),
            models.Index(fields=['user', '-created_at'], name='notificatio_user_id_7d4b3a_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.kind} for {self.user_id}: {self.message[:40]}"
