from django.db import models
import uuid


class SettlementStatus(models.TextChoices):
    PENDING = 'pending', 'Pending'
    COMPLETED = 'completed', 'Completed'


class Settlement(models.Model):
    """
    Out-of-band payment between two group members.

    Only completed settlements count towards group balances. The
    pending -> completed transition happens once and is never reversed.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    group = models.ForeignKey('groups.Group', on_delete=models.CASCADE, related_name='settlements')
    from_user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='settlements_paid')
    to_user = models.ForeignKey('accounts.User', on_delete=models.CASCADE, related_name='settlements_received')
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.CharField(max_length=255, blank=True)
    status = models.CharField(max_length=20, choices=SettlementStatus.choices, default=SettlementStatus.PENDING)
    completed_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'settlements'
        indexes = [
            models.Index(fields=['group', 'status'], name='settlements_group_i_0c5e7b_idx'),
        ]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.from_user_id} -> {self.to_user_id}: {self.amount} ({self.status})"

    def involves(self, user):
        return user.id in (self.from_user_id, self.to_user_id)
