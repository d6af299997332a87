from django.db import models
from django.contrib.auth.models import AbstractUser
from django.core.exceptions import ValidationError


class Employee(AbstractUser):
    '''Staff account; the role decides what the account may do'''
    MANAGER = 'MANAGER'
    INVENTORY = 'INVENTORY'
    SALES = 'SALES'
    ROLES = [
        (MANAGER, 'Manager'),
        (INVENTORY, 'Inventory'),
        (SALES, 'Sales'),
    ]

    role = models.CharField(max_length=20, choices=ROLES, default=SALES)
    phone = models.CharField(max_length=15, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-date_joined']
        verbose_name = 'Employee'
        verbose_name_plural = 'Employees'

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    def clean(self):
        super().clean()
        if self.phone and not self.phone.replace('+', '').replace(' ', '').isdigit():
            raise ValidationError({'phone': 'Phone number must contain only digits.'})
