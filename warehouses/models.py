from django.db import models


class Warehouse(models.Model):
    '''Storage location products can be assigned to'''
    name = models.CharField(max_length=255)
    city = models.CharField(max_length=255, blank=True)
    phone = models.CharField(max_length=50, blank=True)
    email = models.EmailField(max_length=255, blank=True)
    country = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Columns the index may sort and search on
    orderable = ['id', 'name', 'city', 'phone', 'email', 'country', 'created_at']
    filterable = ['name', 'city', 'phone', 'email', 'country']

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name
