from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator

# Upper bound of a signed 32-bit integer, kept for cost and price
PRICE_CEILING = 2147483647


class Category(models.Model):
    '''Product categories'''
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = 'Category'
        verbose_name_plural = 'Categories'

    def __str__(self):
        return self.name


class Brand(models.Model):
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Product(models.Model):
    '''Stock-keeping product'''
    BARCODE_SYMBOLOGIES = [
        ('C128', 'Code 128'),
        ('C39', 'Code 39'),
        ('UPCA', 'UPC-A'),
        ('UPCE', 'UPC-E'),
        ('EAN13', 'EAN-13'),
        ('EAN8', 'EAN-8'),
    ]
    TAX_EXCLUSIVE = 1
    TAX_INCLUSIVE = 2
    TAX_TYPES = [
        (TAX_EXCLUSIVE, 'Exclusive'),
        (TAX_INCLUSIVE, 'Inclusive'),
    ]

    name = models.CharField(max_length=255)
    code = models.CharField(max_length=255)
    barcode_symbology = models.CharField(max_length=255, choices=BARCODE_SYMBOLOGIES, default='C128')
    unit = models.CharField(max_length=255, default='pcs')
    quantity = models.IntegerField(validators=[MinValueValidator(1)])
    cost = models.DecimalField(max_digits=12, decimal_places=2, validators=[MaxValueValidator(PRICE_CEILING)])
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MaxValueValidator(PRICE_CEILING)])
    stock_alert = models.IntegerField(default=10, validators=[MinValueValidator(0)])
    order_tax = models.IntegerField(
        default=0, null=True, blank=True,
        validators=[MinValueValidator(0), MaxValueValidator(100)],
    )
    tax_type = models.IntegerField(choices=TAX_TYPES, null=True, blank=True)
    note = models.TextField(max_length=1000, blank=True, null=True)
    category = models.ForeignKey(Category, on_delete=models.PROTECT, related_name='products')
    brand = models.ForeignKey(Brand, on_delete=models.SET_NULL, null=True, blank=True, related_name='products')
    warehouse = models.ForeignKey(
        'warehouses.Warehouse', on_delete=models.SET_NULL, null=True, blank=True, related_name='products'
    )
    image = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    # Columns the index may sort and search on
    orderable = [
        'id', 'name', 'code', 'quantity', 'cost', 'price', 'stock_alert',
        'category__name', 'brand__name', 'created_at',
    ]
    filterable = ['name', 'code', 'category__name', 'brand__name', 'warehouse__name']

    class Meta:
        ordering = ['-id']

    def __str__(self):
        return f'{self.name} ({self.code})'

    @property
    def needs_reorder(self):
        return self.quantity <= self.stock_alert

    def notification_text(self):
        lines = [
            f'Product: {self.name}',
            f'Code: {self.code}',
            f'Category: {self.category.name}',
            f'Quantity: {self.quantity} {self.unit}',
            f'Price: {self.price:,.2f}',
        ]
        if self.needs_reorder:
            lines.append(f'Stock is at or below the alert level of {self.stock_alert}.')
        return '\n'.join(lines)
