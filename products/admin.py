from django.contrib import admin
from .models import Brand, Category, Product

admin.site.register(Category)
admin.site.register(Brand)


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    list_display = ['name', 'code', 'category', 'brand', 'quantity', 'price']
    list_select_related = ['category', 'brand']
    search_fields = Product.filterable
