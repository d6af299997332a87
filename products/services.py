from users.permissions import gate
from utils.controller import ListController
from utils.exporters import Column, ListExporter
from utils.importers import SpreadsheetImporter
from utils.listing import ListQueryBuilder
from utils.notifications import Notifier
from utils.store import ModelStore
from utils.validation import Ruleset
from warehouses.models import Warehouse
from .forms import PRODUCT_DEFAULTS, ProductForm, ProductImportForm
from .models import Brand, Category, Product

SELECTION_KEY = 'products_selected'
IMAGE_NAMESPACE = 'products'


def lists_for_fields():
    '''id -> name mappings for the category, brand and warehouse dropdowns'''
    return {
        'categories': dict(Category.objects.order_by('name').values_list('id', 'name')),
        'brands': dict(Brand.objects.order_by('name').values_list('id', 'name')),
        'warehouses': dict(Warehouse.objects.order_by('name').values_list('id', 'name')),
    }


def reference_resolver(model):
    '''Accept either a primary key or a (case-insensitive) name from a spreadsheet cell'''
    def resolve(value):
        if value in (None, ''):
            return None
        if isinstance(value, bool):
            return str(value)
        if isinstance(value, int):
            return value
        if isinstance(value, float):
            # A fractional id is left for the form to reject
            return int(value) if value.is_integer() else str(value)
        if str(value).strip().isdigit():
            return int(str(value).strip())
        match = model.objects.filter(name__iexact=str(value).strip()).values_list('pk', flat=True).first()
        # An unknown name is passed through so the form reports it
        return match if match is not None else str(value)
    return resolve


product_exporter = ListExporter('Products', [
    Column('Code', 'code'),
    Column('Name', 'name'),
    Column('Category', 'category.name'),
    Column('Brand', 'brand.name'),
    Column('Warehouse', 'warehouse.name'),
    Column('Quantity', lambda product: f'{product.quantity} {product.unit}'),
    Column('Cost', 'cost'),
    Column('Price', 'price'),
    Column('Stock Alert', 'stock_alert'),
])

product_importer = SpreadsheetImporter(
    ProductForm,
    aliases={
        'category_id': 'category',
        'brand_id': 'brand',
        'warehouse_id': 'warehouse',
        'barcode': 'barcode_symbology',
        'alert': 'stock_alert',
        'tax': 'order_tax',
    },
    resolvers={
        'category': reference_resolver(Category),
        'brand': reference_resolver(Brand),
        'warehouse': reference_resolver(Warehouse),
    },
    defaults=PRODUCT_DEFAULTS,
)


def product_store():
    builder = ListQueryBuilder(
        Product.objects.all(),
        searchable=Product.filterable,
        orderable=Product.orderable,
        related=('category', 'brand', 'warehouse'),
    )
    return ModelStore(Product, builder)


def build_product_controller(actor, filters=None, selection=None, storage=None):
    return ListController(
        'product',
        actor,
        gate,
        product_store(),
        Ruleset(ProductForm),
        filters=filters,
        selection=selection,
        defaults=PRODUCT_DEFAULTS,
        storage=storage,
        image_namespace=IMAGE_NAMESPACE,
        importer=product_importer,
        import_ruleset=Ruleset(ProductImportForm),
        notifier=Notifier(),
        exporter=product_exporter,
    )
