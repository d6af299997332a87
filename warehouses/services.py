from users.permissions import gate
from utils.controller import ListController
from utils.exporters import Column, ListExporter
from utils.listing import ListQueryBuilder
from utils.store import ModelStore
from utils.validation import Ruleset
from .forms import WarehouseForm
from .models import Warehouse

SELECTION_KEY = 'warehouses_selected'

warehouse_exporter = ListExporter('Warehouses', [
    Column('Name', 'name'),
    Column('Phone', 'phone'),
    Column('Email', 'email'),
    Column('City', 'city'),
    Column('Country', 'country'),
])


def warehouse_store():
    builder = ListQueryBuilder(
        Warehouse.objects.all(),
        searchable=Warehouse.filterable,
        orderable=Warehouse.orderable,
    )
    return ModelStore(Warehouse, builder)


def build_warehouse_controller(actor, filters=None, selection=None):
    return ListController(
        'warehouse',
        actor,
        gate,
        warehouse_store(),
        Ruleset(WarehouseForm),
        filters=filters,
        selection=selection,
        exporter=warehouse_exporter,
    )
