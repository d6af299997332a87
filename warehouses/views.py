from django.contrib.auth.decorators import login_required
from django.shortcuts import render
from django.views.decorators.http import require_POST

from utils.http import (
    confirm_delete, controller_for, export_response, render_record_form, selection_action,
    validate_field_response,
)
from utils.listing import pagination_options
from .services import SELECTION_KEY, build_warehouse_controller

LIST_URL = 'warehouses:warehouse_list'


def _controller(request):
    return controller_for(request, build_warehouse_controller, SELECTION_KEY)


@login_required
def warehouse_list(request):
    controller = _controller(request)
    page_obj = controller.page()

    return render(request, 'warehouses/warehouse_list.html', {
        'page_obj': page_obj,
        'filters': controller.filters,
        'selection': controller.selection,
        'selected_count': controller.selected_count,
        'pagination_options': pagination_options(),
        'can_create': controller.can('create'),
        'can_update': controller.can('update'),
        'can_delete': controller.can('delete'),
        'title': 'Warehouses',
    })


@login_required
def create_warehouse(request):
    controller = _controller(request)
    controller.open_create()
    return render_record_form(request, controller, SELECTION_KEY, LIST_URL, 'warehouses/warehouse_form.html', {
        'warehouse': None,
        'title': 'Create Warehouse',
    })


@login_required
def update_warehouse(request, pk):
    controller = _controller(request)
    controller.open_edit(pk)
    warehouse = controller.instance
    return render_record_form(request, controller, SELECTION_KEY, LIST_URL, 'warehouses/warehouse_form.html', {
        'warehouse': warehouse,
        'title': f'Update {warehouse.name}',
    })


@login_required
@require_POST
def validate_warehouse_field(request, field):
    return validate_field_response(request, _controller(request), field)


@login_required
def delete_warehouse(request, pk):
    return confirm_delete(
        request, _controller(request), pk, SELECTION_KEY, LIST_URL,
        'warehouses/warehouse_confirm_delete.html', 'warehouse',
    )


@login_required
@require_POST
def delete_selected_warehouses(request):
    controller = _controller(request)
    return selection_action(request, controller, controller.delete_selected, SELECTION_KEY, LIST_URL)


@login_required
@require_POST
def toggle_warehouse(request, pk):
    controller = _controller(request)
    controller.authorize('access')
    return selection_action(request, controller, lambda: controller.toggle(pk), SELECTION_KEY, LIST_URL)


@login_required
@require_POST
def clear_warehouse_selection(request):
    controller = _controller(request)
    return selection_action(request, controller, controller.reset_selected, SELECTION_KEY, LIST_URL)


@login_required
def export_warehouses(request, fmt):
    controller = _controller(request)
    return export_response(controller.export(fmt), fmt, 'warehouses')
