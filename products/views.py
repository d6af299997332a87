from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.core.exceptions import ValidationError
from django.http import Http404
from django.shortcuts import render
from django.views.decorators.http import require_POST

from utils.http import (
    confirm_delete, controller_for, export_response, finish, redirect_to_list,
    render_record_form, selection_action, validate_field_response,
)
from utils.listing import pagination_options
from utils.notifications import Notifier
from .services import SELECTION_KEY, build_product_controller, lists_for_fields

LIST_URL = 'products:product_list'


def _controller(request):
    return controller_for(request, build_product_controller, SELECTION_KEY)


@login_required
def product_list(request):
    controller = _controller(request)
    page_obj = controller.page()

    context = {
        'page_obj': page_obj,
        'filters': controller.filters,
        'selection': controller.selection,
        'selected_count': controller.selected_count,
        'pagination_options': pagination_options(),
        'lists_for_fields': lists_for_fields(),
        'can_create': controller.can('create'),
        'can_update': controller.can('update'),
        'can_delete': controller.can('delete'),
        'can_import': controller.can('import'),
        'title': 'Products',
    }
    return render(request, 'products/product_list.html', context)


@login_required
def product_detail(request, pk):
    controller = _controller(request)
    product = controller.show(pk)
    return render(request, 'products/product_detail.html', {
        'product': product,
        'can_update': controller.can('update'),
        'title': f'{product.name} - Details',
    })


@login_required
def create_product(request):
    controller = _controller(request)
    controller.open_create()
    return render_record_form(request, controller, SELECTION_KEY, LIST_URL, 'products/product_form.html', {
        'product': None,
        'title': 'Create Product',
    })


@login_required
def update_product(request, pk):
    controller = _controller(request)
    controller.open_edit(pk)
    product = controller.instance
    return render_record_form(request, controller, SELECTION_KEY, LIST_URL, 'products/product_form.html', {
        'product': product,
        'title': f'Update {product.name}',
    })


@login_required
@require_POST
def validate_product_field(request, field):
    return validate_field_response(request, _controller(request), field)


@login_required
def delete_product(request, pk):
    return confirm_delete(
        request, _controller(request), pk, SELECTION_KEY, LIST_URL,
        'products/product_confirm_delete.html', 'product',
    )


@login_required
@require_POST
def delete_selected_products(request):
    controller = _controller(request)
    return selection_action(request, controller, controller.delete_selected, SELECTION_KEY, LIST_URL)


@login_required
@require_POST
def toggle_product(request, pk):
    controller = _controller(request)
    controller.authorize('access')
    return selection_action(request, controller, lambda: controller.toggle(pk), SELECTION_KEY, LIST_URL)


@login_required
@require_POST
def clear_product_selection(request):
    controller = _controller(request)
    return selection_action(request, controller, controller.reset_selected, SELECTION_KEY, LIST_URL)


@login_required
def import_products(request):
    controller = _controller(request)
    controller.open_import()

    if request.method == 'POST':
        try:
            controller.run_import(request.FILES.get('import_file'))
        except ValidationError:
            messages.error(request, 'Please choose an .xlsx file to import.')
        else:
            finish(request, controller, SELECTION_KEY)
            return redirect_to_list(LIST_URL, controller)

    return render(request, 'products/product_import.html', {
        'form': controller.form(),
        'title': 'Import Products',
    })


@login_required
def export_products(request, fmt):
    controller = _controller(request)
    return export_response(controller.export(fmt), fmt, 'products')


@login_required
@require_POST
def notify_product(request, pk):
    controller = _controller(request)
    channel = request.POST.get('channel', 'mail')
    if channel not in Notifier.channels:
        raise Http404(f'Unknown channel: {channel}')
    return selection_action(request, controller, lambda: controller.notify(pk, channel), SELECTION_KEY, LIST_URL)
