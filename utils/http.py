from urllib.parse import urlencode

from django.contrib import messages
from django.core.exceptions import ValidationError
from django.http import Http404, HttpResponse, JsonResponse
from django.shortcuts import redirect, render
from django.urls import reverse
from django.utils import timezone

from .exporters import PDF_CONTENT_TYPE, XLSX_CONTENT_TYPE
from .listing import FilterState, SelectionTracker


def controller_for(request, factory, selection_key):
    '''Build a controller from the request's query string and session selection'''
    return factory(
        request.user,
        filters=FilterState.from_query(request.GET),
        selection=SelectionTracker.from_session(request.session, selection_key),
    )


def finish(request, controller, selection_key):
    '''Persist the selection and hand controller alerts to the messages framework'''
    controller.selection.save(request.session, selection_key)
    for level, message in controller.alerts:
        messages.add_message(request, level, message)
    controller.alerts = []


def redirect_to_list(url_name, controller):
    url = reverse(url_name)
    query = controller.filters.as_query()
    if query:
        url = f'{url}?{urlencode(query)}'
    return redirect(url)


def field_errors_response(field_name, errors):
    return JsonResponse({'field': field_name, 'valid': not errors, 'errors': list(errors)})


def export_response(content, fmt, basename):
    filename = f'{basename}_{timezone.now().strftime("%Y%m%d")}.{fmt}'
    content_type = PDF_CONTENT_TYPE if fmt == 'pdf' else XLSX_CONTENT_TYPE
    response = HttpResponse(content, content_type=content_type)
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    return response


def render_record_form(request, controller, selection_key, list_url, template_name, context):
    '''Shared create/update flow: bind POST data, submit, then redirect or re-render'''
    if request.method == 'POST':
        controller.fill(request.POST)
        try:
            record = controller.submit(request.FILES)
        except ValidationError:
            messages.error(request, 'Please correct the errors below.')
        else:
            if record is not None:
                finish(request, controller, selection_key)
                return redirect_to_list(list_url, controller)
        finish(request, controller, selection_key)

    context = dict(context, form=controller.form())
    return render(request, template_name, context)


def validate_field_response(request, controller, field_name):
    '''Check one field of a create (or, with ``pk`` posted, an edit) draft'''
    pk = request.POST.get('pk')
    if pk:
        try:
            controller.open_edit(int(pk))
        except ValueError:
            raise Http404(f'Unknown record: {pk}')
    else:
        controller.open_create()
    controller.fill(request.POST)
    try:
        errors = controller.set_field(field_name, request.POST.get(field_name))
    except KeyError:
        raise Http404(f'Unknown field: {field_name}')
    return field_errors_response(field_name, errors)


def confirm_delete(request, controller, pk, selection_key, list_url, template_name, context_name):
    '''GET shows the confirmation page, POST deletes the record'''
    controller.authorize('delete')
    record = controller.show(pk)

    if request.method == 'POST':
        controller.delete(pk)
        finish(request, controller, selection_key)
        return redirect_to_list(list_url, controller)

    return render(request, template_name, {
        context_name: record,
        'title': f'Delete {record}',
    })


def selection_action(request, controller, action, selection_key, list_url):
    '''Run a selection or bulk action, keep the selection and go back to the list'''
    action()
    finish(request, controller, selection_key)
    return redirect_to_list(list_url, controller)
