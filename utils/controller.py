import enum
import logging

from django.contrib import messages
from django.core.exceptions import ImproperlyConfigured, ValidationError
from django.forms.models import model_to_dict

from .exceptions import AuthorizationError, BulkImportError, InvalidTransition, PersistenceError
from .listing import FilterState, SelectionTracker
from .uploads import attach_image

logger = logging.getLogger(__name__)


class State(enum.Enum):
    BROWSING = 'browsing'
    CREATING = 'creating'
    EDITING = 'editing'
    IMPORTING = 'importing'


class ListController:
    '''State machine behind a record index screen.

    Browsing -> Creating/Editing/Importing -> Browsing. Every entry into a
    non-browsing state, and every delete, is checked against the gate with
    ``<resource>_<action>`` abilities before anything changes. Alerts are
    collected in ``self.alerts`` as ``(level, message)`` pairs for the view
    to flush into the messages framework.
    '''

    def __init__(self, resource, actor, gate, store, ruleset, *, filters=None, selection=None,
                 defaults=None, storage=None, image_namespace=None, importer=None,
                 import_ruleset=None, notifier=None, exporter=None):
        self.resource = resource
        self.actor = actor
        self.gate = gate
        self.store = store
        self.ruleset = ruleset
        self.filters = filters if filters is not None else FilterState()
        self.selection = selection if selection is not None else SelectionTracker()
        self.defaults = dict(defaults or {})
        self.storage = storage
        self.image_namespace = image_namespace
        self.importer = importer
        self.import_ruleset = import_ruleset
        self.notifier = notifier
        self.exporter = exporter

        self.state = State.BROWSING
        self.draft = None
        self.instance = None
        self.errors = {}
        self.bound_form = None
        self.alerts = []
        self._listeners = []

    # Authorization and bookkeeping

    def can(self, action):
        return self.gate.can(self.actor, f'{self.resource}_{action}')

    def authorize(self, action):
        ability = f'{self.resource}_{action}'
        if not self.gate.can(self.actor, ability):
            logger.warning('Denied %s to %s', ability, self.actor)
            raise AuthorizationError(ability, self.actor)

    def alert(self, level, message):
        self.alerts.append((level, message))

    def subscribe(self, callback):
        self._listeners.append(callback)

    def refresh(self):
        self.filters.reset_page()
        for callback in self._listeners:
            callback(self)

    def _require(self, *states):
        if self.state not in states:
            raise InvalidTransition(f'{self.state.value} does not accept this operation')

    def _reset_form(self):
        self.errors = {}
        self.bound_form = None

    # Browsing

    def page(self):
        self.authorize('access')
        return self.store.query(self.filters)

    def show(self, pk):
        self.authorize('access')
        return self.store.find(pk)

    def toggle(self, pk):
        self.selection.toggle(pk)

    def reset_selected(self):
        self.selection.clear()

    @property
    def selected_count(self):
        return self.selection.count()

    # Create / edit

    def open_create(self):
        self._require(State.BROWSING)
        self.authorize('create')
        self._reset_form()
        self.instance = None
        self.draft = dict(self.defaults)
        self.state = State.CREATING

    def open_edit(self, pk):
        self._require(State.BROWSING)
        self.authorize('update')
        record = self.store.find(pk)
        self._reset_form()
        self.instance = record
        self.draft = model_to_dict(record, fields=self.ruleset.field_names)
        self.state = State.EDITING

    def fill(self, data):
        self._require(State.CREATING, State.EDITING)
        for name in self.ruleset.field_names:
            if name in data:
                self.draft[name] = data.get(name)

    def set_field(self, name, value):
        '''Change one draft field and return its error messages (empty when valid)'''
        self._require(State.CREATING, State.EDITING)
        self.draft[name] = value
        try:
            self.ruleset.validate_field(self.draft, name, instance=self.instance)
        except ValidationError as exc:
            self.errors[name] = exc.message_dict[name]
        else:
            self.errors.pop(name, None)
        return self.errors.get(name, [])

    def form(self):
        '''A form for rendering the current draft or import'''
        if self.bound_form is not None:
            return self.bound_form
        if self.state == State.IMPORTING:
            return self.import_ruleset.form_class()
        if self.state == State.EDITING:
            return self.ruleset.form_class(instance=self.instance)
        return self.ruleset.form_class(initial=self.draft)

    def submit(self, files=None):
        '''Validate and persist the draft.

        Returns the saved record, or None when storage failed (an error
        alert is recorded). Raises ValidationError without touching the
        store when any field is invalid.
        '''
        self._require(State.CREATING, State.EDITING)
        creating = self.state == State.CREATING
        try:
            form = self.ruleset.validate_all(self.draft, files, instance=self.instance)
        except ValidationError as exc:
            self.errors = exc.message_dict
            self.bound_form = self.ruleset.bind(self.draft, files, instance=self.instance)
            raise

        record = form.save(commit=False)
        label = record._meta.verbose_name.capitalize()
        try:
            image = form.cleaned_data.get('image_file')
            if image and self.image_namespace:
                attach_image(record, image, storage=self.storage, namespace=self.image_namespace)
            if creating:
                self.store.insert(record)
            else:
                self.store.update(record)
        except PersistenceError as exc:
            self.alert(messages.ERROR, str(exc))
            self.bound_form = form
            return None

        self.alert(messages.SUCCESS, f"{label} {'created' if creating else 'updated'} successfully.")
        self._close()
        self.refresh()
        return record

    def cancel(self):
        self._close()

    def _close(self):
        self.state = State.BROWSING
        self.draft = None
        self.instance = None
        self._reset_form()

    # Import

    def open_import(self):
        self._require(State.BROWSING)
        self.authorize('import')
        if self.importer is None:
            raise ImproperlyConfigured(f'No importer configured for {self.resource}')
        self._reset_form()
        self.state = State.IMPORTING

    def run_import(self, upload):
        '''Import ``upload``; returns the number of records created.

        A missing or wrongly typed file keeps the controller importing and
        raises ValidationError. Any other outcome ends in browsing.
        '''
        self._require(State.IMPORTING)
        if self.import_ruleset is not None:
            files = {'import_file': upload} if upload else {}
            try:
                self.import_ruleset.validate_all({}, files)
            except ValidationError as exc:
                self.errors = exc.message_dict
                self.bound_form = self.import_ruleset.bind({}, files)
                raise
        elif not upload:
            self.errors = {'import_file': ['This field is required.']}
            raise ValidationError(self.errors)

        created = 0
        try:
            created = self.importer.import_from(upload)
        except BulkImportError as exc:
            logger.warning('Import of %s failed: %s', self.resource, exc.summary)
            self.alert(messages.ERROR, f'Import failed: {exc.summary}')
        else:
            self.alert(messages.SUCCESS, f'{created} record(s) imported successfully.')
        finally:
            self._close()
        self.refresh()
        return created

    # Delete

    def delete(self, pk):
        self._require(State.BROWSING)
        self.authorize('delete')
        try:
            result = self.store.delete_many([pk])
        except PersistenceError as exc:
            self.alert(messages.ERROR, str(exc))
            return None
        if result.missing:
            self.alert(messages.WARNING, 'The record was already deleted.')
        else:
            self.alert(messages.SUCCESS, 'Record deleted successfully.')
        if pk in self.selection:
            self.selection.toggle(pk)
        self.refresh()
        return result

    def delete_selected(self):
        self._require(State.BROWSING)
        self.authorize('delete')
        ids = self.selection.selected_ids()
        if not ids:
            self.alert(messages.INFO, 'No records selected.')
            return None
        try:
            result = self.store.delete_many(ids)
        except PersistenceError as exc:
            self.alert(messages.ERROR, str(exc))
            return None

        message = f'{result.count} record(s) deleted.'
        if result.missing:
            message += f" {len(result.missing)} selected record(s) no longer existed."
        self.alert(messages.SUCCESS, message)
        self.selection.clear()
        self.refresh()
        return result

    # Side services

    def notify(self, pk, channel='mail'):
        record = self.show(pk)
        if self.notifier is None:
            raise ImproperlyConfigured(f'No notifier configured for {self.resource}')
        if self.notifier.notify(record, channel):
            self.alert(messages.SUCCESS, f'Notification sent for {record}.')
        else:
            self.alert(messages.WARNING, f'Notification for {record} could not be sent.')
        return record

    def export(self, fmt):
        self.authorize('access')
        if self.exporter is None:
            raise ImproperlyConfigured(f'No exporter configured for {self.resource}')
        records = self.store.all(self.filters)
        if fmt == 'pdf':
            return self.exporter.to_pdf(records)
        if fmt == 'xlsx':
            return self.exporter.to_spreadsheet(records)
        raise ValueError(f'Unsupported export format: {fmt}')
