from django.core.exceptions import ValidationError


class Ruleset:
    '''Field constraints declared by a Django form class.

    The form (and, for model forms, the model field validators it picks up)
    is the single place rules are written. This class only decides how much
    of the outcome to surface: one field while the user is typing, every
    field before anything is persisted.
    '''

    def __init__(self, form_class):
        self.form_class = form_class

    @property
    def field_names(self):
        return list(self.form_class.base_fields)

    def bind(self, data=None, files=None, instance=None):
        kwargs = {'data': data, 'files': files}
        if instance is not None:
            kwargs['instance'] = instance
        return self.form_class(**kwargs)

    def validate_field(self, data, field_name, instance=None):
        '''Raise ValidationError carrying only ``field_name``'s messages'''
        if field_name not in self.form_class.base_fields:
            raise KeyError(field_name)
        form = self.bind(data, instance=instance)
        form.is_valid()
        messages = form.errors.get(field_name)
        if messages:
            raise ValidationError({field_name: list(messages)})

    def validate_all(self, data, files=None, instance=None):
        '''Return the valid bound form or raise ValidationError for every failing field'''
        form = self.bind(data, files, instance=instance)
        if not form.is_valid():
            raise ValidationError(
                {field: list(messages) for field, messages in form.errors.items()}
            )
        return form
