# jobboard/forms.py
from django import forms


class BooleanInput(forms.NullBooleanSelect):
    """Accepts JSON booleans as well as "1"/"0", "true"/"false" and "on" from form posts."""

    VALUES = {
        True: True, '1': True, 'true': True, 'True': True, 'on': True,
        False: False, '0': False, 'false': False, 'False': False, 'off': False,
    }

    def value_from_datadict(self, data, files, name):
        value = data.get(name)
        if isinstance(value, (list, dict)):
            return None
        return self.VALUES.get(value)

    def value_omitted_from_data(self, data, files, name):
        return name not in data


class OptionalBooleanField(forms.NullBooleanField):
    """None when the key is missing, so callers can apply their own default."""
    widget = BooleanInput


class RequiredBooleanField(forms.NullBooleanField):
    widget = BooleanInput

    def validate(self, value):
        if value is None:
            raise forms.ValidationError(self.error_messages['required'], code='required')


class ArrayInput(forms.Widget):
    """
    Reads a list from JSON bodies, from repeated ``name``/``name[]`` form
    keys, or from a single JSON encoded form value.
    """

    def value_from_datadict(self, data, files, name):
        if hasattr(data, 'getlist'):
            values = data.getlist(f'{name}[]') or data.getlist(name)
            if len(values) == 1 and values[0].lstrip().startswith(('[', '{')):
                return values[0]
            return values or None
        return data.get(name)

    def value_omitted_from_data(self, data, files, name):
        return name not in data and f'{name}[]' not in data


class ArrayField(forms.JSONField):
    widget = ArrayInput
