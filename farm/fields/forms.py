# farm/fields/forms.py

from wtforms import StringField
from wtforms.validators import DataRequired, Length

from farm.api import ApiForm


def normalize_name(value):
    """Collapses inner whitespace: "  Upper   Blais " → "Upper Blais"."""
    return " ".join(value.split()) if isinstance(value, str) else value


class FieldLocationForm(ApiForm):
    name = StringField('Name', filters=[normalize_name], validators=[DataRequired(), Length(max=100)])
