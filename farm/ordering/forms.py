from wtforms import Field, IntegerField
from wtforms.validators import InputRequired
from wtforms.widgets import TextInput

from farm.api import ApiForm


class IntegerListField(Field):
    """Repeated form values (a JSON array) → list of ints."""

    widget = TextInput()

    def _value(self):
        return ",".join(str(v) for v in self.data or [])

    def process_formdata(self, valuelist):
        try:
            self.data = [int(v) for v in valuelist]
        except (TypeError, ValueError) as exc:
            self.data = []
            raise ValueError(self.gettext("Not a valid list of product ids.")) from exc


class RowOrderForm(ApiForm):
    productIds = IntegerListField("Product ids")


class MoveProductForm(ApiForm):
    position = IntegerField("Position", validators=[InputRequired()])
