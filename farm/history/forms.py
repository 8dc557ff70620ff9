from datetime import datetime, timezone

from wtforms import Field, IntegerField, StringField
from wtforms.validators import InputRequired, Length, NumberRange, Optional, ValidationError
from wtforms.widgets import TextInput
from wtforms_sqlalchemy.fields import QuerySelectField

from farm.api import ApiForm, parse_bool
from farm.products.models import Product
from .services import QUANTITY_LIMIT

# largest id an INTEGER primary key can hold
MAX_ID = 2**31 - 1


class IsoDateTimeField(Field):
    """Accepts "2024-05-01" as well as full ISO timestamps ("...T04:00:00.000Z"); stored naive UTC."""

    widget = TextInput()

    def _value(self):
        return self.data.isoformat() if self.data else ""

    def process_formdata(self, valuelist):
        if not valuelist or not str(valuelist[0]).strip():
            self.data = None
            return
        text = str(valuelist[0]).strip().replace("Z", "+00:00")
        try:
            value = datetime.fromisoformat(text)
        except ValueError as exc:
            self.data = None
            raise ValueError(self.gettext("Not a valid date value.")) from exc
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc).replace(tzinfo=None)
        self.data = value


class DateRangeForm(ApiForm):
    startDate = IsoDateTimeField("Start date", validators=[Optional()])
    endDate = IsoDateTimeField("End date", validators=[Optional()])
    # a plain id, so rows of deleted products can still be looked up
    productId = IntegerField("Product", validators=[Optional(), NumberRange(min=1, max=MAX_ID)])
    includeWholesaleKitchen = StringField("Include Wholesale/Kitchen", validators=[Optional()])

    def validate_endDate(self, field):
        if field.data and self.startDate.data and field.data.date() < self.startDate.data.date():
            raise ValidationError("End date must not be before start date.")

    @property
    def selected_product_id(self):
        return self.productId.data

    def include_reserved(self, default):
        return parse_bool(self.includeWholesaleKitchen.data, default=default)


class ReportFilterForm(DateRangeForm):
    """Report window; the product filter must name a product that still exists."""

    productId = QuerySelectField(
        "Product",
        query_factory=lambda: Product.query.order_by(Product.name).all(),
        get_label="name",
        allow_blank=True,
    )

    @property
    def selected_product_id(self):
        return self.productId.data.id if self.productId.data else None


class AdjustInventoryForm(ApiForm):
    productId = IntegerField("Product", validators=[InputRequired(), NumberRange(min=1, max=MAX_ID)])
    change = IntegerField("Change", validators=[
        InputRequired(), NumberRange(min=-QUANTITY_LIMIT, max=QUANTITY_LIMIT)
    ])
    updatedBy = StringField("Updated by", validators=[Optional(), Length(max=100)])
    fieldLocation = StringField("Field location", validators=[Optional(), Length(max=255)])
