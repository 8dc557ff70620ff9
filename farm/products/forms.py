# farm/products/forms.py

from wtforms import BooleanField, IntegerField, StringField
from wtforms.validators import DataRequired, Length, NumberRange, Optional

from farm.api import ApiForm
from farm.history.services import QUANTITY_LIMIT


def _strip(value):
    return value.strip() if isinstance(value, str) else value


class ProductForm(ApiForm):
    name = StringField('Name', filters=[_strip], validators=[
        DataRequired(), Length(min=2, max=255, message='Name must be at least 2 characters')
    ])
    fieldLocation = StringField('Field location', filters=[_strip], validators=[
        DataRequired(message='Field location is required'), Length(max=100)
    ])
    currentStock = IntegerField('Current stock', validators=[
        Optional(), NumberRange(min=-QUANTITY_LIMIT, max=QUANTITY_LIMIT)
    ])
    unit = StringField('Unit', validators=[Optional(), Length(max=50)])

    cropNeeds = StringField('Crop needs', validators=[Optional(), Length(max=50)])
    standInventory = StringField('Stand inventory', validators=[Optional(), Length(max=50)])
    washInventory = StringField('Wash inventory', validators=[Optional(), Length(max=50)])
    harvestBins = StringField('Harvest bins', validators=[Optional(), Length(max=50)])
    unitsHarvested = StringField('Units harvested', validators=[Optional(), Length(max=50)])

    fieldNotes = StringField('Field notes', validators=[Optional()])
    retailNotes = StringField('Retail notes', validators=[Optional()])
    imageUrl = StringField('Image URL', validators=[Optional(), Length(max=500)])

    showInWholesale = BooleanField('Show in wholesale')
    showInKitchen = BooleanField('Show in kitchen')
    showInRetail = BooleanField('Show in retail')
