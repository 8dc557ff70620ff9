# farm/imports/forms.py

from wtforms import StringField
from wtforms.validators import DataRequired, Length, Optional

from farm.api import ApiForm


class ImportForm(ApiForm):
    text = StringField('Data', validators=[DataRequired(message='Paste the spreadsheet rows first')])
    updatedBy = StringField('Updated by', validators=[Optional(), Length(max=100)])
