from wtforms import StringField
from wtforms.validators import DataRequired, Length, Regexp

from farm.api import ApiForm


class SettingKeyForm(ApiForm):
    # value is free-form JSON and is read from the payload as is
    key = StringField('Key', validators=[
        DataRequired(),
        Length(max=100),
        Regexp(r'^[A-Za-z0-9_.\-]+$', message='Key may contain letters, digits, "_", "." and "-" only.'),
    ])
