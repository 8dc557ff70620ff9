from wtforms import BooleanField, IntegerField, StringField
from wtforms.validators import Length, NumberRange, Optional, Regexp

from farm.api import ApiForm

EMAIL_RE = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class EmailSettingsForm(ApiForm):
    notificationEmail = StringField('Notification e-mail', validators=[Optional(), Regexp(EMAIL_RE, message="Invalid email address."), Length(max=255)])
    notifyOnRetailNotes = BooleanField('Notify on retail notes')
    smtpServer = StringField('SMTP server', validators=[Optional(), Length(max=255)])
    smtpPort = IntegerField('SMTP port', validators=[Optional(), NumberRange(min=1, max=65535)])
    smtpUsername = StringField('SMTP username', validators=[Optional(), Length(max=255)])
    smtpPassword = StringField('SMTP password', validators=[Optional(), Length(max=255)])
    smtpFromEmail = StringField('From e-mail', validators=[Optional(), Regexp(EMAIL_RE, message="Invalid email address."), Length(max=255)])
    useSmtp = BooleanField('Use SMTP')
