from flask import current_app
from wtforms import PasswordField
from wtforms.validators import DataRequired, EqualTo, Optional, ValidationError

from farm.api import ApiForm


def check_length(form, field):
    minimum = current_app.config['MIN_PASSWORD_LENGTH']
    if field.data and len(field.data) < minimum:
        raise ValidationError(f'Password must be at least {minimum} characters')


class LoginForm(ApiForm):
    password = PasswordField('Password', validators=[DataRequired(message='Password is required')])


class ChangePasswordForm(ApiForm):
    currentPassword = PasswordField('Current password', validators=[DataRequired(message='Current password is required')])
    newPassword = PasswordField('New password', validators=[DataRequired(), check_length])
    confirmPassword = PasswordField('Confirm password', validators=[
        Optional(), EqualTo('newPassword', message="Passwords don't match")
    ])
