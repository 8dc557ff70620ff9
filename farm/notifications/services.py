# farm/notifications/services.py
"""
E-mail notifications (currently: retail notes edited on a product).

Settings live in the settings store under EMAIL_SETTINGS_KEY. Without SMTP
the message is only written to the log. A failed send never fails the
request that triggered it.
"""

import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from flask import current_app

from farm.settings.services import get_setting, set_setting

EMAIL_SETTINGS_KEY = 'emailSettings'
MASKED_PASSWORD = '********'

DEFAULT_EMAIL_SETTINGS = {
    'notificationEmail': '',
    'notifyOnRetailNotes': True,
    'smtpServer': '',
    'smtpPort': 587,
    'smtpUsername': '',
    'smtpPassword': '',
    'smtpFromEmail': '',
    'useSmtp': False,
}


def get_email_settings() -> dict:
    cfg = current_app.config
    settings = dict(DEFAULT_EMAIL_SETTINGS)
    # environment values prefill what the store hasn't got
    settings.update({
        'smtpServer': cfg.get('MAIL_SERVER') or '',
        'smtpPort': cfg.get('MAIL_PORT') or 587,
        'smtpUsername': cfg.get('MAIL_USERNAME') or '',
        'smtpPassword': cfg.get('MAIL_PASSWORD') or '',
        'smtpFromEmail': cfg.get('MAIL_DEFAULT_SENDER') or '',
    })
    stored = get_setting(EMAIL_SETTINGS_KEY) or {}
    if isinstance(stored, dict):
        settings.update({k: v for k, v in stored.items() if k in DEFAULT_EMAIL_SETTINGS})
    return settings


def update_email_settings(changes: dict) -> dict:
    """Merges `changes` into the stored settings; the caller commits."""
    stored = get_setting(EMAIL_SETTINGS_KEY) or {}
    if not isinstance(stored, dict):
        stored = {}
    merged = {**stored, **{k: v for k, v in changes.items() if k in DEFAULT_EMAIL_SETTINGS}}
    set_setting(EMAIL_SETTINGS_KEY, merged)
    return merged


def public_settings(settings: dict) -> dict:
    out = dict(settings)
    out['smtpPassword'] = MASKED_PASSWORD if settings.get('smtpPassword') else ''
    return out


def is_configured(settings) -> bool:
    return bool(settings.get('notificationEmail'))


def is_smtp_configured(settings) -> bool:
    return bool(
        settings.get('useSmtp')
        and settings.get('smtpServer')
        and settings.get('smtpPort')
        and settings.get('smtpFromEmail')
    )


def _send_smtp(settings, subject, message):
    msg = MIMEMultipart('alternative')
    msg['From'] = settings['smtpFromEmail']
    msg['To'] = settings['notificationEmail']
    msg['Subject'] = subject
    msg.attach(MIMEText(message, 'plain'))
    msg.attach(MIMEText(message.replace('\n', '<br>'), 'html'))

    port = int(settings['smtpPort'])
    if port == 465:
        server = smtplib.SMTP_SSL(settings['smtpServer'], port, timeout=10)
    else:
        server = smtplib.SMTP(settings['smtpServer'], port, timeout=10)
    try:
        if port != 465 and current_app.config.get('MAIL_USE_TLS', True):
            server.starttls()
        if settings.get('smtpUsername') and settings.get('smtpPassword'):
            server.login(settings['smtpUsername'], settings['smtpPassword'])
        server.sendmail(settings['smtpFromEmail'], [settings['notificationEmail']], msg.as_string())
    finally:
        server.quit()


def send_notification(subject, message) -> bool:
    settings = get_email_settings()
    if not is_configured(settings):
        current_app.logger.info("Notification not sent, no e-mail configured: %s", subject)
        return False

    if not is_smtp_configured(settings):
        current_app.logger.info(
            "[EMAIL NOTIFICATION - LOG ONLY] To: %s Subject: %s\n%s",
            settings['notificationEmail'], subject, message,
        )
        return True

    try:
        _send_smtp(settings, subject, message)
    except (smtplib.SMTPException, OSError):
        current_app.logger.exception("Sending notification '%s' failed", subject)
        return False
    current_app.logger.info("Notification sent to %s: %s", settings['notificationEmail'], subject)
    return True


def send_test_email() -> bool:
    return send_notification(
        'Farm Manager Test Email',
        'This is a test email from your Farm Manager application. '
        'If you received this, your email notifications are working correctly.',
    )


def notify_retail_notes_changed(product, previous_notes=None) -> bool:
    settings = get_email_settings()
    if not settings.get('notifyOnRetailNotes'):
        return False
    lines = [
        f"Retail notes were updated for {product.name} ({product.field_location}).",
        "",
        f"New notes: {product.retail_notes}",
    ]
    if previous_notes:
        lines.append(f"Previous notes: {previous_notes}")
    return send_notification(f"Retail notes updated: {product.name}", "\n".join(lines))
