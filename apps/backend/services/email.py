"""SMTP email sender."""
from __future__ import annotations

import smtplib
from email.message import EmailMessage
from email.utils import formataddr

from apps.backend.config import Settings


def send_email(
    settings: Settings,
    *,
    to_email: str,
    to_name: str | None,
    subject: str,
    html: str,
    text: str,
) -> tuple[bool, str | None]:
    if not settings.smtp_host or not settings.smtp_port:
        return False, "missing_smtp"
    if not settings.email_from:
        return False, "missing_from"
    msg = EmailMessage()
    msg["Subject"] = subject or "SuiteC"
    from_name = settings.email_from_name
    msg["From"] = formataddr((from_name, settings.email_from)) if from_name else settings.email_from
    msg["To"] = formataddr((to_name, to_email)) if to_name else to_email
    if text:
        msg.set_content(text)
    if html:
        msg.add_alternative(html, subtype="html")
    secure = (settings.smtp_secure or "").lower()
    try:
        if secure == "ssl":
            server = smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, timeout=10)
        else:
            server = smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10)
        try:
            if secure == "tls":
                server.starttls()
            if settings.smtp_user:
                server.login(settings.smtp_user, settings.smtp_password or "")
            server.send_message(msg)
        finally:
            server.quit()
    except (smtplib.SMTPException, OSError) as e:
        return False, str(e)[:200]
    return True, None
