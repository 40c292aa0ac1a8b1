import smtplib
from email.message import EmailMessage

from flask import current_app


def _smtp_settings():
    cfg = current_app.config
    return {
        "host": cfg.get("SMTP_HOST"),
        "port": cfg.get("SMTP_PORT", 587),
        "username": cfg.get("SMTP_USERNAME"),
        "password": cfg.get("SMTP_PASSWORD"),
        "from_email": cfg.get("SMTP_FROM_EMAIL") or cfg.get("SMTP_USERNAME"),
        "use_tls": cfg.get("SMTP_USE_TLS", True),
    }


def build_message(from_email: str, to_email: str, subject: str, body: str) -> EmailMessage:
    msg = EmailMessage()
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(body)
    return msg


def send_email(to_email: str, subject: str, body: str):
    """Returns (sent, error). Connection and SMTP errors come back as error text."""
    smtp = _smtp_settings()
    if not to_email:
        return False, "No recipient"
    if not smtp["host"] or not smtp["from_email"]:
        return False, "Email not configured"

    msg = build_message(smtp["from_email"], to_email, subject, body)
    try:
        with smtplib.SMTP(smtp["host"], smtp["port"], timeout=10) as server:
            if smtp["use_tls"]:
                server.starttls()
            if smtp["username"] and smtp["password"]:
                server.login(smtp["username"], smtp["password"])
            server.send_message(msg)
    except (smtplib.SMTPException, OSError) as exc:
        return False, str(exc)
    return True, None
