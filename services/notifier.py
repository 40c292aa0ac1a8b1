from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.notification import Notification
from models.user import User, Role
from utils.emailer import send_email


class Notifier:
    """
    Stores in-app notifications and mirrors them by email.

    Delivery is best-effort: every failure is logged and swallowed so the
    booking transition that triggered it stands.
    """

    def __init__(self, mailer=send_email):
        self.mailer = mailer

    def notify(self, recipient_user_id, title, message, booking_id=None, type="booking"):
        try:
            db.session.add(Notification(
                user_id=recipient_user_id,
                title=title,
                message=message,
                type=type,
                reference_id=booking_id,
            ))
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception(
                "Notification to user %s for booking %s failed", recipient_user_id, booking_id
            )
            return False

        self._email(recipient_user_id, title, message)
        return True

    def notify_admins(self, title, message, booking):
        try:
            admin_ids = [
                u.id for u in User.query.join(User.roles).filter(Role.name == "ADMIN").all()
            ]
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception("Could not load admins for booking %s", booking.id)
            return 0

        if not admin_ids:
            current_app.logger.warning("No admin to notify for booking %s", booking.id)
        return sum(1 for admin_id in admin_ids if self.notify(admin_id, title, message, booking.id))

    def _email(self, user_id, subject, body):
        try:
            user = db.session.get(User, user_id)
            ok, error = self.mailer(user.email if user else None, subject, body)
        except Exception:
            current_app.logger.exception("Email to user %s raised", user_id)
            return
        if not ok:
            current_app.logger.info("Email to user %s not sent: %s", user_id, error)
