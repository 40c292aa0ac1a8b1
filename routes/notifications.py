from flask import Blueprint, jsonify, g, request

from models import db
from models.notification import Notification
from utils.auth_context import login_required

notifications_bp = Blueprint("notifications", __name__, url_prefix="/notifications")


def _unread_count(user_id: int) -> int:
    return Notification.query.filter_by(user_id=user_id, is_read=False).count()


def _own_notification(notification_id: int):
    return Notification.query.filter_by(id=notification_id, user_id=g.user.id).first()


@notifications_bp.get("")
@login_required
def list_notifications():
    page = max(request.args.get("page", 1, type=int) or 1, 1)
    q = Notification.query.filter_by(user_id=g.user.id)

    read = request.args.get("read")
    if read is not None:
        q = q.filter_by(is_read=read.lower() == "true")

    pagination = (
        q.order_by(Notification.created_at.desc(), Notification.id.desc())
        .paginate(page=page, per_page=15, error_out=False)
    )
    return jsonify(
        notifications=[n.to_dict() for n in pagination.items],
        page=pagination.page,
        total=pagination.total,
        unread_count=_unread_count(g.user.id),
    ), 200


# registered before /<id>/read so "read-all" is never taken for an id
@notifications_bp.put("/read-all")
@login_required
def mark_all_read():
    updated = (
        Notification.query
        .filter_by(user_id=g.user.id, is_read=False)
        .update({"is_read": True}, synchronize_session=False)
    )
    db.session.commit()
    return jsonify(message="All notifications marked as read", updated=updated, unread_count=0), 200


@notifications_bp.put("/<int:notification_id>/read")
@login_required
def mark_read(notification_id: int):
    notification = _own_notification(notification_id)
    if not notification:
        return jsonify(error="Notification not found", kind="not_found"), 404

    notification.is_read = True
    db.session.commit()
    return jsonify(
        message="Notification marked as read",
        notification=notification.to_dict(),
        unread_count=_unread_count(g.user.id),
    ), 200


@notifications_bp.delete("/<int:notification_id>")
@login_required
def delete_notification(notification_id: int):
    notification = _own_notification(notification_id)
    if not notification:
        return jsonify(error="Notification not found", kind="not_found"), 404

    db.session.delete(notification)
    db.session.commit()
    return jsonify(message="Notification deleted"), 200
