import json
from datetime import datetime
from models.db import db

class AuditLog(db.Model):
    """Append-only record of security and booking events."""
    __tablename__ = "audit_logs"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, nullable=True)  # null for anonymous events
    action = db.Column(db.String(80), nullable=False, index=True)  # BOOKING_CREATE, LOGIN_FAIL, ...
    entity = db.Column(db.String(80), nullable=True)
    entity_id = db.Column(db.String(80), nullable=True)

    ip = db.Column(db.String(64), nullable=True)
    user_agent = db.Column(db.String(255), nullable=True)
    metadata_json = db.Column(db.Text, nullable=True)

    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    @property
    def details(self) -> dict:
        return json.loads(self.metadata_json) if self.metadata_json else {}

    def __repr__(self):
        return f"<AuditLog {self.action} {self.entity}:{self.entity_id}>"
