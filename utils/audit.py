import json
from flask import request, has_request_context, g
from models import db
from models.audit_log import AuditLog

def log_event(action: str, user_id=None, entity=None, entity_id=None, metadata=None):
    """
    Appends an audit row in its own commit, so call it only after the
    business change has committed. Inside a request the signed-in staff
    member and client address are filled in.
    """
    ip = None
    if has_request_context():
        ip = request.headers.get("X-Forwarded-For", request.remote_addr)
        if user_id is None and g.get("user") is not None:
            user_id = g.user.id

    db.session.add(AuditLog(
        user_id=user_id,
        action=action,
        entity=entity,
        entity_id=str(entity_id)[:80] if entity_id is not None else None,
        ip=ip,
        metadata_json=json.dumps(metadata, default=str) if metadata else None,
    ))
    db.session.commit()
