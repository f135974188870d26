import uuid

from flask import session


def get_client_id():
    """Stable id for the calling client, kept in the signed session cookie."""
    client_id = session.get("client_id")
    if not client_id:
        client_id = uuid.uuid4().hex
        session["client_id"] = client_id
    return client_id
