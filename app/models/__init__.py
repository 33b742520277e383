"""
Community Governance Platform
Model package — shared SQLAlchemy handle and id helpers.

Every model module imports ``db`` from here. Importing this package does NOT
import the model modules; ``app.models.registry`` does that so the metadata
is complete before the schema guard inspects it.
"""

import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _uuid():
    return str(uuid.uuid4())


def _utcnow():
    return datetime.now(timezone.utc)
