"""Import every model module so ``db.metadata`` lists all tables."""

from app.models import activity as _activity_models      # noqa: F401
from app.models import auth as _auth_models              # noqa: F401
from app.models import content as _content_models        # noqa: F401
from app.models import governance as _governance_models  # noqa: F401
from app.models import project as _project_models        # noqa: F401
from app.models import schema_meta as _schema_meta_models  # noqa: F401
