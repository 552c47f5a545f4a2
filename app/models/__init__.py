# Campus Gate Entry: Database Models
# Import all models here for SQLAlchemy discovery

from app.models.authority import Authority          # noqa
from app.models.visitor import Visitor              # noqa
from app.models.notification import Notification    # noqa
from app.models.bus_entry import BusEntry           # noqa
from app.models.user import User                    # noqa
