# Environmental Resilience Monitor — Database Models
# Import all models here for SQLAlchemy discovery

from app.models.zone import Zone                          # noqa
from app.models.air_quality_log import AirQualityLog      # noqa
from app.models.alert import Alert                        # noqa
from app.models.action_report import ActionReport         # noqa
from app.models.community_report import CommunityReport   # noqa
