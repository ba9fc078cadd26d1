"""ORM Models — SQLAlchemy declarative models for templates, assignments and overrides.

Invariants:
    - All models inherit from Base (db/base.py)

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from fleetconfig.models.config_template import ConfigTemplate  # noqa: F401
from fleetconfig.models.device_template_assignment import DeviceTemplateAssignment  # noqa: F401
from fleetconfig.models.device_config_override import DeviceConfigOverride  # noqa: F401
