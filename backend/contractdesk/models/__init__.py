"""ORM Models — SQLAlchemy declarative tables for every stored entity.

Invariants:
    - All models inherit from Base (db/base.py)
    - Project is the aggregate root; every other row is keyed by
      (repo_full_name, provider) plus its own discriminator

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata knows every table before
      create_all or any query runs
"""

from contractdesk.models.project import ProjectRow  # noqa: F401
from contractdesk.models.contributor import ContributorRow  # noqa: F401
from contractdesk.models.contract import ContractRow  # noqa: F401
from contractdesk.models.task import TaskRow  # noqa: F401
from contractdesk.models.resignation import ResignationRow  # noqa: F401
from contractdesk.models.wallet import WalletRow  # noqa: F401
from contractdesk.models.payment_method import PaymentMethodRow  # noqa: F401
