"""Entity modules.

Both models are imported here so that relationships between them resolve
whichever module is loaded first.
"""

from crudrest.modules.customers.models import Customer  # noqa: F401
from crudrest.modules.payments.models import Payment  # noqa: F401
