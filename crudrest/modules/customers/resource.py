"""REST resource for customers."""

from crudrest.api.resource import CrudResource
from crudrest.core.config import CrudOptions
from crudrest.services.crud import CrudService
from crudrest.shared.errors import ErrorTranslator

from .models import Customer


class CustomerResource(CrudResource[Customer]):
    """Uniform CRUD routes under /customers."""

    def __init__(
        self,
        service: CrudService[Customer],
        *,
        options: CrudOptions,
        translator: ErrorTranslator,
    ) -> None:
        super().__init__(
            service,
            prefix="/customers",
            options=options,
            translator=translator,
            tags=["Customers"],
        )
