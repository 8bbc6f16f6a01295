"""REST resources for payments.

Payments are exposed twice: as a flat collection under /payments and scoped
to one customer under /customers/{customer_id}/payments.
"""

from fastapi import Request

from crudrest.api.resource import CrudResource
from crudrest.core.config import CrudOptions
from crudrest.services.crud import CrudService
from crudrest.services.crud.base import Filters
from crudrest.shared.errors import ErrorTranslator, NotFoundError

from .models import Payment

# Association filter on Payment.customer
CUSTOMER_FILTER = "customerId"


class PaymentResource(CrudResource[Payment]):
    """Uniform CRUD routes under /payments."""

    def __init__(
        self,
        service: CrudService[Payment],
        *,
        options: CrudOptions,
        translator: ErrorTranslator,
    ) -> None:
        super().__init__(
            service,
            prefix="/payments",
            options=options,
            translator=translator,
            tags=["Payments"],
        )


class CustomerPaymentsResource(CrudResource[Payment]):
    """Payments of the customer named by the path.

    Every hook is restricted to that customer: reads, counts and deletes
    only see its payments, and saved payments are attached to it.
    """

    def __init__(
        self,
        service: CrudService[Payment],
        *,
        options: CrudOptions,
        translator: ErrorTranslator,
    ) -> None:
        super().__init__(
            service,
            prefix="/customers/{customer_id}/payments",
            options=options,
            translator=translator,
            tags=["Payments"],
        )

    def customer_id(self, request: Request) -> int:
        return self.path_param(request, "customer_id")

    def scoped(self, request: Request, filters: Filters | None) -> Filters:
        return {**(filters or {}), CUSTOMER_FILTER: str(self.customer_id(request))}

    async def find_all_entities_by(
        self, request: Request, filters: Filters | None
    ) -> list[Payment]:
        return await self.get_service().find_by(self.scoped(request, filters))

    async def find_entity_by_id(self, request: Request, entity_id: int) -> Payment | None:
        payment = await self.get_service().find_by_id(entity_id)
        if payment is None or payment.customer_id != self.customer_id(request):
            return None
        return payment

    async def count_all_entities_by(self, request: Request, filters: Filters | None) -> int:
        return await self.get_service().count_by(self.scoped(request, filters))

    async def save_entity(self, request: Request, entity: Payment) -> Payment:
        if entity.id is not None:
            # Another customer's payment is invisible here, so it cannot be replaced
            existing = await self.get_service().find_by_id(entity.id)
            if existing is not None and existing.customer_id != self.customer_id(request):
                raise NotFoundError()
        entity.customer_id = self.customer_id(request)
        return await self.get_service().save(entity)

    async def delete_entity(self, request: Request, entity_id: int) -> None:
        if await self.find_entity_by_id(request, entity_id) is not None:
            await self.get_service().delete(entity_id)

    async def delete_all_entities_by(self, request: Request, filters: Filters | None) -> None:
        await self.get_service().delete_by(self.scoped(request, filters))
