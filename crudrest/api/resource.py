"""Generic REST resource over a CRUD service.

A CrudResource owns an APIRouter with the uniform CRUD routes:

    GET    /            list, optionally filtered by query parameters
    GET    /_count      count, optionally filtered
    GET    /{id}        fetch one
    POST   /            create
    PUT    /{id}        update or replace
    DELETE /{id}        delete one
    DELETE /            delete all, optionally filtered

Every route checks the request shape first, then goes through an overridable
hook to the service. Failures are translated into responses at this boundary.
"""

import logging
import re
from collections.abc import Mapping
from typing import Annotated, Any, Generic

from fastapi import APIRouter, Body, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from crudrest.core.config import CrudOptions
from crudrest.services.crud import CrudService
from crudrest.services.crud.base import Filters
from crudrest.shared.entity import EntityT
from crudrest.shared.errors import (
    BadRequestError,
    BodyIdMismatchError,
    BodyIdNotNullError,
    ErrorResponse,
    ErrorTranslator,
    FeatureDisabledError,
    NotFoundError,
    ValidationErrorResponse,
)

logger = logging.getLogger(__name__)

_TRAILING_ID = re.compile(r"/\d+$")

EntityBody = Annotated[dict[str, Any], Body()]

FILTER_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Unknown filter field or malformed value"},
}
SAVE_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ValidationErrorResponse, "description": "Constraint violations or bad id"},
}


class CrudResource(Generic[EntityT]):
    """REST resource exposing one CRUD service.

    Subclasses customize behavior by overriding the hooks
    (`find_all_entities_by`, `find_entity_by_id`, `count_all_entities_by`,
    `save_entity`, `delete_entity`, `delete_all_entities_by`) and
    `get_service()`. Resources nested under a parent path read the parent
    key with `path_param()`.

    Example:
        resource = CrudResource(customer_service, prefix="/customers",
                                options=settings.crud, translator=translator)
        app.include_router(resource.router)
    """

    def __init__(
        self,
        service: CrudService[EntityT],
        *,
        prefix: str,
        options: CrudOptions,
        translator: ErrorTranslator,
        schema: type[BaseModel] | None = None,
        tags: list[str] | None = None,
    ) -> None:
        self._service = service
        self._options = options
        self._translator = translator
        self._schema = schema if schema is not None else service.schema
        self.router = APIRouter(prefix=prefix, tags=tags or [prefix.strip("/").split("/")[0]])
        self._register_routes()

    def _register_routes(self) -> None:
        add = self.router.add_api_route
        # Collection routes also answer without the trailing slash
        for path, in_schema in (("/", True), ("", False)):
            add(
                path,
                self._list,
                methods=["GET"],
                responses=FILTER_RESPONSES,
                include_in_schema=in_schema,
            )
            add(
                path,
                self._create,
                methods=["POST"],
                status_code=status.HTTP_201_CREATED,
                responses=SAVE_RESPONSES,
                include_in_schema=in_schema,
            )
            add(
                path,
                self._delete_all,
                methods=["DELETE"],
                status_code=status.HTTP_204_NO_CONTENT,
                responses={**FILTER_RESPONSES, 403: {"description": "Delete-all disabled"}},
                include_in_schema=in_schema,
            )
        # Before /{entity_id} so the literal segment wins
        add(
            "/_count",
            self._count,
            methods=["GET"],
            responses={**FILTER_RESPONSES, 403: {"description": "Counting disabled"}},
        )
        add(
            "/{entity_id}",
            self._get,
            methods=["GET"],
            responses={404: {"description": "Entity not found"}},
        )
        add("/{entity_id}", self._update, methods=["PUT"], responses=SAVE_RESPONSES)
        add(
            "/{entity_id}",
            self._delete,
            methods=["DELETE"],
            status_code=status.HTTP_204_NO_CONTENT,
        )

    # ==================== Hooks ====================

    def get_service(self) -> CrudService[EntityT]:
        """Return the service backing this resource."""
        return self._service

    async def find_all_entities_by(
        self, request: Request, filters: Filters | None
    ) -> list[EntityT]:
        if filters is None:
            return await self.get_service().find_all()
        return await self.get_service().find_by(filters)

    async def find_entity_by_id(self, request: Request, entity_id: int) -> EntityT | None:
        return await self.get_service().find_by_id(entity_id)

    async def count_all_entities_by(self, request: Request, filters: Filters | None) -> int:
        if filters is None:
            return await self.get_service().count_all()
        return await self.get_service().count_by(filters)

    async def save_entity(self, request: Request, entity: EntityT) -> EntityT:
        return await self.get_service().save(entity)

    async def delete_entity(self, request: Request, entity_id: int) -> None:
        await self.get_service().delete(entity_id)

    async def delete_all_entities_by(self, request: Request, filters: Filters | None) -> None:
        if filters is None:
            await self.get_service().delete_all()
        else:
            await self.get_service().delete_by(filters)

    # ==================== Helpers ====================

    @staticmethod
    def path_param(request: Request, name: str) -> int:
        """Read an integer path parameter, e.g. the parent id of a nested resource."""
        raw = request.path_params.get(name)
        try:
            return int(raw)
        except (TypeError, ValueError) as e:
            raise BadRequestError(f"Path parameter {name!r} must be an integer") from e

    def filters_of(self, request: Request) -> Filters | None:
        """Filter set of the request, or None when filtering does not apply.

        Only the first value of a repeated parameter is used.
        """
        params = request.query_params
        if not self._options.allow_filters or not params:
            return None
        filters = {key: params.getlist(key)[0] for key in params.keys()}
        logger.debug("Filtering %s by %s", request.url.path, filters)
        return filters

    @staticmethod
    def location_of(request: Request, entity_id: int | None) -> str:
        """URL of the entity, derived from the request path."""
        path = _TRAILING_ID.sub("", request.url.path.rstrip("/"))
        return f"{path}/{entity_id}"

    def serialize(self, entity: EntityT) -> Any:
        """Convert an entity to its JSON representation."""
        if self._schema is not None:
            return jsonable_encoder(self._schema.model_validate(entity, from_attributes=True))
        to_dict = getattr(entity, "to_dict", None)
        if callable(to_dict):
            return jsonable_encoder(to_dict())
        return jsonable_encoder(
            {key: value for key, value in vars(entity).items() if not key.startswith("_")}
        )

    def _entity_response(
        self, request: Request, entity: EntityT, status_code: int
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content=self.serialize(entity),
            headers={"Location": self.location_of(request, entity.id)},
        )

    # ==================== Routes ====================

    async def _list(self, request: Request) -> Response:
        try:
            entities = await self.find_all_entities_by(request, self.filters_of(request))
        except Exception as e:
            return self._translator.translate(e)
        return JSONResponse([self.serialize(entity) for entity in entities])

    async def _count(self, request: Request) -> Response:
        try:
            if not self._options.allow_count:
                raise FeatureDisabledError("Counting")
            count = await self.count_all_entities_by(request, self.filters_of(request))
        except Exception as e:
            return self._translator.translate(e)
        return JSONResponse(count)

    async def _get(self, request: Request, entity_id: int) -> Response:
        try:
            entity = await self.find_entity_by_id(request, entity_id)
            if entity is None:
                raise NotFoundError()
        except Exception as e:
            return self._translator.translate(e)
        return JSONResponse(self.serialize(entity))

    async def _create(self, request: Request, body: EntityBody) -> Response:
        try:
            if body.get("id") is not None:
                raise BodyIdNotNullError()
            entity = self.get_service().create(body)
            saved = await self.save_entity(request, entity)
        except Exception as e:
            return self._translator.translate(e)
        return self._entity_response(request, saved, status.HTTP_201_CREATED)

    async def _update(self, request: Request, entity_id: int, body: EntityBody) -> Response:
        try:
            body_id = body.get("id")
            if body_id is not None and str(body_id) != str(entity_id):
                raise BodyIdMismatchError()
            entity = self.get_service().create(_with_id(body, entity_id))
            entity.id = entity_id
            saved = await self.save_entity(request, entity)
        except Exception as e:
            return self._translator.translate(e)
        return self._entity_response(request, saved, status.HTTP_200_OK)

    async def _delete(self, request: Request, entity_id: int) -> Response:
        try:
            await self.delete_entity(request, entity_id)
        except Exception as e:
            return self._translator.translate(e)
        return Response(status_code=status.HTTP_204_NO_CONTENT)

    async def _delete_all(self, request: Request) -> Response:
        try:
            if not self._options.allow_delete_all:
                raise FeatureDisabledError("Delete-all")
            await self.delete_all_entities_by(request, self.filters_of(request))
        except Exception as e:
            return self._translator.translate(e)
        return Response(status_code=status.HTTP_204_NO_CONTENT)


def _with_id(body: Mapping[str, Any], entity_id: int) -> dict[str, Any]:
    return {**body, "id": entity_id}
