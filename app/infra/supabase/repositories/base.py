"""Base repository with common CRUD operations"""
from typing import Generic, TypeVar, Type, Optional, List, Dict, Any
from pydantic import BaseModel
from supabase import Client

T = TypeVar('T', bound=BaseModel)
CreateT = TypeVar('CreateT', bound=BaseModel)
UpdateT = TypeVar('UpdateT', bound=BaseModel)


class BaseRepository(Generic[T, CreateT, UpdateT]):
    """
    Base repository providing common database operations.
    Hides Supabase implementation details from the rest of the application.

    Every read and write is scoped by an equality filter dict, so callers
    decide which rows an operation may touch. PostgREST failures surface as
    postgrest.exceptions.APIError.
    """

    def __init__(self, client: Client, table_name: str, model_class: Type[T]):
        self._client = client
        self._table_name = table_name
        self._model_class = model_class

    def _to_model(self, data: Dict[str, Any]) -> T:
        """Convert database dict to domain model"""
        return self._model_class(**data)

    def _to_models(self, data: List[Dict[str, Any]]) -> List[T]:
        """Convert list of database dicts to domain models"""
        return [self._to_model(item) for item in data]

    def _apply_filters(self, query, filters: Dict[str, Any]):
        for key, value in filters.items():
            query = query.eq(key, value)
        return query

    async def find_by_filters(
        self,
        filters: Dict[str, Any],
        order_by: Optional[str] = None,
        desc: bool = False,
    ) -> List[T]:
        """Find records matching filters, optionally ordered by a single column"""
        query = self._apply_filters(self._client.table(self._table_name).select("*"), filters)

        if order_by:
            query = query.order(order_by, desc=desc)

        response = query.execute()
        return self._to_models(response.data)

    async def create(self, data: CreateT) -> T:
        """Create a new record"""
        data_dict = data.model_dump(mode='json')
        response = self._client.table(self._table_name).insert(data_dict).execute()

        if not response.data:
            raise ValueError("Failed to create record")

        return self._to_model(response.data[0])

    async def update_by_filters(self, filters: Dict[str, Any], data: UpdateT) -> Optional[T]:
        """Update the record matching filters, None if nothing matched"""
        data_dict = data.model_dump(exclude_unset=True, mode='json')

        if not data_dict:
            # No fields to update
            matches = await self.find_by_filters(filters)
            return matches[0] if matches else None

        query = self._client.table(self._table_name).update(data_dict)
        response = self._apply_filters(query, filters).execute()

        if not response.data:
            return None

        return self._to_model(response.data[0])

    async def delete_by_filters(self, filters: Dict[str, Any]) -> int:
        """Delete records matching filters, returns the number of deleted rows"""
        query = self._client.table(self._table_name).delete()
        response = self._apply_filters(query, filters).execute()
        return len(response.data) if response.data else 0
