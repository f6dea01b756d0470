from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List

from schema_doctor.core.models import Column


class SchemaIntrospector(ABC):
    """
    Источник сведений о схеме БД для правил.

    Правилам нужны ровно две операции: существует ли таблица и какие у неё колонки.
    Ошибки получения колонок не перехватываются и прерывают прогон.
    """

    @abstractmethod
    def table_exists(self, table_name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    def columns(self, table_name: str) -> List[Column]:
        raise NotImplementedError

    def describe(self) -> dict:
        return {"type": self.__class__.__name__}
