"""
Module: exceptions

Purpose: Domain-specific exception hierarchy for the car sales data core.

Categorizers and aggregations never raise on data: they degrade to a sentinel
label or an empty result. These exceptions cover the boundaries instead
(loading files, invalid configuration tables, failed pipeline stages).
"""

from typing import Any


class CarSalesError(Exception):
    """Base exception for all car sales data core errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        self.message = message
        self.context = context or {}
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


class DataValidationError(CarSalesError):
    """Raised when a record fails schema validation at the input boundary."""

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if field is not None:
            ctx["field"] = field
        if value is not None:
            ctx["value"] = value
        super().__init__(message, context=ctx)
        self.field = field
        self.value = value


class DataLoadError(CarSalesError):
    """Raised when the source dataset cannot be read."""

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if path is not None:
            ctx["path"] = path
        super().__init__(message, context=ctx)
        self.path = path


class CategorizationConfigError(CarSalesError):
    """Raised when a categorization table or brand list is inconsistent."""

    def __init__(
        self,
        message: str,
        *,
        table: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if table is not None:
            ctx["table"] = table
        super().__init__(message, context=ctx)
        self.table = table


class AggregationError(CarSalesError):
    """Raised when an aggregation is called with invalid parameters."""

    def __init__(
        self,
        message: str,
        *,
        operation: str,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        ctx["operation"] = operation
        super().__init__(message, context=ctx)
        self.operation = operation


class PipelineError(CarSalesError):
    """Raised when a dashboard pipeline stage fails."""

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        ctx = context or {}
        if stage is not None:
            ctx["stage"] = stage
        super().__init__(message, context=ctx)
        self.stage = stage
