"""Base models for all data models in the report engine.

This module provides the Pydantic base classes shared by input records
(time entries) and output report shapes.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseDataModel(BaseModel):
    """Base class for input data models.

    Provides common configuration for:
    - Validation with type checking
    - Serialization to/from dictionaries
    - Rejection of unknown fields

    Example:
        >>> class Site(BaseDataModel):
        ...     name: str
        >>> Site(name="Depot").model_dump()
        {'name': 'Depot'}
    """

    model_config = ConfigDict(
        # Validate on assignment to catch errors early
        validate_assignment=True,
        strict=False,
        extra="forbid",
        # Accept both snake_case names and camelCase aliases
        populate_by_name=True,
    )


class ReportModel(BaseModel):
    """Base class for report output shapes.

    Report models are immutable and serialize to the camelCase JSON keys
    consumed by the report screen and CSV download.

    Example:
        >>> class Total(ReportModel):
        ...     total_hours: float
        >>> Total(total_hours=1.5).to_json_dict()
        {'totalHours': 1.5}
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    def to_json_dict(self) -> dict:
        """Serialize to a JSON-ready dictionary with camelCase keys."""
        return self.model_dump(by_alias=True, mode="json")
