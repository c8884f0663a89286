"""
Shared document base for RecruitMatch models.

Documents keep ``_id`` as a BSON ObjectId in Python and in MongoDB, and
expose it as a string in API responses.
"""

from datetime import datetime
from typing import Any, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field
from pydantic_core import core_schema


class PyObjectId(ObjectId):
    """ObjectId accepted from BSON or its hex string, serialised as a string in JSON."""

    @classmethod
    def __get_pydantic_core_schema__(cls, _source_type: Any, _handler: Any) -> Any:
        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(ObjectId),
                core_schema.chain_schema(
                    [
                        core_schema.str_schema(),
                        core_schema.no_info_plain_validator_function(cls.validate),
                    ]
                ),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )

    @classmethod
    def validate(cls, value: Any) -> ObjectId:
        if isinstance(value, ObjectId):
            return value
        if isinstance(value, str) and ObjectId.is_valid(value):
            return ObjectId(value)
        raise ValueError(f"Invalid ObjectId: {value}")


class BaseDocument(BaseModel):
    """Fields and dump helpers common to the resumes, jobs and matches collections."""

    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    id: Optional[PyObjectId] = Field(default=None, alias="_id")
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    def model_dump_mongo(self) -> dict[str, Any]:
        """Dump for insertion; an unset ``_id`` is left for MongoDB to assign."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def model_dump_api(self) -> dict[str, Any]:
        """JSON-safe dump with ``id`` as a hex string."""
        data = self.model_dump(mode="json")
        data["id"] = str(self.id) if self.id is not None else None
        return data
