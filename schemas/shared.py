from enum import Enum
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Serialises to the camelCase layout used in storage and on the wire."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)

class SortMode(str, Enum):
    UPVOTES = "upvotes"
    NEWEST = "newest"
    TRENDING = "trending"

class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"
