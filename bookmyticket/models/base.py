import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel

from bookmyticket.db.store import Document

logger = logging.getLogger(__name__)

R = TypeVar("R", bound="StoredRecord")


def coerce_timestamp(value: Any) -> Optional[datetime]:
    """Stored timestamp to a UTC-aware datetime, or None when it cannot be read."""
    if isinstance(value, dict) and "seconds" in value:
        try:
            return datetime.fromtimestamp(float(value["seconds"]), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError):
            return None
    if isinstance(value, str) and value.strip():
        try:
            value = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if isinstance(value, datetime):
        # Naive values are taken to be UTC
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    return None


def coerce_text(value: Any) -> Optional[str]:
    if value is None or isinstance(value, (dict, list)):
        return None
    return str(value)


def coerce_text_list(value: Any) -> Optional[List[str]]:
    """A list of strings from a list or a single string. Anything else is None."""
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None and not isinstance(v, (dict, list))]
    return None


def _to_storable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, list):
        return [_to_storable(v) for v in value]
    return value


class StoredRecord(BaseModel):
    """A document read from the store. Field names are snake_case, stored keys camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: str

    @classmethod
    def from_document(cls: Type[R], doc: Document) -> R:
        return cls.model_validate(doc.to_dict())

    @classmethod
    def parse_documents(cls: Type[R], docs: Iterable[Document]) -> List[R]:
        """Parse every document, skipping (and logging) the ones that cannot be read at all."""
        records = []
        for doc in docs:
            try:
                records.append(cls.from_document(doc))
            except ValidationError as e:
                logger.warning("Skipping malformed %s %s: %s", cls.__name__, doc.id, e)
        return records


def storable(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a partial field mapping (already keyed by stored names) for writing."""
    return {k: _to_storable(v) for k, v in fields.items()}
