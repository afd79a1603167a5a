import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Type, TypeVar

from pydantic import BaseModel, ValidationError

from .models import ScheduleEntry

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def ensure_list(payload: Any) -> List[Any]:
    """Returns the payload if it is a JSON array, otherwise an empty list."""
    return payload if isinstance(payload, list) else []


def parse_records(payload: Any, model: Type[ModelT]) -> List[ModelT]:
    """
    Validates each item of a list payload against a model.

    Items that are not objects, or that fail validation, are skipped and
    logged; the rest are returned in their original order.
    """
    records = []
    for index, item in enumerate(ensure_list(payload)):
        if not isinstance(item, dict):
            logger.warning(f"Skipping non-object {model.__name__} record at index {index}: {item!r}")
            continue
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid {model.__name__} record at index {index}: {e.error_count()} error(s)")
        except Exception as e:
            logger.warning(f"Skipping unreadable {model.__name__} record at index {index}: {str(e)}")
    return records


def group_entries_by_technician(entries: List[ScheduleEntry]) -> Dict[str, List[ScheduleEntry]]:
    """
    Groups schedule entries by technician_name.

    Technicians appear in the order they are first seen; entries keep their
    original order within each technician. Nothing is sorted by time.

    Args:
        entries (List[ScheduleEntry]): Entries as returned by the API.

    Returns:
        Dict[str, List[ScheduleEntry]]: technician_name -> that technician's entries.
    """
    grouped_entries = defaultdict(list)
    for entry in entries:
        grouped_entries[entry.technician_name].append(entry)
    return dict(grouped_entries)


def find_first(items: List[ModelT], predicate: Callable[[ModelT], bool]):
    for item in items:
        if predicate(item):
            return item
    return None
