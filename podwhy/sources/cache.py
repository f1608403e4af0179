"""Loading and saving dependency records as a YAML snapshot.

A snapshot is a YAML list of mappings with ``name`` and ``dependencies``
keys:

    - name: A
      dependencies: [B, C]
    - name: B
      dependencies: []

Snapshots written by the CocoaPods ``query`` plugin use Ruby symbol keys,
which appear as ``:name`` and ``:dependencies`` when read from Python. Both
spellings are accepted.
"""

from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from podwhy.errors import RecordCacheError
from podwhy.graph.builder import DependencyRecord

logger = structlog.get_logger(__name__)


class CachedRecord(BaseModel):
    """One entry of a record snapshot."""

    name: str = Field(min_length=1, description="Pod name")
    dependencies: list[str] = Field(
        default_factory=list,
        description="Names of direct dependencies",
    )

    model_config = {"str_strip_whitespace": True}

    @model_validator(mode="before")
    @classmethod
    def strip_symbol_keys(cls, data: Any) -> Any:
        """Accept Ruby symbol keys (``:name``) as plain keys."""
        if isinstance(data, dict):
            return {
                key.lstrip(":") if isinstance(key, str) else key: value
                for key, value in data.items()
            }
        return data

    @model_validator(mode="after")
    def dependencies_not_blank(self) -> "CachedRecord":
        if any(not dep for dep in self.dependencies):
            msg = f"Pod {self.name} has an empty dependency name"
            raise ValueError(msg)
        return self

    def to_record(self) -> DependencyRecord:
        return DependencyRecord(self.name, tuple(self.dependencies))


def parse_records(data: Any, source: str = "<memory>") -> list[DependencyRecord]:
    """Validate parsed YAML data and convert it to dependency records.

    Args:
        data: The loaded YAML document
        source: Where the data came from, for error messages

    Raises:
        RecordCacheError: If the document is not a list of valid records
    """
    if data is None:
        return []
    if not isinstance(data, list):
        raise RecordCacheError(source, f"expected a list of records, got {type(data).__name__}")

    records = []
    for index, entry in enumerate(data):
        try:
            records.append(CachedRecord.model_validate(entry).to_record())
        except ValidationError as e:
            logger.exception("invalid_cached_record", path=source, index=index)
            raise RecordCacheError(source, f"record {index} is invalid: {e}") from e

    return records


def load_records(path: str | Path) -> list[DependencyRecord]:
    """Load dependency records from a YAML snapshot.

    Raises:
        RecordCacheError: If the file is missing, is not valid YAML or holds
            invalid records
    """
    cache_path = Path(path)

    if not cache_path.exists():
        raise RecordCacheError(str(cache_path), "file not found")

    logger.info("loading_record_cache", path=str(cache_path))

    try:
        with cache_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.exception("yaml_parse_error", error=str(e), path=str(cache_path))
        raise RecordCacheError(str(cache_path), f"invalid YAML: {e}") from e

    records = parse_records(data, str(cache_path))

    logger.info("record_cache_loaded", path=str(cache_path), record_count=len(records))

    return records


def dump_records(records: list[DependencyRecord], path: str | Path) -> None:
    """Write dependency records as a YAML snapshot readable by load_records."""
    cache_path = Path(path)
    data = [
        {"name": record.name, "dependencies": list(record.dependencies)}
        for record in records
    ]

    with cache_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, allow_unicode=True)

    logger.info("record_cache_written", path=str(cache_path), record_count=len(records))
