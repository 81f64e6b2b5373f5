"""Reading announcement batches from YAML or JSON files."""

from pathlib import Path
from typing import Any, List

import yaml
from pydantic import ValidationError

from .exceptions import AnnouncementLoadError
from .models import Announcement


def load_announcements(path: Path) -> List[Announcement]:
    """Load a batch of announcements from a YAML or JSON file.

    The file holds either a list of announcement mappings or a mapping with
    an ``announcements`` list. JSON is parsed by the YAML loader since JSON is
    a subset of YAML.

    Args:
        path: File to read

    Returns:
        Announcements in file order

    Raises:
        AnnouncementLoadError: If the file is missing, unparseable, has the
            wrong shape, or a record fails validation
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise AnnouncementLoadError(f"Announcement file not found: {path}", path=str(path))
    except yaml.YAMLError as e:
        raise AnnouncementLoadError(
            f"Failed to parse announcement file {path}: {e}", path=str(path)
        )

    records = _extract_records(data, path)

    announcements = []
    for index, record in enumerate(records):
        if not isinstance(record, dict):
            raise AnnouncementLoadError(
                f"Record {index} in {path} is not a mapping", path=str(path), index=index
            )
        try:
            announcements.append(Announcement.model_validate(record))
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            raise AnnouncementLoadError(
                f"Record {index} in {path} is invalid: {problems}",
                path=str(path),
                index=index,
            ) from e

    return announcements


def _extract_records(data: Any, path: Path) -> List[Any]:
    if data is None:
        return []
    if isinstance(data, dict) and "announcements" in data:
        data = data["announcements"] or []
    if not isinstance(data, list):
        raise AnnouncementLoadError(
            f"Expected a list of announcements in {path}, got {type(data).__name__}",
            path=str(path),
        )
    return data
