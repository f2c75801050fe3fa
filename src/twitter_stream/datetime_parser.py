import datetime
import json
from typing import Any, Dict

from dateutil import parser

"""
Subclass implementation of JSON that automatically converts Twitter's created_at fields to datetime objects
"""


def parse_datetime(value: str) -> datetime.datetime:
    """Parse a timestamp like `Sun Jan 01 00:00:00 +0000 2017`.

    Day and month names are read as English whatever the process locale is.
    """
    return parser.parse(value)


class _JSONDecoder(json.JSONDecoder):
    def __init__(self, *args: Any, **kwargs: Any) -> None:
        json.JSONDecoder.__init__(self, object_hook=self.object_hook, *args, **kwargs)

    def object_hook(self, obj: Dict[str, Any]) -> Dict[str, Any]:
        ret = {}
        for key, value in obj.items():
            if key == "created_at" and isinstance(value, str):
                try:
                    ret[key] = parse_datetime(value)
                except (ValueError, OverflowError):
                    ret[key] = value
            else:
                ret[key] = value
        return ret
