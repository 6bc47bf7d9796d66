"""JSON formatter — structured output to stdout."""
from __future__ import annotations

import json
import sys


def format_json(data) -> None:
    """Write canonical data as JSON to stdout."""
    json.dump(data, sys.stdout, indent=2, ensure_ascii=False, default=str)
    sys.stdout.write("\n")
