# worklog type definitions
# Rev 0.1.0

from __future__ import annotations
from typing import Literal

TaskStatus = Literal["todo"]

BreakTypeId = Literal["lunch", "tea", "other"]
