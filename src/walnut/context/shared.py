"""Context for platform-agnostic ``shared`` methods."""

from __future__ import annotations

from walnut.context.base import ExecutionContext
from walnut.core.metadata import Platform


class SharedContext(ExecutionContext):
    """Data-processing context: only the common members, no browser or HTTP."""

    platform = Platform.SHARED
