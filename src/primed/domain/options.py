"""Field options and cycle policy enums."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel


class PropertyOptions(BaseModel):
    """Per-field construction options.

    Defaults are baked here; callers only pass overrides.
    """

    model_config = {"frozen": True}

    required: bool = True
    array: bool = False

    def merged(self, **overrides: bool | None) -> PropertyOptions:
        """Return a copy with every non-None override applied."""
        update = {k: v for k, v in overrides.items() if v is not None}
        if not update:
            return self
        return self.model_copy(update=update)


class CyclePolicy(StrEnum):
    """Which part of the trace counts as a cycle for required model fields.

    ``active_trace`` — any type currently under construction, including the
    type whose fields are being filled. A required self-reference is left
    unset on the outermost instance.

    ``ancestors`` — strict ancestors only. A required self-reference gets
    one nested default instance whose own self-reference is left unset.
    """

    ACTIVE_TRACE = "active_trace"
    ANCESTORS = "ancestors"
