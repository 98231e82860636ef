"""Pydantic input models for batch processing.

A batch is an ordered list of work items. Each item names an operation, carries
that operation's parameters and may carry binary attachments that the
operation references by name through ``binary_property_names``.
"""

from __future__ import annotations

from typing import Any, Literal, Optional
from pydantic import BaseModel, Field

from enml_notes.data_models import WorkItem

from .base import BaseStoreInput
from .note_models import AttachmentInput

BatchOperation = Literal["create", "read", "update", "delete", "search"]


class BatchItemInput(BaseModel):
    """One work item of a batch."""

    operation: BatchOperation = Field(
        description="Operation to run for this item."
    )

    parameters: dict[str, Any] = Field(
        default_factory=dict,
        description=(
            "Parameters of the operation, using the same fields as the matching "
            "single-note tool (without 'store' and 'attachments')."
        ),
        examples=[{"title": "Receipt", "content": "Lunch", "binary_property_names": "receipt"}]
    )

    binary: list[AttachmentInput] = Field(
        default_factory=list,
        description="Binary payloads available to this item, keyed by their name."
    )

    def to_work_item(self) -> WorkItem:
        return WorkItem(
            json={"operation": self.operation, **self.parameters},
            binary={attachment.name: attachment.to_payload() for attachment in self.binary},
        )


class RunBatchInput(BaseStoreInput):
    """Input model for run_enml_batch tool.

    Examples:
        >>> RunBatchInput(items=[{"operation": "delete", "parameters": {"guid": "..."}}])
    """

    items: list[BatchItemInput] = Field(
        min_length=1,
        description="Work items, processed one at a time in order."
    )

    continue_on_fail: Optional[bool] = Field(
        None,
        description=(
            "Emit failed items with an 'error' entry and keep going instead of "
            "stopping the batch. Default comes from stores.yaml settings."
        )
    )

    class Config:
        """Pydantic model configuration."""
        json_schema_extra = {
            "examples": [
                {
                    "items": [
                        {
                            "operation": "create",
                            "parameters": {"title": "Receipt", "content": "Lunch"},
                            "binary": [{"name": "data", "data": "aGVsbG8=", "mime_type": "text/plain"}]
                        },
                        {"operation": "delete", "parameters": {"guid": "2f1c5a34-8e1b-4c55-9d0e-3a1f7c2b9e10"}}
                    ],
                    "continue_on_fail": True
                }
            ]
        }
