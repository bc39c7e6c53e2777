"""Wire models for asynchronous responses."""

from typing import Any, Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field


class AjaxResult(BaseModel):
    """Partial-content response body.

    The three rendered fragments are serialized as ``newContent``,
    ``breadcrumbs`` and ``flashes``; passthrough values are merged on top
    and take precedence on key collisions.
    """

    model_config = ConfigDict(populate_by_name=True)

    new_content: str = Field(default="", alias="newContent")
    breadcrumbs_markup: str = Field(default="", alias="breadcrumbs")
    flashes_markup: str = Field(default="", alias="flashes")
    passthrough: Dict[str, Any] = Field(default_factory=dict, exclude=True)

    def to_payload(self) -> Dict[str, Any]:
        payload = self.model_dump(by_alias=True)
        payload.update(self.passthrough)
        return payload

    @classmethod
    def build(
        cls,
        new_content: str,
        breadcrumbs_markup: str,
        flashes_markup: str,
        passthrough: Mapping[str, Any],
    ) -> "AjaxResult":
        return cls(
            new_content=new_content,
            breadcrumbs_markup=breadcrumbs_markup,
            flashes_markup=flashes_markup,
            passthrough=dict(passthrough),
        )
