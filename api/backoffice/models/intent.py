"""Post-action intent and flash message models."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple


class FlashKind(str, Enum):
    INFO = "info"
    ERROR = "error"
    WARNING = "warning"
    SUCCESS = "success"


@dataclass(frozen=True)
class FlashMessage:
    """A user-facing notice queued in the session until the next render."""

    kind: FlashKind
    message_key: str
    message_vars: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", FlashKind(self.kind))
        object.__setattr__(self, "message_vars", MappingProxyType(dict(self.message_vars)))


@dataclass(frozen=True)
class ActionIntent:
    """What should happen after an action completed.

    ``return_url`` of None means the URL of the default index route.
    Mappings are copied into read-only proxies so the intent cannot be
    mutated once handed to the composer.
    """

    return_url: Optional[str] = None
    view_parameters: Mapping[str, Any] = field(default_factory=dict)
    content_template_id: str = ""
    passthrough_vars: Mapping[str, Any] = field(default_factory=dict)
    flashes: Tuple[FlashMessage, ...] = ()
    forward_to_handler: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "view_parameters", MappingProxyType(dict(self.view_parameters))
        )
        object.__setattr__(
            self, "passthrough_vars", MappingProxyType(dict(self.passthrough_vars))
        )
        object.__setattr__(self, "flashes", tuple(self.flashes))
