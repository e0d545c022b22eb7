"""Parsing configuration.

FormsConfig is a frozen dataclass — immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class FormsConfig:
    """Parsing configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = FormsConfig(duplicate_keys="first", log_attempts=True)
        handler.run(fields, config=config)
    """

    # Raw payloads — which occurrence of a repeated key wins
    duplicate_keys: Literal["first", "last"] = "last"

    # Verify the combine function accepts one argument per declared field
    check_arity: bool = True

    # Emit a DEBUG record on "wren.handler" for every form a Handler tries
    log_attempts: bool = False

    def __post_init__(self) -> None:
        if self.duplicate_keys not in ("first", "last"):
            from wren.errors import ConfigurationError

            msg = f"duplicate_keys must be 'first' or 'last', got {self.duplicate_keys!r}"
            raise ConfigurationError(msg)


DEFAULT_CONFIG = FormsConfig()
