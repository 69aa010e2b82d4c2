"""Settings for resolving raw text and naive instants.

Settings are immutable. Build one explicitly and pass it to the validators or
Interval factories to override the defaults read from the environment.
"""

import logging
import os
from dataclasses import dataclass
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from calperiod.errors import ValidationError

logger = logging.getLogger(__name__)

_TRUE = {"1", "true", "yes", "on"}


@dataclass(frozen=True, kw_only=True)
class Settings:
    # IANA zone used for instants that carry no offset
    tz: str = "UTC"

    # Forwarded to dateutil.parser.parse for ambiguous dates like 01/02/2012
    dayfirst: bool = False
    yearfirst: bool = False

    def __post_init__(self) -> None:
        try:
            ZoneInfo(self.tz)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValidationError(
                f"Unknown timezone {self.tz!r}.\n"
                f"Hint: use an IANA name such as 'UTC' or 'Europe/Paris'"
            ) from exc

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.tz)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from CALPERIOD_TZ, CALPERIOD_DAYFIRST and CALPERIOD_YEARFIRST."""
        return cls(
            tz=os.environ.get("CALPERIOD_TZ", "UTC"),
            dayfirst=os.environ.get("CALPERIOD_DAYFIRST", "").lower() in _TRUE,
            yearfirst=os.environ.get("CALPERIOD_YEARFIRST", "").lower() in _TRUE,
        )


def load_default_settings() -> Settings:
    """Settings from the environment, or plain UTC defaults if they are invalid."""
    try:
        return Settings.from_env()
    except ValidationError as exc:
        logger.warning("Ignoring invalid CALPERIOD_* environment: %s", exc)
        return Settings()


DEFAULT_SETTINGS = load_default_settings()
