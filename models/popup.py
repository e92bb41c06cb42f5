"""
Popup banner and cookie flag models.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class PopupBanner:
    """A corner popup suppressed by a flag cookie for ``cooldown_days``."""
    name: str
    cookie_name: str
    cooldown_days: int
    content: str
    delay_ms: int = 0
    width: str = "300px"
    position: str = "right"
    after: Optional[str] = None


@dataclass(frozen=True)
class CookieFlag:
    """A name/value/expiry triple written to the browser."""
    name: str
    expires: datetime
    value: str = "true"

    @property
    def max_age(self) -> int:
        """Seconds until expiry relative to now (never negative)."""
        delta = self.expires - datetime.now(self.expires.tzinfo)
        return max(0, int(delta.total_seconds()))


@dataclass(frozen=True)
class PopupDisplay:
    """A banner chosen for display on this page load."""
    banner: PopupBanner
    deferred: bool = False

    @property
    def flag_on_show(self) -> bool:
        """Deferred or delayed banners are flagged by the browser once they appear."""
        return self.deferred or self.banner.delay_ms > 0
