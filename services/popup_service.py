"""
Popup Service - Decides which corner popups a page load shows

Each banner is suppressed by a flag cookie for its cool-down window.
Banners can be chained: a chained banner is only evaluated once the
banner it follows has resolved (already flagged, or shown on this load).
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Mapping, Optional

from models import CookieFlag, PopupBanner, PopupDisplay

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class PopupDecision:
    """Banners to display on this load and the flag cookies to write."""
    displays: List[PopupDisplay] = field(default_factory=list)
    flags: List[CookieFlag] = field(default_factory=list)

    @property
    def names(self) -> List[str]:
        return [d.banner.name for d in self.displays]

    def __bool__(self) -> bool:
        return bool(self.displays)


class PopupGate:
    """Cookie-gated chain of popup banners."""

    def __init__(self, banners: Iterable[PopupBanner],
                 clock: Callable[[], datetime] = utc_now):
        """
        Initialize the gate.

        Args:
            banners: Banners in evaluation order
            clock: Returns the current time; injected by tests
        """
        self.banners: Dict[str, PopupBanner] = {}
        for banner in banners:
            if banner.name in self.banners:
                raise ValueError(f"Duplicate popup banner: {banner.name}")
            self.banners[banner.name] = banner
        self.clock = clock

    @classmethod
    def from_config(cls, banner_configs: List[dict], consent_enabled: bool = True,
                    clock: Callable[[], datetime] = utc_now) -> "PopupGate":
        """
        Build a gate from config dictionaries.

        With ``consent_enabled`` off the consent banner is dropped and
        anything chained behind it stands alone.
        """
        banners = []
        for entry in banner_configs:
            banner = PopupBanner(**entry)
            if banner.name == 'consent' and not consent_enabled:
                continue
            banners.append(banner)

        names = {b.name for b in banners}
        banners = [
            b if b.after is None or b.after in names else replace(b, after=None)
            for b in banners
        ]
        return cls(banners, clock=clock)

    def get(self, name: str) -> Optional[PopupBanner]:
        return self.banners.get(name)

    def flag_for(self, banner: PopupBanner) -> CookieFlag:
        """Flag cookie suppressing ``banner`` until now + its cool-down."""
        return CookieFlag(
            name=banner.cookie_name,
            expires=self.clock() + timedelta(days=banner.cooldown_days),
        )

    def is_flagged(self, banner: PopupBanner, cookies: Optional[Mapping[str, str]]) -> bool:
        """True when the banner's flag cookie is present. No cookies means unflagged."""
        if not cookies:
            return False
        try:
            return cookies.get(banner.cookie_name) is not None
        except (AttributeError, TypeError):
            return False

    def evaluate(self, cookies: Optional[Mapping[str, str]]) -> PopupDecision:
        """
        Decide which banners this page load shows.

        Args:
            cookies: The request's cookies (None when unavailable)

        Returns:
            PopupDecision listing banners in display order and the flag cookies
            of banners visible as soon as the page loads. Deferred and delayed
            banners are flagged by the browser when they actually appear.
        """
        decision = PopupDecision()
        shown_now = set()

        for banner in self.banners.values():
            if self.is_flagged(banner, cookies):
                continue

            display = PopupDisplay(banner=banner, deferred=banner.after in shown_now)
            decision.displays.append(display)
            if not display.flag_on_show:
                decision.flags.append(self.flag_for(banner))
            shown_now.add(banner.name)

        if decision:
            logger.debug(f"Popups to display: {decision.names}")
        return decision

    def dismiss(self, name: str) -> Optional[CookieFlag]:
        """Flag cookie for an explicit dismissal, or None for an unknown banner."""
        banner = self.banners.get(name)
        if banner is None:
            return None
        return self.flag_for(banner)
