"""Browser collaborator."""

from useragent.browser.actions import describe_action, execute_action
from useragent.browser.manager import BrowserManager, PlaywrightBrowser

__all__ = ["BrowserManager", "PlaywrightBrowser", "describe_action", "execute_action"]
