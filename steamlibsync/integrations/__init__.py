from __future__ import annotations

__all__: list[str] = ["FamilySharingClient", "SteamProfileScraper", "SteamWebAPI"]

from steamlibsync.integrations.family_sharing import FamilySharingClient
from steamlibsync.integrations.steam_profile_scraper import SteamProfileScraper
from steamlibsync.integrations.steam_web_api import SteamWebAPI
