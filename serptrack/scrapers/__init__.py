from serptrack.scrapers.base import (
    ScraperSettings,
    ScraperError,
    ScraperNetworkError,
    ScraperResponseError,
)
from serptrack.scrapers.scrapingrobot import scraping_robot

SCRAPERS = {
    scraping_robot.id: scraping_robot,
}


def get_scraper(scraper_type: str):
    return SCRAPERS.get(scraper_type)


__all__ = [
    "ScraperSettings",
    "ScraperError",
    "ScraperNetworkError",
    "ScraperResponseError",
    "SCRAPERS",
    "get_scraper",
]
