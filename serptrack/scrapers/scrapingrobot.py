from typing import TYPE_CHECKING, Any, Dict
from urllib.parse import quote

from serptrack.scrapers.base import ScraperSettings
from serptrack.utils.countries import get_country_language, get_country_name
from serptrack.utils.uule import encode_uule

if TYPE_CHECKING:
    from serptrack.services.settings_service import AppSettingsData


def build_location(keyword: Dict[str, Any]) -> str:
    """城市 + 国家名称，用于生成 UULE"""
    city = (keyword.get("city") or "").strip()
    country_name = get_country_name(keyword.get("country") or "US")
    if city and country_name:
        return f"{city}, {country_name}"
    return city


def scrape_url(keyword: Dict[str, Any], app_settings: "AppSettingsData") -> str:
    country = keyword.get("country") or "US"
    device = "&mobile=true" if keyword.get("device") == "mobile" else ""
    lang = get_country_language(country)

    uule = encode_uule(build_location(keyword))
    location_param = f"&uule={quote(uule, safe='')}" if uule else ""

    google_url = (
        f"https://www.google.com/search?num=100&hl={lang}"
        f"&q={quote(keyword['keyword'], safe='')}{location_param}"
    )
    return (
        f"https://api.scrapingrobot.com/?token={app_settings.scraping_api}"
        f"&proxyCountry={country}&render=false{device}&url={quote(google_url, safe='')}"
    )


scraping_robot = ScraperSettings(
    id="scrapingrobot",
    name="Scraping Robot",
    website="scrapingrobot.com",
    allows_city=True,
    scrape_url=scrape_url,
    result_object_key="result",
)
