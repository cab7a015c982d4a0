"""
SerpTrack - 单元测试
"""
import asyncio
import base64
import json
from urllib.parse import parse_qs, unquote, urlparse

import httpx
import pytest


def test_config_settings():
    """测试配置加载"""
    from serptrack.config import settings

    assert settings.HOST == "0.0.0.0"
    assert settings.PORT == 8000
    assert settings.API_KEY == "test-api-key"
    assert settings.SCHEDULER_ENABLED is False


class TestUULE:
    def test_empty_location(self):
        from serptrack.utils.uule import encode_uule

        assert encode_uule("") == ""
        assert encode_uule("   \t ") == ""

    def test_length_digits(self):
        from serptrack.utils.uule import encode_length

        assert encode_length(0) == "A"
        assert encode_length(-3) == "A"
        assert encode_length(1) == "B"
        assert encode_length(26) == "a"
        assert encode_length(63) == "/"
        assert encode_length(64) == "BA"
        assert encode_length(65) == "BB"

    def test_encodes_trimmed_location(self):
        from serptrack.utils.uule import encode_uule

        token = encode_uule("  Berlin, Germany ")
        body = base64.b64encode("Berlin, Germany".encode("utf-8")).decode()
        # 15 字节 -> 'P'
        assert token == f"w+CAIQICIP{body}"

    def test_uses_utf8_byte_length(self):
        from serptrack.utils.uule import encode_uule

        # "München" 为 7 个字符、8 个字节
        token = encode_uule("München")
        assert token.startswith("w+CAIQICII")

    def test_long_location_uses_two_digits(self):
        from serptrack.utils.uule import encode_uule

        token = encode_uule("x" * 64)
        assert token.startswith("w+CAIQICIBA")


class TestKeywordValidator:
    def test_update_mode_priority(self):
        from serptrack.services.keyword_validator import (
            resolve_update_mode, MODE_STICKY, MODE_TAG_MERGE, MODE_FIELDS,
        )

        assert resolve_update_mode({"sticky": True, "tags": {"1": ["a"]}, "keyword": "x"}) == MODE_STICKY
        assert resolve_update_mode({"tags": {"1": ["a"]}, "keyword": "x"}) == MODE_TAG_MERGE
        assert resolve_update_mode({"tags": ["a"], "keyword": "x"}) == MODE_FIELDS
        assert resolve_update_mode({}) == MODE_FIELDS

    @pytest.mark.parametrize("code", ["US", "de", "gB", "jp"])
    def test_known_country_is_uppercased(self, code):
        from serptrack.services.keyword_validator import validate_keyword_fields

        assert validate_keyword_fields({"country": code})["country"] == code.upper()

    @pytest.mark.parametrize("code", ["XX", "xx", "usa", "", "Zz"])
    def test_unknown_country_rejected(self, code):
        from serptrack.services.keyword_validator import validate_keyword_fields, KeywordValidationError

        with pytest.raises(KeywordValidationError, match="Invalid country provided."):
            validate_keyword_fields({"country": code})

    def test_every_country_in_table_is_accepted(self):
        from serptrack.services.keyword_validator import validate_keyword_fields
        from serptrack.utils.countries import COUNTRIES

        for code in COUNTRIES:
            assert validate_keyword_fields({"country": code.lower()})["country"] == code

    @pytest.mark.parametrize("device, expected", [
        ("desktop", "desktop"), ("Mobile", "mobile"), ("DESKTOP", "desktop"),
    ])
    def test_device_case_insensitive(self, device, expected):
        from serptrack.services.keyword_validator import validate_keyword_fields

        assert validate_keyword_fields({"device": device})["device"] == expected

    @pytest.mark.parametrize("device", ["tablet", "", 1, None])
    def test_invalid_device(self, device):
        from serptrack.services.keyword_validator import validate_keyword_fields, KeywordValidationError

        with pytest.raises(KeywordValidationError, match="Invalid device provided."):
            validate_keyword_fields({"device": device})

    def test_city_length_limit(self):
        from serptrack.services.keyword_validator import validate_keyword_fields, KeywordValidationError

        assert validate_keyword_fields({"city": "c" * 120})["city"] == "c" * 120
        assert validate_keyword_fields({"city": "  " + "c" * 120 + "  "})["city"] == "c" * 120
        with pytest.raises(KeywordValidationError, match="120 characters or fewer"):
            validate_keyword_fields({"city": "c" * 121})

    def test_city_null_clears(self):
        from serptrack.services.keyword_validator import validate_keyword_fields, KeywordValidationError

        assert validate_keyword_fields({"city": None})["city"] == ""
        with pytest.raises(KeywordValidationError, match="Invalid city provided."):
            validate_keyword_fields({"city": 12})

    @pytest.mark.parametrize("url, valid", [
        ("not a url", False),
        ("", True),
        ("ftp://x", False),
        ("https://example.com", True),
        ("http://example.com/page?q=1", True),
        ("https://", False),
    ])
    def test_url_rules(self, url, valid):
        from serptrack.services.keyword_validator import validate_keyword_fields, KeywordValidationError

        if valid:
            assert validate_keyword_fields({"url": url})["url"] == url
        else:
            with pytest.raises(KeywordValidationError, match="Invalid URL provided."):
                validate_keyword_fields({"url": url})

    def test_keyword_trimmed(self):
        from serptrack.services.keyword_validator import validate_keyword_fields, KeywordValidationError

        assert validate_keyword_fields({"keyword": "  shoes "})["keyword"] == "shoes"
        with pytest.raises(KeywordValidationError, match="Keyword is required."):
            validate_keyword_fields({"keyword": None})

    def test_tags_normalized(self):
        from serptrack.services.keyword_validator import validate_keyword_fields

        values = validate_keyword_fields({"tags": [" b ", "a", "", "  ", "b"]})
        assert values["tags"] == ["b", "a"]

    def test_non_list_tags_rejected(self):
        from serptrack.services.keyword_validator import validate_keyword_fields, KeywordValidationError

        with pytest.raises(KeywordValidationError, match="Invalid tags payload."):
            validate_keyword_fields({"tags": "a,b"})

    def test_no_valid_fields(self):
        from serptrack.services.keyword_validator import validate_keyword_fields, KeywordValidationError

        with pytest.raises(KeywordValidationError, match="No valid fields provided to update."):
            validate_keyword_fields({"position": 3})

    def test_accepted_update_is_stamped(self):
        from serptrack.services.keyword_validator import validate_keyword_fields

        values = validate_keyword_fields({"keyword": "shoes"})
        assert values["last_updated"] is not None

    def test_merge_tags(self):
        from serptrack.services.keyword_validator import merge_tags

        assert merge_tags(["a", "b"], ["b", "c"], multiple_keywords=True) == ["a", "b", "c"]
        assert merge_tags(["a", "b"], ["b", "c"], multiple_keywords=False) == ["b", "c"]

    def test_sticky_must_be_bool(self):
        from serptrack.services.keyword_validator import validate_sticky, KeywordValidationError

        assert validate_sticky(False) is False
        with pytest.raises(KeywordValidationError):
            validate_sticky(1)

    @pytest.mark.parametrize("code", ["LU", "EE", "IS", "LT", "LV", "MA", "SI", "CY", "QA", "KW"])
    def test_smaller_google_markets_accepted(self, code):
        from serptrack.utils.countries import get_country_language, is_valid_country

        assert is_valid_country(code)
        assert get_country_language(code)

    def test_new_keyword_defaults(self):
        from serptrack.services.keyword_validator import validate_new_keyword

        values = validate_new_keyword({"keyword": " shoes ", "domain": "example.com"})
        assert values == {
            "keyword": "shoes", "device": "desktop", "country": "US", "city": "", "domain": "example.com",
        }

    @pytest.mark.parametrize("item, message", [
        ({"keyword": "   ", "domain": "example.com"}, "Keyword is required."),
        ({"keyword": "shoes", "device": "tablet", "domain": "example.com"}, "Invalid device provided."),
        ({"keyword": "shoes", "country": "ZZ", "domain": "example.com"}, "Invalid country provided."),
        ({"keyword": "shoes", "city": "c" * 300, "domain": "example.com"}, "120 characters or fewer"),
        ({"keyword": "shoes"}, "Domain is Required!"),
    ])
    def test_new_keyword_rejected(self, item, message):
        from serptrack.services.keyword_validator import validate_new_keyword, KeywordValidationError

        with pytest.raises(KeywordValidationError, match=message):
            validate_new_keyword(item)


class TestKeywordIds:
    def test_parse_ids(self):
        from serptrack.services.keyword_repository import parse_ids

        assert parse_ids("3,4,x") == [3, 4, None]
        assert parse_ids(" 7 ") == [7]
        assert parse_ids("1.5,,2a") == [None, None, None]

    async def test_find_by_ids_ignores_nan(self, make_keyword, db_session):
        from serptrack.services.keyword_repository import KeywordRepository

        keyword = await make_keyword()
        found = await KeywordRepository(db_session).find_by_ids([None, keyword.id])
        assert [k.id for k in found] == [keyword.id]
        assert await KeywordRepository(db_session).find_by_ids([None]) == []


class TestScrapingRobot:
    def _settings(self):
        from serptrack.services.settings_service import AppSettingsData
        return AppSettingsData(scraper_type="scrapingrobot", scraping_api="secret")

    def test_scrape_url(self):
        from serptrack.scrapers.scrapingrobot import scrape_url

        url = scrape_url(
            {"keyword": "running shoes", "country": "DE", "device": "mobile", "city": ""},
            self._settings(),
        )
        query = parse_qs(urlparse(url).query)
        assert url.startswith("https://api.scrapingrobot.com/?")
        assert query["token"] == ["secret"]
        assert query["proxyCountry"] == ["DE"]
        assert query["mobile"] == ["true"]

        google = urlparse(query["url"][0])
        google_query = parse_qs(google.query)
        assert google.netloc == "www.google.com"
        assert google_query["q"] == ["running shoes"]
        assert google_query["hl"] == ["de"]
        assert "uule" not in google_query

    def test_city_adds_uule(self):
        from serptrack.scrapers.scrapingrobot import scrape_url
        from serptrack.utils.uule import encode_uule

        url = scrape_url(
            {"keyword": "pizza", "country": "US", "device": "desktop", "city": "Boston"},
            self._settings(),
        )
        google_query = parse_qs(urlparse(parse_qs(urlparse(url).query)["url"][0]).query)
        assert google_query["uule"] == [encode_uule("Boston, United States")]
        assert "mobile" not in unquote(url).split("&url=")[0]


class TestSerpParser:
    PAGE = """
    <div><a href="https://www.google.com/preferences"><h3>Settings</h3></a></div>
    <div><a href="https://shop.other.com/a" data-ved="x"><br><h3 class="LC20lb">Other <b>Shop</b></h3></a></div>
    <div><a href="/url?q=https://www.example.com/shoes&amp;sa=U"><h3>Example &amp; Co</h3></a></div>
    <div><a href="https://shop.other.com/a"><h3>Duplicate</h3></a></div>
    <div><a href="https://no-title.com/">No title</a></div>
    """

    def test_extract_organic_results(self):
        from serptrack.scrapers.serp_parser import extract_organic_results

        results = extract_organic_results(self.PAGE)
        assert results == [
            {"title": "Other Shop", "url": "https://shop.other.com/a", "position": 1},
            {"title": "Example & Co", "url": "https://www.example.com/shoes", "position": 2},
        ]

    def test_find_domain_position(self):
        from serptrack.scrapers.serp_parser import extract_organic_results, find_domain_position

        results = extract_organic_results(self.PAGE)
        assert find_domain_position(results, "example.com") == {
            "position": 2, "url": "https://www.example.com/shoes",
        }
        assert find_domain_position(results, "other.com")["position"] == 1
        assert find_domain_position(results, "missing.com") == {"position": 0, "url": ""}

    def test_single_quoted_href(self):
        from serptrack.scrapers.serp_parser import extract_organic_results, find_domain_position

        results = extract_organic_results("<div><a href='https://example.com/a'><h3>Example</h3></a></div>")
        assert results == [{"title": "Example", "url": "https://example.com/a", "position": 1}]
        assert find_domain_position(results, "example.com")["position"] == 1

    def test_empty_page(self):
        from serptrack.scrapers.serp_parser import extract_organic_results

        assert extract_organic_results("") == []
        assert extract_organic_results("<html><body>no results</body></html>") == []


class TestRefresh:
    async def test_refresh_updates_position_and_history(self, make_keyword, db_session, monkeypatch):
        from serptrack.services import refresh_service
        from serptrack.services.settings_service import AppSettingsData

        async def fake_scrape(keyword, scraper, app_settings):
            return [
                {"title": "Other", "url": "https://other.com/", "position": 1},
                {"title": "Ours", "url": "https://example.com/shoes", "position": 2},
            ]

        monkeypatch.setattr(refresh_service, "scrape_keyword", fake_scrape)
        keyword = await make_keyword(updating=True)

        results = await refresh_service.refresh_and_update_keywords(
            db_session, [keyword], AppSettingsData(scraper_type="scrapingrobot"),
        )
        assert results == {keyword.id: True}
        assert keyword.position == 2
        assert keyword.url == "https://example.com/shoes"
        assert keyword.updating is False
        assert list(json.loads(keyword.history).values()) == [2]
        assert len(json.loads(keyword.last_result)) == 2

    async def test_refresh_records_scraper_error(self, make_keyword, db_session, monkeypatch):
        from serptrack.scrapers import ScraperResponseError
        from serptrack.services import refresh_service
        from serptrack.services.settings_service import AppSettingsData

        async def failing_scrape(keyword, scraper, app_settings):
            raise ScraperResponseError("HTTP 错误: 403")

        monkeypatch.setattr(refresh_service, "scrape_keyword", failing_scrape)
        keyword = await make_keyword(updating=True)

        results = await refresh_service.refresh_and_update_keywords(
            db_session, [keyword], AppSettingsData(scraper_type="scrapingrobot"),
        )
        assert results == {keyword.id: False}
        assert keyword.updating is False
        assert "403" in json.loads(keyword.last_update_error)["error"]

    async def test_without_scraper_clears_updating(self, make_keyword, db_session):
        from serptrack.services.refresh_service import refresh_and_update_keywords
        from serptrack.services.settings_service import AppSettingsData

        keyword = await make_keyword(updating=True)
        results = await refresh_and_update_keywords(db_session, [keyword], AppSettingsData())
        assert results == {keyword.id: False}
        assert keyword.updating is False

    async def test_transport_error_becomes_scraper_error(self, monkeypatch):
        from tenacity import stop_after_attempt
        from serptrack.scrapers import ScraperNetworkError, get_scraper
        from serptrack.services import refresh_service
        from serptrack.services.settings_service import AppSettingsData

        async def reset_connection(self, url, **kwargs):
            raise httpx.ReadError("connection reset")

        monkeypatch.setattr(httpx.AsyncClient, "get", reset_connection)
        scrape_once = refresh_service.scrape_keyword.retry_with(stop=stop_after_attempt(1))

        with pytest.raises(ScraperNetworkError, match="ReadError"):
            await scrape_once(
                {"keyword": "pizza", "country": "US", "device": "desktop", "city": ""},
                get_scraper("scrapingrobot"),
                AppSettingsData(scraper_type="scrapingrobot", scraping_api="secret"),
            )

    async def test_unexpected_error_does_not_abandon_batch(self, make_keyword, db_session, monkeypatch):
        from serptrack.services import refresh_service
        from serptrack.services.settings_service import AppSettingsData

        first = await make_keyword(keyword="first", updating=True)
        second = await make_keyword(keyword="second", updating=True)

        async def flaky_scrape(keyword, scraper, app_settings):
            if keyword["keyword"] == "first":
                raise httpx.ReadError("connection reset")
            return [{"title": "Ours", "url": "https://example.com/", "position": 1}]

        monkeypatch.setattr(refresh_service, "scrape_keyword", flaky_scrape)

        results = await refresh_service.refresh_and_update_keywords(
            db_session, [first, second], AppSettingsData(scraper_type="scrapingrobot"),
        )
        assert results == {first.id: False, second.id: True}
        assert first.updating is False
        assert "ReadError" in json.loads(first.last_update_error)["error"]
        assert second.updating is False
        assert second.position == 1

    async def test_worker_drains_queue(self, monkeypatch):
        from serptrack.services.refresh_service import RefreshQueue

        queue = RefreshQueue()
        processed = []
        done = asyncio.Event()

        async def fake_process(ids):
            processed.append(ids)
            done.set()
            return {}

        monkeypatch.setattr(queue, "process", fake_process)
        queue.start()
        queue.enqueue([1, 2])
        await asyncio.wait_for(done.wait(), timeout=1)
        await queue.stop()

        assert processed == [[1, 2]]
        assert queue.qsize() == 0
        assert queue.is_running is False

    async def test_lifespan_starts_worker_without_scheduler(self, monkeypatch):
        from serptrack import main
        from serptrack.services.refresh_service import RefreshQueue

        queue = RefreshQueue()

        async def skip_init_db():
            return None

        monkeypatch.setattr(main, "init_db", skip_init_db)
        monkeypatch.setattr(main, "refresh_queue", queue)
        assert main.settings.SCHEDULER_ENABLED is False

        async with main.lifespan(main.app):
            assert queue.is_running is True
            assert main.scheduler.get_status()["running"] is False
        assert queue.is_running is False

    def test_enqueue_does_not_block(self):
        from serptrack.services.refresh_service import RefreshQueue

        queue = RefreshQueue()
        queue.enqueue([1, None, 2])
        queue.enqueue([])
        assert queue.qsize() == 1
        assert queue.is_running is False


class TestSearchConsole:
    def test_integrate_keyword_sc_data(self):
        from serptrack.services.search_console import integrate_keyword_sc_data

        keyword = {"keyword": "Running Shoes", "country": "US", "device": "desktop"}
        uid = "us:desktop:running shoes"
        sc_data = {
            "threeDays": [
                {"uid": uid, "clicks": 2, "impressions": 10, "ctr": 20, "position": 3},
                {"uid": uid, "clicks": 1, "impressions": 30, "ctr": 10, "position": 5},
                {"uid": "us:mobile:running shoes", "clicks": 9, "impressions": 99, "ctr": 9, "position": 9},
            ],
            "sevenDays": [],
        }

        result = integrate_keyword_sc_data(keyword, sc_data)
        assert result["keyword"] == "Running Shoes"
        assert result["scData"]["impressions"]["threeDays"] == 40
        assert result["scData"]["visits"]["threeDays"] == 3
        assert result["scData"]["ctr"]["threeDays"] == 15
        assert result["scData"]["position"]["threeDays"] == 4
        assert result["scData"]["impressions"]["thirtyDays"] == 0

    def test_read_local_sc_data(self, tmp_path, monkeypatch):
        from serptrack.config import settings
        from serptrack.services.search_console import read_local_sc_data

        monkeypatch.setattr(settings, "DATA_DIR", str(tmp_path))
        assert read_local_sc_data("example.com") is None

        (tmp_path / "SC_example_com.json").write_text(json.dumps({"threeDays": []}), encoding="utf-8")
        assert read_local_sc_data("example.com") == {"threeDays": []}

        (tmp_path / "SC_broken_com.json").write_text("{", encoding="utf-8")
        assert read_local_sc_data("broken.com") is None


class TestVolume:
    def test_map_volumes(self):
        from serptrack.services.volume_service import map_volumes

        keywords = [{"id": 1, "keyword": "Shoes"}, {"id": 2, "keyword": "boots"}]
        results = [{"text": "shoes", "keywordMetrics": {"avgMonthlySearches": "1300"}}]
        assert map_volumes(keywords, results) == {1: 1300, 2: 0}

    async def test_not_configured_returns_none(self):
        from serptrack.services.settings_service import AppSettingsData
        from serptrack.services.volume_service import get_keywords_volume

        assert await get_keywords_volume([{"id": 1, "keyword": "shoes"}], AppSettingsData()) is None


def test_logging_module():
    """测试日志模块"""
    from serptrack.core.logging import setup_logging, get_logger, LoggingConfig

    LoggingConfig.reset()
    setup_logging(debug=True)

    logger = get_logger("test_module")
    logger.debug("这是一条调试日志")
    logger.info("这是一条信息日志")
    assert LoggingConfig._initialized is True

    LoggingConfig.reset()
