from serptrack.services.settings_service import (
    AppSettingsData,
    get_app_settings,
    save_app_settings,
)
from serptrack.services.keyword_validator import (
    KeywordValidationError,
    resolve_update_mode,
    validate_keyword_fields,
    merge_tags,
)
from serptrack.services.keyword_repository import (
    KeywordRepository,
    parse_ids,
)
from serptrack.services.keyword_service import (
    keyword_to_dict,
    list_domain_keywords,
    add_keywords,
    delete_keywords,
    update_sticky,
    merge_keyword_tags,
    update_keyword_fields,
)
from serptrack.services.volume_service import (
    VolumeProviderError,
    get_keywords_volume,
    update_keywords_volume_data,
)
from serptrack.services.refresh_service import (
    RefreshQueue,
    refresh_queue,
    refresh_and_update_keywords,
)
from serptrack.services.scheduler_service import (
    TaskScheduler,
    scheduler,
    get_scheduler,
)

__all__ = [
    # Settings
    "AppSettingsData",
    "get_app_settings",
    "save_app_settings",

    # Keywords
    "KeywordValidationError",
    "resolve_update_mode",
    "validate_keyword_fields",
    "merge_tags",
    "KeywordRepository",
    "parse_ids",
    "keyword_to_dict",
    "list_domain_keywords",
    "add_keywords",
    "delete_keywords",
    "update_sticky",
    "merge_keyword_tags",
    "update_keyword_fields",

    # Volume
    "VolumeProviderError",
    "get_keywords_volume",
    "update_keywords_volume_data",

    # Refresh
    "RefreshQueue",
    "refresh_queue",
    "refresh_and_update_keywords",

    # Scheduler
    "TaskScheduler",
    "scheduler",
    "get_scheduler",
]
