from typing import Any, Dict, Optional
from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from serptrack.core.errors import APIError
from serptrack.core.logging import get_logger
from serptrack.models import get_db
from serptrack.services import keyword_validator
from serptrack.services.auth import json_body, require_user
from serptrack.services.keyword_repository import parse_ids
from serptrack.services.keyword_service import (
    add_keywords as create_keywords,
    delete_keywords as remove_keywords,
    keyword_to_dict,
    list_domain_keywords,
    merge_keyword_tags,
    update_keyword_fields,
    update_sticky,
)
from serptrack.services.keyword_validator import KeywordValidationError
from serptrack.services.refresh_service import refresh_queue
from serptrack.services.search_console import read_local_sc_data
from serptrack.services.settings_service import get_app_settings
from serptrack.services.volume_service import get_keywords_volume, update_keywords_volume_data

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api/keywords",
    tags=["关键词"],
    dependencies=[Depends(require_user)],
)


@router.get("")
async def get_keywords(
    domain: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    if not domain:
        raise APIError(400, "Domain is Required!")

    try:
        app_settings = await get_app_settings(db)
        sc_data = read_local_sc_data(domain) if app_settings.search_console_configured else None
        keywords = await list_domain_keywords(db, domain, sc_data)
    except Exception as e:
        logger.error(f"获取域名关键词失败 {domain}: {str(e)}")
        raise APIError(400, "Error Loading Keywords for this Domain.")

    return {"keywords": keywords}


@router.post("", status_code=201)
async def add_keywords(
    payload: Optional[Dict[str, Any]] = Depends(json_body),
    db: AsyncSession = Depends(get_db)
):
    items = (payload or {}).get("keywords")
    if not items or not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise APIError(400, "Necessary Keyword Data Missing")

    try:
        created = await create_keywords(db, items)
        keywords = [keyword_to_dict(keyword) for keyword in created]
        app_settings = await get_app_settings(db)
    except KeywordValidationError as e:
        raise APIError(400, e.message)
    except Exception as e:
        await db.rollback()
        logger.error(f"新增关键词失败: {str(e)}")
        raise APIError(400, "Could Not Add New Keyword!")

    # 排名刷新在后台执行，不等待结果
    refresh_queue.enqueue([keyword["id"] for keyword in keywords])

    if app_settings.adwords_configured:
        try:
            volumes = await get_keywords_volume(keywords, app_settings)
            if volumes:
                await update_keywords_volume_data(db, volumes)
                for keyword in keywords:
                    keyword["volume"] = volumes.get(keyword["id"], keyword["volume"])
        except Exception as e:
            logger.error(f"更新关键词搜索量失败: {str(e)}")

    return {"keywords": keywords}


@router.delete("")
async def delete_keywords(
    ids: Optional[str] = Query(None, alias="id"),
    db: AsyncSession = Depends(get_db)
):
    if not ids:
        raise APIError(400, "keyword ID is Required!")

    try:
        removed = await remove_keywords(db, parse_ids(ids))
    except Exception as e:
        logger.error(f"删除关键词失败 {ids}: {str(e)}")
        raise APIError(400, "Could Not Remove Keyword!")

    return {"keywordsRemoved": removed}


@router.put("")
async def update_keywords(
    ids: Optional[str] = Query(None, alias="id"),
    payload: Optional[Dict[str, Any]] = Depends(json_body),
    db: AsyncSession = Depends(get_db)
):
    """
    更新关键词

    请求体三选一：
    - {"sticky": bool}：批量置顶 / 取消置顶
    - {"tags": {关键词 ID: [标签]}}：按关键词合并标签
    - {"keyword", "url", "country", "city", "device", "tags": [标签]}：编辑单个关键词
    """
    if not ids:
        raise APIError(400, "keyword ID is Required!")

    keyword_ids = parse_ids(ids)
    payload = payload or {}

    try:
        mode = keyword_validator.resolve_update_mode(payload)
        if mode == keyword_validator.MODE_STICKY:
            keywords = await update_sticky(db, keyword_ids, payload["sticky"])
            return {"keywords": keywords}

        if mode == keyword_validator.MODE_TAG_MERGE:
            keywords = await merge_keyword_tags(db, payload["tags"])
            return {"keywords": keywords}

        keyword = await update_keyword_fields(db, keyword_ids, payload)
        if keyword is None:
            raise APIError(404, "Keyword not found.")
        return {"keywords": [keyword]}

    except KeywordValidationError as e:
        raise APIError(400, e.message)
    except APIError:
        raise
    except Exception as e:
        logger.error(f"更新关键词失败 {ids}: {str(e)}")
        # 该路径的未知异常以 200 状态码返回 error
        return JSONResponse(status_code=200, content={"error": "Error Updating keywords!"})


@router.api_route("", methods=["PATCH", "HEAD", "OPTIONS"], include_in_schema=False)
async def unrecognized_route():
    raise APIError(502, "Unrecognized Route.")
