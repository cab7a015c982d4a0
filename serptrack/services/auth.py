import hmac
import json
from typing import Any, Dict, Optional

from fastapi import Depends, Request

from serptrack.config import settings
from serptrack.core.errors import APIError
from serptrack.core.logging import get_logger

logger = get_logger(__name__)

AUTHORIZED = "authorized"


def verify_user(request: Request) -> str:
    """
    校验请求的 API Key

    Returns:
        校验通过返回 "authorized"，否则返回错误信息
    """
    if not settings.API_KEY:
        return "API Key is not configured."

    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return "Not authorized"

    if not hmac.compare_digest(token.strip().encode(), settings.API_KEY.encode()):
        logger.warning(f"API Key 校验失败: {request.method} {request.url.path}")
        return "Invalid API Key Provided."

    return AUTHORIZED


async def require_user(request: Request) -> None:
    """路由依赖：未授权时直接返回 401"""
    authorized = verify_user(request)
    if authorized != AUTHORIZED:
        raise APIError(401, authorized)


async def json_body(request: Request, _: None = Depends(require_user)) -> Optional[Dict[str, Any]]:
    """
    读取 JSON 请求体
    在授权校验之后解析
    """
    raw = await request.body()
    if not raw:
        return None
    try:
        payload = json.loads(raw)
    except ValueError:
        raise APIError(400, "Invalid Payload!")
    if not isinstance(payload, dict):
        raise APIError(400, "Invalid Payload!")
    return payload
