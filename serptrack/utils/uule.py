"""
Google UULE 地理位置参数编码
"""
import base64

UULE_PREFIX = "w+CAIQICI"
BASE64_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789+/"


def encode_length(length: int) -> str:
    """将字节长度编码为 base64 字母表中的大端变长数字"""
    if length <= 0:
        return "A"

    encoded = ""
    value = length
    while value > 0:
        value, remainder = divmod(value, 64)
        encoded = BASE64_ALPHABET[remainder] + encoded

    return encoded


def encode_uule(location: str) -> str:
    """
    生成 UULE 参数

    Args:
        location: 位置描述，例如 "Berlin, Germany"

    Returns:
        UULE 字符串，位置为空时返回空字符串
    """
    trimmed = location.strip()
    if not trimmed:
        return ""

    raw = trimmed.encode("utf-8")
    body = base64.b64encode(raw).decode("ascii")
    return f"{UULE_PREFIX}{encode_length(len(raw))}{body}"
