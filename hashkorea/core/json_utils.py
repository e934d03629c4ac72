"""LLM 응답 문자열에서 JSON을 꺼내는 유틸리티."""

from __future__ import annotations

import json
import re

_JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


def strip_code_fence(text: str) -> str:
    """마크다운 코드 펜스를 제거합니다."""
    content = (text or "").strip()
    if content.startswith("```"):
        parts = content.split("```")
        if len(parts) > 1:
            content = parts[1].strip()
            if content.lower().startswith("json"):
                content = content[4:].strip()
    return content.strip()


def extract_json_object(text: str) -> dict | None:
    """응답 문자열에서 JSON 객체를 최대한 복구해 파싱합니다."""
    content = strip_code_fence(text)
    if not content:
        return None

    try:
        parsed = json.loads(content)
        return parsed if isinstance(parsed, dict) else None
    except json.JSONDecodeError:
        pass

    match = _JSON_OBJECT_PATTERN.search(content)
    if not match:
        return None

    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    return parsed if isinstance(parsed, dict) else None
