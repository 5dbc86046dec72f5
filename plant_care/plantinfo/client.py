"""Gemini generateContent 接口调用。

文档：https://ai.google.dev/api/generate-content
请求体 contents[].parts[].text；响应 candidates[0].content.parts[].text。
"""
import sys
from typing import Optional

import requests

from plant_care.config import GEMINI_API_KEY, GEMINI_ENDPOINT, GEMINI_MODEL, GEMINI_TIMEOUT


class GeminiClient:
    """文本生成客户端：prompt 进，文本出。"""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        timeout: float = GEMINI_TIMEOUT,
    ):
        self.api_key = api_key or GEMINI_API_KEY
        self.model = model or GEMINI_MODEL
        self.timeout = timeout

    def generate(self, prompt: str) -> tuple[Optional[str], Optional[str]]:
        """
        生成文本。
        返回 (文本, None) 成功，或 (None, 错误信息) 失败。
        """
        if not self.api_key:
            return None, "未配置 GEMINI_API_KEY"
        url = f"{GEMINI_ENDPOINT}/{self.model}:generateContent"
        body = {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": 2048,
                "temperature": 0.7,
                "responseMimeType": "application/json",
            },
        }
        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}
        print(f"[养护-Gemini] 正在请求 {self.model}...", file=sys.stderr, flush=True)
        try:
            r = requests.post(url, headers=headers, json=body, timeout=self.timeout)
        except requests.RequestException as e:
            err = f"请求失败: {e}"
            print(f"[养护-Gemini] {err}", file=sys.stderr, flush=True)
            return None, err
        try:
            data = r.json()
        except ValueError:
            err = f"响应非 JSON: {r.text[:200]}"
            print(f"[养护-Gemini] {err}", file=sys.stderr, flush=True)
            return None, err
        if r.status_code != 200:
            msg = (data.get("error") or {}).get("message") or r.text[:200]
            err = f"HTTP {r.status_code}: {msg}"
            print(f"[养护-Gemini] {err}", file=sys.stderr, flush=True)
            return None, err
        candidates = data.get("candidates") or []
        if not candidates:
            reason = (data.get("promptFeedback") or {}).get("blockReason", "unknown")
            return None, f"没有生成结果（{reason}）"
        parts = (candidates[0].get("content") or {}).get("parts") or []
        text = "".join(p.get("text", "") for p in parts if isinstance(p, dict))
        if not text:
            return None, "生成结果为空"
        return text, None
