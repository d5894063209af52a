"""
Translation Service - Google Translate v2 REST client

功能:
1. translate: 翻譯文字 (未指定來源語言時自動偵測)
2. detect: 偵測文字語言
3. build_request_url: 在已帶 key 的 base URL 後附加查詢參數
"""
from __future__ import annotations
import logging
from typing import Any, Dict, Optional
from dataclasses import dataclass
from urllib.parse import urlencode

from .exceptions import ConfigurationError, DetectionError, DecodeError
from .transport import HttpTransport, RequestsTransport, mask_key

logger = logging.getLogger(__name__)


def build_request_url(url: str, params: Dict[str, Any]) -> str:
    """
    把查詢參數附加到 URL

    Parameters are form-encoded in insertion order. They are joined with ``&``
    when the URL already has a query string (the credentialed case) and with
    ``?`` otherwise.
    """
    query = urlencode(params)
    if not query:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{query}"


@dataclass(frozen=True)
class ClientConfig:
    """翻譯客戶端設定"""
    api_key: str
    translate_url: str = "https://www.googleapis.com/language/translate/v2"
    detect_url: str = "https://www.googleapis.com/language/translate/v2/detect"
    source_lang: Optional[str] = None  # 預設來源語言 (None = 自動偵測)
    target_lang: Optional[str] = None  # 預設目標語言
    attach_key: bool = True
    timeout: float = 10.0

    @classmethod
    def from_settings(cls, settings, api_key: Optional[str] = None) -> "ClientConfig":
        """Build a config from the application ``Settings``."""
        return cls(
            api_key=api_key or settings.google_translate_api_key,
            translate_url=settings.translate_url,
            detect_url=settings.detect_url,
            source_lang=settings.source_lang,
            target_lang=settings.target_lang,
            attach_key=settings.attach_key,
            timeout=settings.request_timeout
        )


class TranslationClient:
    """Google Translate 客戶端"""

    def __init__(self, config: ClientConfig, transport: Optional[HttpTransport] = None):
        """
        初始化翻譯客戶端

        Args:
            config: 客戶端設定 (api key, endpoint URLs, 預設語言)
            transport: HTTP transport (預設使用 RequestsTransport)

        Raises:
            ConfigurationError: api key 為空
        """
        self._api_key = ""
        self.set_api_key(config.api_key)
        self._translate_base = config.translate_url
        self._detect_base = config.detect_url
        self._translate_attach = config.attach_key
        self._detect_attach = config.attach_key
        self.source_lang = config.source_lang
        self.target_lang = config.target_lang
        self.transport = transport or RequestsTransport(timeout=config.timeout)

    # ------------------------------------------------------------------ #
    # Configuration
    # ------------------------------------------------------------------ #

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def translate_url(self) -> str:
        """Translate endpoint, with ``?key=`` attached unless opted out."""
        return self._credentialed(self._translate_base, self._translate_attach)

    @property
    def detect_url(self) -> str:
        """Detect endpoint, with ``?key=`` attached unless opted out."""
        return self._credentialed(self._detect_base, self._detect_attach)

    def _credentialed(self, url: str, attach_key: bool) -> str:
        if not attach_key:
            return url
        return f"{url}?{urlencode({'key': self._api_key})}"

    def set_api_key(self, api_key: str) -> "TranslationClient":
        """Replace the credential. Returns self (mutates in place)."""
        if not api_key:
            raise ConfigurationError("No Google API key was provided.")
        self._api_key = api_key
        return self

    def set_source_lang(self, source_lang: Optional[str]) -> "TranslationClient":
        self.source_lang = source_lang
        return self

    def set_target_lang(self, target_lang: Optional[str]) -> "TranslationClient":
        self.target_lang = target_lang
        return self

    def set_translate_url(self, url: str, attach_key: bool = True) -> "TranslationClient":
        self._translate_base = url
        self._translate_attach = attach_key
        return self

    def set_detect_url(self, url: str, attach_key: bool = True) -> "TranslationClient":
        self._detect_base = url
        self._detect_attach = attach_key
        return self

    def set_transport(self, transport: HttpTransport) -> "TranslationClient":
        self.transport = transport
        return self

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    def resolve_target(self, target_lang: Optional[str] = None) -> str:
        """Return the effective target language or raise ConfigurationError."""
        target = target_lang if target_lang is not None else self.target_lang
        if not target:
            raise ConfigurationError("No target language was set.")
        return target

    def resolve_source(
        self,
        text: str,
        source_lang: Optional[str] = None,
        auto_detect: bool = True
    ) -> str:
        """
        Return the effective source language, detecting it from ``text`` when
        neither the argument nor the client default is set.
        """
        source = source_lang or self.source_lang
        if source:
            return source
        if not auto_detect:
            raise ConfigurationError("No source language was set with autodetect turned off.")
        return self.detect(text)

    def translate(
        self,
        text: str,
        target_lang: Optional[str] = None,
        source_lang: Optional[str] = None,
        auto_detect: bool = True
    ) -> Optional[str]:
        """
        翻譯文字

        Args:
            text: 要翻譯的文字
            target_lang: 目標語言 (覆蓋預設)
            source_lang: 來源語言 (覆蓋預設; 皆未設定時依 auto_detect 處理)
            auto_detect: 未設定來源語言時是否先呼叫 detect

        Returns:
            翻譯後文字; 服務回傳空的 translations 時為 None

        Raises:
            ConfigurationError: 未設定目標語言, 或未設定來源語言且關閉自動偵測
            DetectionError: 自動偵測失敗
            TransportError / DecodeError: HTTP 或回應格式錯誤
        """
        target = self.resolve_target(target_lang)
        source = self.resolve_source(text, source_lang, auto_detect)

        request_url = build_request_url(self.translate_url, {
            "q": text,
            "source": source,
            "target": target
        })
        response = self._get_response(request_url)

        data = response.get("data")
        translations = data.get("translations") if isinstance(data, dict) else None
        if not isinstance(translations, list) or not translations:
            logger.warning(f"No translations returned for {source}->{target}")
            return None

        first = translations[0]
        if not isinstance(first, dict) or "translatedText" not in first:
            raise DecodeError("Translation entry has no translatedText field")
        return first["translatedText"]

    def detect(self, text: str) -> str:
        """
        偵測文字語言

        Returns the first language candidate of the first detection group.

        Raises:
            DetectionError: 回應中沒有 detections
        """
        request_url = build_request_url(self.detect_url, {"q": text})
        response = self._get_response(request_url)

        data = response.get("data")
        detections = data.get("detections") if isinstance(data, dict) else None
        if detections is None:
            raise DetectionError("Could not detect provided text language.")

        try:
            language = detections[0][0]["language"]
        except (IndexError, KeyError, TypeError) as e:
            raise DetectionError("Could not detect provided text language.") from e

        logger.debug(f"Detected language: {language}")
        return language

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _get_response(self, request_url: str) -> Dict[str, Any]:
        """GET the URL through the transport and return the JSON object."""
        logger.debug(f"GET {mask_key(request_url)}")
        return self.transport.get_json(request_url)
