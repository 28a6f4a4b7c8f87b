"""IBM Watson Language Translator provider.

Talks to the v3 REST API over a shared httpx.AsyncClient:
  - POST /v3/identify  (text/plain body) → ranked language list
  - POST /v3/translate (JSON body)       → translations list
Authentication is HTTP basic with the literal user name ``apikey``.
"""

from typing import Any

import httpx
import structlog

from relay.core.exceptions import DetectionFailedError, TranslationFailedError
from relay.services.translation.base import TranslationProvider

logger = structlog.get_logger(__name__)


class WatsonTranslationProvider(TranslationProvider):
    """Watson Language Translator implementation of TranslationProvider."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        url: str,
        version: str = "2018-05-01",
    ) -> None:
        self._client = client
        self._auth = httpx.BasicAuth("apikey", api_key)
        self._url = url.rstrip("/")
        self._version = version
        logger.info("watson_provider_initialized", url=self._url)

    async def _post(self, path: str, **kwargs: Any) -> dict[str, Any]:
        response = await self._client.post(
            f"{self._url}{path}",
            params={"version": self._version},
            auth=self._auth,
            **kwargs,
        )
        response.raise_for_status()
        return response.json()

    async def detect(self, text: str) -> str:
        """Return the top-ranked language Watson identifies for ``text``."""
        try:
            body = await self._post(
                "/v3/identify",
                content=text.encode("utf-8"),
                headers={"Content-Type": "text/plain"},
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error("watson_identify_failed", error=str(e), text_len=len(text))
            raise DetectionFailedError(f"Watson identify failed: {e}") from e

        languages = body.get("languages") or []
        if not languages or not languages[0].get("language"):
            logger.warning("watson_identify_empty", text_len=len(text))
            raise DetectionFailedError("Watson returned no candidate languages")

        language: str = languages[0]["language"]
        logger.debug(
            "watson_identify_ok",
            language=language,
            confidence=languages[0].get("confidence"),
        )
        return language

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Translate through the ``source_lang``-``target_lang`` model."""
        try:
            body = await self._post(
                "/v3/translate",
                json={"text": [text], "source": source_lang, "target": target_lang},
            )
        except (httpx.HTTPError, ValueError) as e:
            logger.error(
                "watson_translate_failed",
                error=str(e),
                source=source_lang,
                target=target_lang,
            )
            raise TranslationFailedError(
                f"Watson translate {source_lang}->{target_lang} failed: {e}"
            ) from e

        translations = body.get("translations") or []
        if not translations or translations[0].get("translation") is None:
            raise TranslationFailedError(
                f"Watson returned no translation for {source_lang}->{target_lang}"
            )
        return translations[0]["translation"]
