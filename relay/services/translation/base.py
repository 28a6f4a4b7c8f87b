"""Abstract language/translation capability.

The pipeline never imports a concrete provider directly. The concrete
provider is instantiated once in the FastAPI lifespan and injected via
Depends().
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class TranslationResult:
    """Outcome of one detect (+ translate) round for a piece of text.

    ``translation`` is set if and only if ``translated`` is True.
    """

    text: str
    lang: str
    translated: bool = False
    translation: str | None = None

    def __post_init__(self) -> None:
        if self.translated != (self.translation is not None):
            raise ValueError("translation must be present exactly when translated is True")

    @property
    def forward_text(self) -> str:
        """Text to hand on: the translation when there is one, else the original."""
        return self.translation if self.translation is not None else self.text

    def to_fields(self) -> dict[str, Any]:
        fields: dict[str, Any] = {
            "text": self.text,
            "lang": self.lang,
            "translated": self.translated,
        }
        if self.translated:
            fields["translation"] = self.translation
        return fields


class TranslationProvider(ABC):
    """Abstract base class for translation providers."""

    @abstractmethod
    async def detect(self, text: str) -> str:
        """Identify the language of ``text``.

        Returns:
            ISO 639-1 language code of the most likely language.

        Raises:
            DetectionFailedError: If the provider cannot identify a language.
        """
        ...

    @abstractmethod
    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        """Translate ``text`` from ``source_lang`` into ``target_lang``.

        Raises:
            TranslationFailedError: If the pair is unsupported or the call fails.
        """
        ...
