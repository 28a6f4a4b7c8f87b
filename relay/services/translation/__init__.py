from relay.services.translation.base import TranslationProvider, TranslationResult
from relay.services.translation.watson import WatsonTranslationProvider

__all__ = ["TranslationProvider", "TranslationResult", "WatsonTranslationProvider"]
