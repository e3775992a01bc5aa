"""
Bitext - LLM-backed Chinese/English sentence-aligned translation with vocabulary.

Example:
    >>> from bitext.domains.orchestration import TranslationOrchestrator
    >>> orchestrator = TranslationOrchestrator.from_settings()
    >>> result = await orchestrator.translate_text("时近半夜，硬卧车厢熄灯。", "deepseek-chat")
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
