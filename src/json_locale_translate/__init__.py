"""json-locale-translate: Batch-translate JSON locale bundles using OpenAI."""

__version__ = "0.1.0"

from .aggregator import partition, persist_results
from .backend import OpenAIBackend, TranslationBackend
from .errors import BackendError, ConfigError, EmptyInputError, PersistenceError, TranslateError
from .languages import LanguageRegistry, get_language_name
from .models import RunReport, TranslationRequest, TranslationResult
from .progress import ProgressReporter
from .runner import attempt
from .scheduler import Scheduler
from .translator import translate_bundle, translate_locale_directory

__all__ = [
    "__version__",
    "attempt",
    "partition",
    "persist_results",
    "translate_bundle",
    "translate_locale_directory",
    "get_language_name",
    "BackendError",
    "ConfigError",
    "EmptyInputError",
    "LanguageRegistry",
    "OpenAIBackend",
    "PersistenceError",
    "ProgressReporter",
    "RunReport",
    "Scheduler",
    "TranslateError",
    "TranslationBackend",
    "TranslationRequest",
    "TranslationResult",
]
