from sitebuild.providers.base import AIProvider
from sitebuild.providers.mock import MockAIProvider, html_page
from sitebuild.providers.openai_compat import OpenAICompatProvider

__all__ = ["AIProvider", "MockAIProvider", "OpenAICompatProvider", "html_page"]
