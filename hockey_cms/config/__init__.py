from hockey_cms.config.settings import settings

__all__ = ["settings"]
