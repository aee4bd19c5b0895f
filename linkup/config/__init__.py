from linkup.config.settings import settings

__all__ = ["settings"]
