"""Core DI providers (non-mockable)."""

from dishka import Scope, provide

from circle.config import GroupSettings, Settings, SuggestionSettings
from circle.util.di.base import ProviderBase


class ProdConfigProvider(ProviderBase):
    """Production config provider - concrete, no mocks needed.

    Settings are loaded from environment variables and .env file automatically.
    """

    @provide(scope=Scope.APP)
    def provide_settings(self) -> Settings:
        """Provide application settings from environment."""
        return Settings()

    @provide(scope=Scope.APP)
    def provide_suggestion_settings(self, settings: Settings) -> SuggestionSettings:
        """Provide suggestion settings."""
        return settings.suggestions

    @provide(scope=Scope.APP)
    def provide_group_settings(self, settings: Settings) -> GroupSettings:
        """Provide group settings."""
        return settings.groups
