"""Application context for explicit state passing.

AppContext bundles the long-lived services every command handler needs:
configuration, the queue store, the player and the selection service.
Handlers receive it and return it, so nothing is reached through globals.
"""

from dataclasses import dataclass
from typing import Optional

from rich.console import Console

from queue_minion.core.config import Config
from queue_minion.domain.playback.player import Player
from queue_minion.domain.queues import Chooser, QueueStore, SelectionService


@dataclass
class AppContext:
    """Application context passed to all command handlers.

    Attributes:
        config: Application configuration
        store: The process-wide queue store
        player: Player that queue playback drives
        selection: Resolves queue and track names, prompting when needed
        console: Rich Console for formatted output
    """

    config: Config
    store: QueueStore
    player: Player
    selection: SelectionService
    console: Optional[Console] = None

    @classmethod
    def create(
        cls,
        config: Config,
        store: QueueStore,
        player: Player,
        chooser: Chooser,
        console: Optional[Console] = None,
    ) -> 'AppContext':
        """Create the application context.

        Args:
            config: Application configuration
            store: Loaded queue store
            player: Player instance
            chooser: How selections are asked for (prompt, IPC, tests)
            console: Optional Rich Console instance

        Returns:
            New AppContext with a SelectionService wired to the store and player
        """
        return cls(
            config=config,
            store=store,
            player=player,
            selection=SelectionService(store, chooser, player),
            console=console,
        )

    def with_chooser(self, chooser: Chooser) -> 'AppContext':
        """Return new context whose selections go through ``chooser``.

        Args:
            chooser: Replacement chooser

        Returns:
            New AppContext sharing store and player, other fields unchanged
        """
        return AppContext(
            config=self.config,
            store=self.store,
            player=self.player,
            selection=SelectionService(self.store, chooser, self.player),
            console=self.console,
        )
