"""
Command table.

Maps host command identifiers to DeltaService coroutines so a host (editor
plugin, CLI, hotkey layer) dispatches by id and never reaches into the
service directly.

Usage:
    table = build_command_table(service)
    await table.dispatch("delta-send-tomorrow", buffer_id="notes/a.md", line_index=3)
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List

from ..domain.errors import UnknownCommand
from ..services.delta_service import DeltaService

logger = logging.getLogger(__name__)

Handler = Callable[..., Awaitable[Any]]


@dataclass(frozen=True)
class Command:
    id: str
    name: str
    handler: Handler
    # Needs an open buffer and a line (editor callback vs. plain callback)
    editor: bool = False


class CommandTable:
    def __init__(self):
        self._commands: Dict[str, Command] = {}

    def register(self, command: Command) -> None:
        if command.id in self._commands:
            logger.debug(f"Overriding command: {command.id}")
        self._commands[command.id] = command

    def get(self, command_id: str) -> Command:
        try:
            return self._commands[command_id]
        except KeyError:
            raise UnknownCommand(command_id) from None

    def commands(self) -> List[Command]:
        return list(self._commands.values())

    def __contains__(self, command_id: str) -> bool:
        return command_id in self._commands

    async def dispatch(self, command_id: str, **kwargs: Any) -> Any:
        command = self.get(command_id)
        logger.debug(f"Dispatching {command_id} {kwargs}")
        return await command.handler(**kwargs)


def build_command_table(service: DeltaService) -> CommandTable:
    """The delta commands, under the ids the editor plugin registers."""
    table = CommandTable()
    table.register(
        Command("delta-send-tomorrow", "Send block to tomorrow", service.send_to_tomorrow, editor=True)
    )
    table.register(
        Command("delta-send-custom", "Send block to future date...", service.send_forward, editor=True)
    )
    table.register(
        Command("delta-resurface", "Resurface this block again", service.resurface_line, editor=True)
    )
    table.register(
        Command("delta-done", "Mark as done (remove tag)", service.mark_done, editor=True)
    )
    table.register(Command("delta-show-due", "Show items due today", service.show_due))
    table.register(
        Command("delta-insert-due", "Insert due items here", service.insert_due_at, editor=True)
    )
    table.register(
        Command("delta-surface-today", "Surface due items into today's note", service.surface_today)
    )
    table.register(Command("delta-file-open", "Document opened", service.on_document_opened))
    return table
