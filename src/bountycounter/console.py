"""
Interactive console for the bounty counter.

Prints one timestamped line per notification and accepts single-letter commands:
  h            help
  l            list tracked characters and totals
  r [name]     reset lifetime total (all characters when no name)
  s [name]     submit lifetime total to EVE Workbench (all with API keys when no name)
  c [api key]  register an EVE Workbench API key for its characters
  q            quit
"""
from __future__ import annotations

import logging
import threading
from datetime import datetime
from typing import Callable, List, Optional

from .config.loader import Settings, add_api_key, find_api_key, save_settings
from .events.schema import BaseNotification, BountyUpdated
from .submit.client import WorkbenchClient
from .tail.engine import TailEngine

log = logging.getLogger("bountycounter.console")

HELP = [
    "EVE Bounty Counter",
    "h - Help (this screen)",
    "l - List tracked characters",
    "r [name] - Reset character bounty",
    "s [name] - Submit bounty",
    "c [api key] - Add API key",
    "q - Quit",
]


def _stamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


def format_notification(note: BaseNotification) -> str:
    ent = note.entity
    if isinstance(note, BountyUpdated):
        return (
            f"{_stamp()}: {ent.name}: bounty {ent.lifetime_total:,.2f} ISK (+{note.increment:,.2f}); "
            f"session total bounty {ent.session_total:,.2f} ISK"
        )
    if note.event_type == "undocking":
        return f"{_stamp()}: {ent.name}: undocking"
    return f"{_stamp()}: {ent.name}: tracking"


class ConsolePrinter:
    """Bus subscriber writing notifications to the console; can be paused during prompts."""

    def __init__(self, out: Callable[[str], None] = print):
        self._out = out
        self._paused = threading.Event()

    def __call__(self, note: BaseNotification) -> None:
        if self._paused.is_set():
            return
        self._out(format_notification(note))

    def pause(self) -> None:
        self._paused.set()

    def resume(self) -> None:
        self._paused.clear()


class Console:
    def __init__(
        self,
        engine: TailEngine,
        settings: Settings,
        client: Optional[WorkbenchClient] = None,
        config_path: Optional[str] = None,
        input_fn: Optional[Callable[[str], str]] = None,
        out: Callable[[str], None] = print,
    ):
        self.engine = engine
        self.settings = settings
        self.client = client or WorkbenchClient(settings.api_base_url)
        self.config_path = config_path
        self._input = input_fn or input
        self._out = out
        self.printer = ConsolePrinter(out)
        engine.bus.subscribe(self.printer)

    def run(self) -> None:
        self._out("EVE Bounty Counter started. Type h for help, q to quit.")
        while True:
            try:
                line = self._input("")
            except EOFError:
                break
            if not self.handle(line):
                break

    def handle(self, line: str) -> bool:
        """Run one command line. Returns False when the console should exit."""
        cmd, _, arg = (line or "").strip().partition(" ")
        cmd = cmd.lower()
        arg = arg.strip()
        if cmd in ("q", "quit", "exit"):
            return False
        if cmd == "h":
            for row in HELP:
                self._out(row)
        elif cmd == "l":
            self.list_entities()
        elif cmd == "r":
            self.reset(arg or None)
        elif cmd == "s":
            self.submit(arg or None)
        elif cmd == "c":
            self.register_api_key(arg or None)
        elif cmd:
            self._out(f"Unknown command '{cmd}'. Type h for help.")
        return True

    def _targets(self, name: Optional[str]) -> List[str]:
        if name is None:
            return [e.name for e in self.engine.entities()]
        return [name]

    def list_entities(self) -> None:
        ents = self.engine.entities()
        if not ents:
            self._out("No characters tracked yet.")
        for e in ents:
            self._out(f"{e.name}: bounty {e.lifetime_total:,.2f} ISK; session total {e.session_total:,.2f} ISK")

    def reset(self, name: Optional[str]) -> None:
        for target in self._targets(name):
            if self.engine.reset_entity_total(target) is None:
                self._out(f"{_stamp()}: {target}: not tracked")
            else:
                self._out(f"{_stamp()}: {target}: bounty reset")

    def submit(self, name: Optional[str]) -> int:
        sent = 0
        for target in self._targets(name):
            ent = self.engine.get_entity(target)
            if ent is None:
                self._out(f"{_stamp()}: {target}: not tracked")
                continue
            key = find_api_key(self.settings, target)
            if key is None:
                self._out(f"{_stamp()}: {target}: no API key registered (use c)")
                continue
            if self.client.submit_bounty(key.api_key, key.character_id, ent.lifetime_total):
                sent += 1
                self._out(f"{_stamp()}: {target}: submitted {ent.lifetime_total:,.2f} ISK")
            else:
                self._out(f"{_stamp()}: {target}: submission failed")
        return sent

    def register_api_key(self, api_key: Optional[str]) -> int:
        self.printer.pause()
        try:
            if not api_key:
                try:
                    api_key = self._input("Please provide API key: ").strip()
                except EOFError:
                    return 0
            if not api_key:
                self._out("API key cannot be empty.")
                return 0
            characters = self.client.get_characters(api_key)
            for c in characters:
                add_api_key(self.settings, c.name, c.id, api_key)
                self._out(f"Added API key for character {c.name}({c.id}) to configuration.")
            if characters:
                save_settings(self.settings, self.config_path)
            else:
                self._out("No characters found for this API key.")
            return len(characters)
        finally:
            self.printer.resume()
