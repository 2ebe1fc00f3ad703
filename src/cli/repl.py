"""
Interactive REPL for the excavation simulation.

Provides a text-based interface for playing a session against the
starter sites held in in-memory repositories.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from uuid import UUID, uuid4

from src.content.starter_sites import create_starter_sites
from src.db.memory import (
    InMemoryProgressRepository,
    InMemorySessionRepository,
    InMemorySiteRepository,
)
from src.engine import EngineConfig, ExcavationError, ExcavationGame
from src.models import EntryType, GameplayConfig, Site


@dataclass
class GameState:
    """Current state of the REPL."""

    game: ExcavationGame
    user_id: UUID
    session_id: UUID | None = None
    running: bool = True


@dataclass
class Command:
    """A REPL command."""

    name: str
    aliases: list[str]
    usage: str
    description: str
    handler: Callable[[GameState, list[str]], str | None]


class GameREPL:
    """
    Interactive REPL for playing excavation sessions.

    Handles user input, command dispatch, and game output.
    """

    def __init__(self, *, time_constraints: bool = False, quests_enabled: bool = True) -> None:
        self.gameplay = GameplayConfig(
            time_constraints=time_constraints,
            quests_enabled=quests_enabled,
        )
        self.commands: dict[str, Command] = {}
        self._register_commands()

    def _register_commands(self) -> None:
        """Register all commands."""
        commands = [
            Command("quit", ["exit", "q"], "", "Exit the game", self._cmd_quit),
            Command("help", ["?", "h"], "", "Show available commands", self._cmd_help),
            Command("sites", [], "", "List excavation sites", self._cmd_sites),
            Command(
                "start",
                ["new"],
                "<site number> [difficulty]",
                "Start a session on a site",
                self._cmd_start,
            ),
            Command("tools", [], "", "List the tool catalogue", self._cmd_tools),
            Command("tool", ["use"], "<tool id>", "Switch the active tool", self._cmd_tool),
            Command(
                "dig",
                ["d"],
                "<x> <y> [tool id]",
                "Use a tool on a grid cell (active tool by default)",
                self._cmd_dig,
            ),
            Command(
                "doc",
                [],
                "<type> <x> <y> <text>",
                "Log a documentation entry (discovery, measurement, photo, note, sample)",
                self._cmd_doc,
            ),
            Command("note", [], "<x> <y> <text>", "Log a field note", self._cmd_note),
            Command("grid", ["map", "g"], "", "Show the excavation grid", self._cmd_grid),
            Command("quests", [], "", "Show documentation quests", self._cmd_quests),
            Command("guide", ["hint"], "", "Show protocol guidance", self._cmd_guide),
            Command("status", ["s"], "", "Show session status", self._cmd_status),
            Command("complete", ["finish"], "", "Complete the session and show the report", self._cmd_complete),
            Command("abandon", [], "", "Abandon the session", self._cmd_abandon),
        ]

        for cmd in commands:
            self.commands[cmd.name] = cmd
            for alias in cmd.aliases:
                self.commands[alias] = cmd

    # =========================================================================
    # Commands
    # =========================================================================

    def _cmd_quit(self, state: GameState, args: list[str]) -> str | None:
        state.running = False
        return "Surfacing. Safe travels!"

    def _cmd_help(self, state: GameState, args: list[str]) -> str | None:
        lines = ["Available Commands:", "-" * 40]
        seen = set()
        for cmd in self.commands.values():
            if cmd.name in seen:
                continue
            seen.add(cmd.name)
            usage = f" {cmd.usage}" if cmd.usage else ""
            aliases = f" ({', '.join(cmd.aliases)})" if cmd.aliases else ""
            lines.append(f"  {cmd.name}{usage}{aliases} - {cmd.description}")
        return "\n".join(lines)

    def _cmd_sites(self, state: GameState, args: list[str]) -> str | None:
        lines = ["Excavation Sites:", "-" * 40]
        for index, site in enumerate(self._sites(state), 1):
            lines.append(
                f"  {index}. {site.name} ({site.difficulty.value}) - "
                f"{site.location}, {site.grid_width}x{site.grid_height}"
            )
        return "\n".join(lines)

    def _cmd_start(self, state: GameState, args: list[str]) -> str | None:
        if not args:
            return "Usage: start <site number> [difficulty]"
        sites = self._sites(state)
        try:
            site = sites[int(args[0]) - 1]
        except (ValueError, IndexError):
            return f"Choose a site between 1 and {len(sites)}."

        difficulty = args[1] if len(args) > 1 else site.difficulty
        session = state.game.start_session(state.user_id, site.id, difficulty, self.gameplay)
        state.session_id = session.id

        env = site.environment
        return "\n".join(
            [
                f"Diving at {site.name} ({session.difficulty.value})",
                site.description,
                "",
                f"Visibility {env.visibility:g}%, current {env.current_strength:g}/10, "
                f"depth {env.depth:g} m, {env.sediment_type} sediment",
                f"Active tool: {session.state.current_tool_id}",
            ]
        )

    def _cmd_tools(self, state: GameState, args: list[str]) -> str | None:
        lines = ["Tools:", "-" * 40]
        for tool in state.game.registry:
            lines.append(f"  {tool.id:<18} {tool.name} - {tool.description}")
        return "\n".join(lines)

    def _cmd_tool(self, state: GameState, args: list[str]) -> str | None:
        session_id = self._require_session(state)
        if not args:
            return "Usage: tool <tool id>"
        state.game.change_tool(session_id, args[0])
        return f"Now using {args[0]}."

    def _cmd_dig(self, state: GameState, args: list[str]) -> str | None:
        session_id = self._require_session(state)
        if len(args) < 2:
            return "Usage: dig <x> <y> [tool id]"
        try:
            x, y = int(args[0]), int(args[1])
        except ValueError:
            return "Coordinates must be numbers."

        if len(args) > 2:
            tool_id = args[2]
        else:
            snapshot = state.game.get_session_state(session_id)
            tool_id = snapshot.state.current_tool_id if snapshot else ""

        outcome = state.game.apply_action(session_id, x, y, tool_id)

        lines = [f"Cell ({x}, {y}) depth {outcome.cell.excavation_depth:.2f}"]
        lines.extend(outcome.discoveries)
        for violation in outcome.violations:
            lines.append(f"Violation ({violation.severity.value}): {violation.description}")
            if violation.recommended_tools:
                lines.append(f"  Try: {', '.join(violation.recommended_tools)}")
        if outcome.score:
            lines.append(f"+{outcome.score} points")
        if outcome.time_remaining_seconds is not None:
            lines.append(f"Dive time remaining: {outcome.time_remaining_seconds // 60} min")
        return "\n".join(lines)

    def _cmd_doc(self, state: GameState, args: list[str]) -> str | None:
        session_id = self._require_session(state)
        if len(args) < 4:
            return "Usage: doc <type> <x> <y> <text>"
        try:
            x, y = int(args[1]), int(args[2])
        except ValueError:
            return "Coordinates must be numbers."

        entry_type = args[0].lower()
        artifact_id = None
        if entry_type == EntryType.DISCOVERY.value:
            snapshot = state.game.get_session_state(session_id)
            if snapshot is not None and snapshot.state.contains(x, y):
                artifact_id = snapshot.state.cell_at(x, y).artifact_id

        result = state.game.add_documentation_entry(
            session_id, entry_type, " ".join(args[3:]), x, y, artifact_id=artifact_id
        )

        lines = [f"Logged {result.entry.entry_type.value} entry at ({x}, {y})."]
        for title in result.quests_completed:
            lines.append(f"Quest completed: {title}!")
        if result.bonus_score:
            lines.append(f"+{result.bonus_score} points")
        return "\n".join(lines)

    def _cmd_note(self, state: GameState, args: list[str]) -> str | None:
        if len(args) < 3:
            return "Usage: note <x> <y> <text>"
        return self._cmd_doc(state, [EntryType.NOTE.value, *args])

    def _cmd_grid(self, state: GameState, args: list[str]) -> str | None:
        snapshot = self._snapshot(state)
        engine_state = snapshot.state
        lines = ["   " + "".join(f"{x:>2}" for x in range(engine_state.grid_width))]
        for y in range(engine_state.grid_height):
            row = []
            for x in range(engine_state.grid_width):
                cell = engine_state.cell_at(x, y)
                if cell.contains_artifact:
                    row.append(" *")
                elif cell.excavated:
                    row.append(" #")
                elif cell.excavation_depth > 0:
                    row.append(" ~")
                else:
                    row.append(" .")
            lines.append(f"{y:>3}" + "".join(row))
        lines.append("")
        lines.append(". untouched  ~ started  # excavated  * artifact")
        return "\n".join(lines)

    def _cmd_quests(self, state: GameState, args: list[str]) -> str | None:
        quests = self._snapshot(state).state.quests
        if not quests:
            return "No documentation quests for this session."
        lines = ["Documentation Quests:", "-" * 40]
        for quest in quests:
            mark = "x" if quest.is_complete else " "
            lines.append(
                f"  [{mark}] {quest.title}: {quest.current_count}/{quest.target_count} "
                f"({quest.reward} pts)"
            )
        return "\n".join(lines)

    def _cmd_guide(self, state: GameState, args: list[str]) -> str | None:
        guidance = state.game.get_guidance(self._require_session(state))
        if not guidance:
            return "Fieldwork is on track."
        return "\n".join(f"- {hint}" for hint in guidance)

    def _cmd_status(self, state: GameState, args: list[str]) -> str | None:
        snapshot = self._snapshot(state)
        session = snapshot.session
        engine_state = snapshot.state
        return "\n".join(
            [
                f"Site: {snapshot.site.name}",
                f"Status: {session.status.value}",
                f"Score: {session.current_score}",
                f"Coverage: {engine_state.coverage_percent:.0f}%",
                f"Artifacts: {len(engine_state.discovered_artifacts)}/{len(engine_state.layout)}",
                f"Entries: {len(engine_state.documentation)}",
                f"Violations: {len(engine_state.violations)}",
                f"Active tool: {engine_state.current_tool_id}",
            ]
        )

    def _cmd_complete(self, state: GameState, args: list[str]) -> str | None:
        report = state.game.complete_session(self._require_session(state))
        state.session_id = None
        return report.digital_report

    def _cmd_abandon(self, state: GameState, args: list[str]) -> str | None:
        state.game.abandon_session(self._require_session(state))
        state.session_id = None
        return "Session abandoned."

    # =========================================================================
    # Helpers
    # =========================================================================

    def _sites(self, state: GameState) -> list[Site]:
        return state.game.sites.list_sites()

    def _require_session(self, state: GameState) -> UUID:
        if state.session_id is None:
            raise ExcavationError("No active session. Use 'start <site number>' first.")
        return state.session_id

    def _snapshot(self, state: GameState):
        snapshot = state.game.get_session_state(self._require_session(state))
        if snapshot is None:
            raise ExcavationError("Session not found.")
        return snapshot

    def process_input(self, text: str, state: GameState) -> str | None:
        """Dispatch one line of input to its command."""
        parts = text.split()
        if not parts:
            return None
        cmd = self.commands.get(parts[0].lower())
        if cmd is None:
            return f"Unknown command '{parts[0]}'. Type 'help' for commands."
        try:
            return cmd.handler(state, parts[1:])
        except ExcavationError as e:
            return f"Cannot do that: {e}"

    def create_state(self) -> GameState:
        """Build in-memory repositories seeded with the starter sites."""
        sites = InMemorySiteRepository()
        create_starter_sites(sites)
        game = ExcavationGame(
            sites=sites,
            sessions=InMemorySessionRepository(),
            progress=InMemoryProgressRepository(),
            config=EngineConfig(gameplay=self.gameplay),
        )
        return GameState(game=game, user_id=uuid4())

    def run(self) -> None:
        """Run the main input loop."""
        state = self.create_state()

        print("=" * 50)
        print("  Underwater Archaeology Field School")
        print("=" * 50)
        print(self._cmd_sites(state, []))
        print()
        print("Type 'help' for commands.")
        print()

        while state.running:
            try:
                user_input = input("> ").strip()
                if not user_input:
                    continue
                response = self.process_input(user_input, state)
                if response:
                    print()
                    print(response)
                    print()
            except (KeyboardInterrupt, EOFError):
                print("\n")
                state.running = False

        print("Thanks for diving!")


def run_game(
    time_constraints: bool = False,
    quests_enabled: bool = True,
    log_level: str = "WARNING",
) -> None:
    """
    Run the excavation REPL.

    Args:
        time_constraints: Track simulated dive time
        quests_enabled: Hand out documentation quests
        log_level: Logging level name
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    repl = GameREPL(time_constraints=time_constraints, quests_enabled=quests_enabled)
    repl.run()


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Underwater excavation simulation")
    parser.add_argument(
        "--timed",
        action="store_true",
        help="Track simulated dive time against the site's budget",
    )
    parser.add_argument(
        "--no-quests",
        action="store_true",
        help="Disable documentation quests",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level",
    )

    args = parser.parse_args()
    run_game(
        time_constraints=args.timed,
        quests_enabled=not args.no_quests,
        log_level=args.log_level,
    )
