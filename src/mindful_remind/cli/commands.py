# src/mindful_remind/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import cast

from ..core.errors import ValidationError
from ..core.models import Category, Priority, Reminder
from ..core.state import AppState
from ..services.board import board_stats, search
from ..sync.engine import SyncResult

CommandEmitter = Callable[[str], None]
CommandHandler2 = Callable[[AppState, list[str]], str]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], str]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)

LOCAL_ONLY_NOTE = "Saved locally only. Server connection issue."


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        Validation errors are turned into the reply text.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except Exception:
            nparams = 3

        try:
            if nparams >= 3:
                h3 = cast(CommandHandler3, handler)
                return h3(state, args, emit)
            h2 = cast(CommandHandler2, handler)
            return h2(state, args)
        except ValidationError as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _sync_note(result: SyncResult) -> str:
    return "" if result.synced else f"\n  ({LOCAL_ONLY_NOTE})"


def format_reminder(r: Reminder) -> str:
    mark = "x" if r.completed else " "
    desc = f" - {r.description}" if r.description else ""
    return f"[{mark}] {r.id} {r.title}{desc} ({r.priority.value}, {r.category.value}, due {r.due_date})"


def _parse_add(args: list[str]) -> dict:
    """
    /add <title words> [!priority] [#category] [@due] [-- description]
    """
    description = ""
    if "--" in args:
        idx = args.index("--")
        description = " ".join(args[idx + 1 :])
        args = args[:idx]

    title_words: list[str] = []
    out: dict = {"priority": None, "category": None, "due_date": None}
    for a in args:
        if a.startswith("!") and len(a) > 1:
            out["priority"] = Priority.from_db(a[1:])
        elif a.startswith("#") and len(a) > 1:
            out["category"] = Category.from_db(a[1:])
        elif a.startswith("@") and len(a) > 1:
            out["due_date"] = a[1:]
        else:
            title_words.append(a)

    out["title"] = " ".join(title_words)
    out["description"] = description
    return out


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.session
    who = "anonymous"
    if s.user is not None:
        who = f"{s.user.username} ({s.user.role.value})"
        if s.transient:
            who += " [local session]"
    return (
        "Status:\n"
        f"  Signed in as: {who}\n"
        f"  Record store: {getattr(state.settings, 'api_base_url', '?')}\n"
        f"  Local mirror: {getattr(state.settings, 'mirror_db_path', '?')}"
    )


def cmd_login(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/login <username> <password>"""
    if len(args) < 2:
        return "Usage: /login <username> <password>"
    if emit:
        emit("Signing in...")
    session = state.auth.login(args[0], " ".join(args[1:]))
    state.session = session
    name = session.user.username if session.user is not None else "anonymous"
    if session.transient:
        return f"Connection issue. Using local session as {name}."
    return f"Welcome, {name}."


def cmd_signup(state: AppState, args: list[str]) -> str:
    """/signup <username>"""
    if not args:
        return "Usage: /signup <username>"
    user = state.auth.signup(" ".join(args))
    return f"Account created for {user.username}! Sign in with /login {user.username} {user.username}"


def cmd_logout(state: AppState, args: list[str]) -> str:
    state.session = state.auth.logout()
    return "Signed out."


def cmd_list(state: AppState, args: list[str]) -> str:
    """
    /list          -> all my reminders, newest first
    /list pending  -> only open ones
    /list done     -> only completed ones
    """
    all_reminders = state.board.load(state.session)
    stats = board_stats(all_reminders)

    sub = args[0].lower() if args else ""
    reminders = all_reminders
    if sub == "pending":
        reminders = [r for r in all_reminders if not r.completed]
    elif sub == "done":
        reminders = [r for r in all_reminders if r.completed]

    header = f"Total {stats.total} | Done {stats.done} | Pending {stats.pending} | Urgent {stats.urgent}"
    if not reminders:
        return header + "\n  No reminders."
    return "\n".join([header, *(f"  {format_reminder(r)}" for r in reminders)])


def cmd_add(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /add <title> [!priority] [#category] [@due] [-- description]"
    parsed = _parse_add(args)
    reminder, result, board = state.board.create(
        state.session,
        parsed["title"],
        description=parsed["description"],
        due_date=parsed["due_date"],
        priority=parsed["priority"],
        category=parsed["category"],
    )
    pending = board_stats(board).pending
    return f"Added {format_reminder(reminder)}{_sync_note(result)}\n  {pending} pending."


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /done <id>"
    reminder, result = state.board.toggle(state.session, args[0])
    status = "completed" if reminder.completed else "reopened"
    return f"Reminder {reminder.id} {status}.{_sync_note(result)}"


def cmd_del(state: AppState, args: list[str]) -> str:
    if not args:
        return "Usage: /del <id>"
    result = state.board.delete(state.session, args[0])
    return f"Deleted {args[0]}.{_sync_note(result)}"


def cmd_find(state: AppState, args: list[str]) -> str:
    found = search(state.board.load(state.session), " ".join(args))
    if not found:
        return "Nothing matches."
    return "\n".join(format_reminder(r) for r in found)


def cmd_users(state: AppState, args: list[str]) -> str:
    """/users [term] (admin only)"""
    state.admin.require_admin(state.session)
    overview = state.admin.overview()
    users = state.admin.search_users(" ".join(args)) if args else overview.users
    lines = [
        f"Users {len(overview.users)} | Tasks {len(overview.reminders)} | Density {overview.density:.1f}"
    ]
    for u in users:
        lines.append(
            f"  {u.id} {u.username} ({u.role.value}) - {overview.tasks_per_user.get(u.id, 0)} Tasks"
        )
    return "\n".join(lines)


def cmd_deluser(state: AppState, args: list[str]) -> str:
    """/deluser <id> (admin only; also deletes the user's reminders)"""
    state.admin.require_admin(state.session)
    if not args:
        return "Usage: /deluser <id>"
    result = state.admin.delete_user(args[0])
    if not result.synced and result.detail:
        return f"Deleted {args[0]} locally. Record store said: {result.detail}"
    return f"Deleted user {args[0]} and their reminders.{_sync_note(result)}"


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("status", cmd_status, help_text="Show who is signed in and where data lives.")
registry.register("login", cmd_login, help_text="Sign in: /login <username> <password>.")
registry.register("signup", cmd_signup, help_text="Create an account: /signup <username>.")
registry.register("logout", cmd_logout, help_text="Sign out.")
registry.register("list", cmd_list, help_text="List reminders: /list [pending|done].", aliases=["ls"])
registry.register(
    "add",
    cmd_add,
    help_text="Add a reminder: /add <title> [!priority] [#category] [@due] [-- description].",
)
registry.register("done", cmd_done, help_text="Toggle completion: /done <id>.")
registry.register("del", cmd_del, help_text="Delete a reminder: /del <id>.", aliases=["rm"])
registry.register("find", cmd_find, help_text="Search title/description: /find <term>.")
registry.register("users", cmd_users, help_text="Admin: list users with task counts: /users [term].")
registry.register("deluser", cmd_deluser, help_text="Admin: delete a user and their reminders.")
