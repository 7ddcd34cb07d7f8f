#!/usr/bin/env python3
"""
lums
----
Linux User Management System: an interactive terminal menu for managing
local users and groups.
Every action wraps a native account-management binary (useradd, usermod,
userdel, groupadd, groupdel, gpasswd, chpasswd, passwd) so the tool must
run with root privileges.
"""

from __future__ import annotations

import argparse
import io
import logging
import os
import platform
import pwd
import re
import shutil
import subprocess
import sys
import textwrap
from contextlib import ExitStack, redirect_stderr, redirect_stdout
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple

try:
    import curses
except ImportError:  # interpreter built without curses support
    curses = None  # type: ignore[assignment]

__version__ = "1.0.0"

logger = logging.getLogger("lums")

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

NAME_PATTERN = re.compile(r"[a-zA-Z][a-zA-Z0-9_-]*")
MIN_PASSWORD_LENGTH = 8
NOBODY_ID = 65534
DEFAULT_ID_MIN = 1000
ADMIN_GROUPS = ("sudo", "wheel")
LOCKED_STATUSES = {"L", "LK"}
REQUIRED_COMMANDS = (
    "useradd",
    "usermod",
    "userdel",
    "groupadd",
    "groupdel",
    "gpasswd",
    "chpasswd",
    "passwd",
    "id",
    "getent",
)

PASSWD_PATH = Path("/etc/passwd")
GROUP_PATH = Path("/etc/group")
SHELLS_PATH = Path("/etc/shells")
OS_RELEASE_PATH = Path("/etc/os-release")
LOGIN_DEFS_PATH = Path("/etc/login.defs")
MEMINFO_PATH = Path("/proc/meminfo")

HELP_TEXT = """\
Linux User Management System

This application provides a user-friendly interface for managing Linux users and groups.

Main Functions:
- Add User: Create a new user account with various options
- Modify User: Change user settings, group membership, etc.
- Delete User: Remove a user account and optionally its home directory
- Manage Groups: Create/delete groups and view membership
- List Users: View different categories of system users
- System Statistics: View basic system information

Note: Most operations require root privileges.

For more detailed help on Linux user management, consult:
man useradd
man usermod
man userdel
man groupadd
man groupdel"""


class LumsError(Exception):
    """Base class for errors reported to the operator."""


class PreconditionError(LumsError):
    """The environment cannot run the tool (no terminal, not root, missing binary)."""


class ValidationError(LumsError):
    """Operator input was rejected before any command ran."""


class CommandError(LumsError, RuntimeError):
    """An account-management command exited with a non-zero status."""

    def __init__(self, command: List[str], returncode: int, stderr: str = "") -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        message = f"Command {' '.join(self.command)} failed with code {returncode}"
        if stderr:
            message += f": {stderr}"
        super().__init__(message)


@dataclass
class Settings:
    uid_min: int = DEFAULT_ID_MIN
    gid_min: int = DEFAULT_ID_MIN
    passwd_path: Path = PASSWD_PATH
    group_path: Path = GROUP_PATH
    shells_path: Path = SHELLS_PATH
    os_release_path: Path = OS_RELEASE_PATH
    login_defs_path: Path = LOGIN_DEFS_PATH
    log_file: Optional[Path] = None
    log_level: str = "INFO"


@dataclass
class NewAccountForm:
    """Values collected by the Add User dialog; discarded once the handler returns."""

    username: str = ""
    full_name: str = ""
    admin: bool = False
    create_home: bool = False
    password: Optional[str] = field(default=None, repr=False)


def setup_logging(log_file: Optional[Path] = None, level: str = "INFO") -> None:
    """
    Configure application logging.

    The terminal belongs to curses, so nothing is written to the console:
    without a log file every record is dropped.
    """
    handlers: List[logging.Handler]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers = [logging.FileHandler(log_file, encoding="utf-8")]
    else:
        handlers = [logging.NullHandler()]
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )


def read_login_defs(path: Path = LOGIN_DEFS_PATH) -> Dict[str, str]:
    if not path.exists():
        return {}
    values: Dict[str, str] = {}
    try:
        lines = path.read_text().splitlines()
    except OSError:
        return {}
    for line in lines:
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue
        parts = stripped.split()
        if len(parts) >= 2:
            values[parts[0]] = parts[1]
    return values


def _int_setting(raw: Optional[str], default: int) -> int:
    try:
        return int(raw) if raw is not None else default
    except ValueError:
        return default


def load_settings(args: argparse.Namespace, login_defs_path: Optional[Path] = None) -> Settings:
    settings = Settings(
        login_defs_path=login_defs_path or LOGIN_DEFS_PATH,
        log_file=args.log_file,
        log_level=args.log_level,
    )
    defs = read_login_defs(settings.login_defs_path)
    settings.uid_min = args.uid_min if args.uid_min is not None else _int_setting(defs.get("UID_MIN"), DEFAULT_ID_MIN)
    settings.gid_min = args.gid_min if args.gid_min is not None else _int_setting(defs.get("GID_MIN"), DEFAULT_ID_MIN)
    return settings


def run_command(
    command: List[str],
    check: bool = True,
    capture_output: bool = True,
    input_text: Optional[str] = None,
) -> subprocess.CompletedProcess:
    """Run an external command and raise CommandError if it fails."""
    logger.debug("Running %s", " ".join(command))
    result = subprocess.run(
        command,
        check=False,
        capture_output=capture_output,
        input=input_text,
        text=True,
    )
    if check and result.returncode != 0:
        stderr = (result.stderr or "").strip()
        logger.warning("%s exited with code %s: %s", command[0], result.returncode, stderr)
        raise CommandError(command, result.returncode, stderr)
    return result


def validate_name(value: str, kind: str = "Username") -> str:
    if not value:
        raise ValidationError(f"{kind} cannot be empty.")
    if not NAME_PATTERN.fullmatch(value):
        raise ValidationError(
            f"Invalid {kind.lower()} format. {kind} must start with a letter and contain "
            "only letters, numbers, underscores, or hyphens."
        )
    return value


def is_weak_password(password: str) -> bool:
    return len(password) < MIN_PASSWORD_LENGTH


def read_passwd_entries(path: Path = PASSWD_PATH) -> List[Dict[str, str]]:
    if not path.exists():
        raise FileNotFoundError(f"{path} not found")

    entries: List[Dict[str, str]] = []
    for line in path.read_text().splitlines():
        if not line or line.startswith("#"):
            continue
        parts = line.split(":")
        if len(parts) < 7:
            continue
        username, _, uid, gid, comment, home, shell = parts[:7]
        if not uid.isdigit() or not gid.isdigit():
            continue
        entries.append(
            {
                "username": username,
                "uid": uid,
                "gid": gid,
                "comment": comment,
                "home": home,
                "shell": shell,
            }
        )
    return entries


def read_group_entries(path: Path = GROUP_PATH) -> List[Dict[str, Any]]:
    if not path.exists():
        raise FileNotFoundError(f"{path} not found")

    entries: List[Dict[str, Any]] = []
    for line in path.read_text().splitlines():
        if not line or line.startswith("#"):
            continue
        parts = line.split(":")
        if len(parts) < 4 or not parts[2].isdigit():
            continue
        entries.append(
            {
                "name": parts[0],
                "gid": int(parts[2]),
                "members": [member for member in parts[3].split(",") if member],
            }
        )
    return entries


def full_name(entry: Dict[str, str]) -> str:
    return entry["comment"].split(",")[0]


def find_account(username: str, path: Path = PASSWD_PATH) -> Optional[Dict[str, str]]:
    for entry in read_passwd_entries(path):
        if entry["username"] == username:
            return entry
    return None


def find_group(name: str, path: Path = GROUP_PATH) -> Optional[Dict[str, Any]]:
    for entry in read_group_entries(path):
        if entry["name"] == name:
            return entry
    return None


def is_regular_id(value: int, minimum: int) -> bool:
    return value >= minimum and value != NOBODY_ID


def filter_accounts(entries: List[Dict[str, str]], kind: str, uid_min: int) -> List[Dict[str, str]]:
    if kind == "regular":
        return [entry for entry in entries if is_regular_id(int(entry["uid"]), uid_min)]
    if kind == "system":
        return [entry for entry in entries if not is_regular_id(int(entry["uid"]), uid_min)]
    return list(entries)


def format_account_line(entry: Dict[str, str]) -> str:
    return f"{entry['username']} (UID: {entry['uid']}, GID: {entry['gid']})"


def format_account_listing(entries: List[Dict[str, str]]) -> str:
    lines = [format_account_line(entry) for entry in sorted(entries, key=lambda e: e["username"])]
    return "\n".join(lines) or "(no users)"


def user_exists(username: str) -> bool:
    return run_command(["id", username], check=False).returncode == 0


def group_exists(name: str) -> bool:
    return run_command(["getent", "group", name], check=False).returncode == 0


def account_groups(username: str) -> Tuple[str, List[str]]:
    """Return the primary group and the supplementary groups of an account."""
    primary = run_command(["id", "-gn", username]).stdout.strip()
    names = run_command(["id", "-Gn", username]).stdout.split()
    secondary = [name for name in names if name != primary]
    return primary, secondary


def password_status(username: str) -> Tuple[str, str]:
    """Return the `passwd -S` status code and last password change date."""
    fields = run_command(["passwd", "-S", username]).stdout.split()
    status = fields[1] if len(fields) > 1 else ""
    last_change = fields[2] if len(fields) > 2 else "unknown"
    return status, last_change


def is_locked_status(status: str) -> bool:
    return status in LOCKED_STATUSES


def find_admin_group() -> Optional[str]:
    for name in ADMIN_GROUPS:
        if group_exists(name):
            return name
    return None


def read_shells(path: Path = SHELLS_PATH) -> List[str]:
    if not path.exists():
        return []
    shells = []
    for line in path.read_text().splitlines():
        stripped = line.strip()
        if stripped and not stripped.startswith("#") and stripped not in shells:
            shells.append(stripped)
    return shells


def group_members(name: str, group_path: Path = GROUP_PATH, passwd_path: Path = PASSWD_PATH) -> Tuple[int, List[str]]:
    """Merge a group's explicit members with the accounts using it as primary group."""
    group = find_group(name, group_path)
    if group is None:
        raise ValidationError(f"Group '{name}' does not exist.")
    members = set(group["members"])
    members.update(primary_group_users(group["gid"], passwd_path))
    return group["gid"], sorted(members)


def primary_group_users(gid: int, path: Path = PASSWD_PATH) -> List[str]:
    return sorted(entry["username"] for entry in read_passwd_entries(path) if int(entry["gid"]) == gid)


def current_login_names() -> Set[str]:
    """Accounts running this process: the effective user and, under sudo, the invoking one."""
    names: Set[str] = set()
    try:
        names.add(pwd.getpwuid(os.geteuid()).pw_name)
    except KeyError:
        pass
    sudo_user = os.environ.get("SUDO_USER")
    if sudo_user:
        names.add(sudo_user)
    return names


def deletable_accounts(settings: Settings) -> List[Dict[str, str]]:
    protected = current_login_names()
    entries = filter_accounts(read_passwd_entries(settings.passwd_path), "regular", settings.uid_min)
    return sorted(
        (entry for entry in entries if entry["username"] not in protected),
        key=lambda e: e["username"],
    )


def deletable_groups(settings: Settings) -> List[Dict[str, Any]]:
    groups = read_group_entries(settings.group_path)
    return sorted(
        (group for group in groups if is_regular_id(group["gid"], settings.gid_min)),
        key=lambda g: g["name"],
    )


def format_duration(seconds: float) -> str:
    """Uptime as e.g. '3d 4h 5m'; zero days/hours are left out."""
    days, minutes = divmod(int(seconds) // 60, 24 * 60)
    hours, minutes = divmod(minutes, 60)
    text = " ".join(f"{value}{unit}" for value, unit in ((days, "d"), (hours, "h")) if value)
    if minutes or not text:
        text = f"{text} {minutes}m".lstrip()
    return text


def read_os_release(path: Path = OS_RELEASE_PATH) -> str:
    try:
        for line in path.read_text().splitlines():
            if line.startswith("PRETTY_NAME="):
                return line.split("=", 1)[1].strip().strip('"')
    except OSError:
        pass
    return platform.system()


def get_system_info(settings: Settings) -> Dict[str, str]:
    uptime = "unknown"
    try:
        uptime_raw = Path("/proc/uptime").read_text().split()[0]
        uptime = format_duration(float(uptime_raw))
    except (OSError, ValueError, IndexError):
        pass
    return {
        "hostname": platform.node() or "unknown",
        "os": read_os_release(settings.os_release_path),
        "kernel": platform.release(),
        "uptime": uptime,
    }


def get_memory_summary(path: Path = MEMINFO_PATH) -> Optional[Tuple[float, float]]:
    """Used and total memory in GiB, or None when meminfo is unreadable."""
    kib: Dict[str, int] = {}
    try:
        for line in path.read_text().splitlines():
            key, _, rest = line.partition(":")
            if key in ("MemTotal", "MemAvailable"):
                kib[key] = int(rest.split()[0])
    except (OSError, ValueError, IndexError):
        return None
    if not kib.get("MemTotal") or "MemAvailable" not in kib:
        return None
    used = max(kib["MemTotal"] - kib["MemAvailable"], 0)
    return used / 1024 ** 2, kib["MemTotal"] / 1024 ** 2


def get_storage_overview(path: str = "/") -> Tuple[float, float]:
    """Used and total size in GiB of the filesystem holding path."""
    usage = shutil.disk_usage(path)
    return usage.used / 1024 ** 3, usage.total / 1024 ** 3


def _usage_percent(used: float, total: float) -> float:
    return used / total * 100 if total else 0.0


def get_user_stats(settings: Settings) -> Dict[str, int]:
    entries = read_passwd_entries(settings.passwd_path)
    total = len(entries)
    regular = len(filter_accounts(entries, "regular", settings.uid_min))
    return {
        "total": total,
        "regular": regular,
        "system": total - regular,
        "groups": len(read_group_entries(settings.group_path)),
    }


def format_system_stats(settings: Settings) -> str:
    system = get_system_info(settings)
    users = get_user_stats(settings)
    try:
        used, total = get_storage_overview("/")
    except OSError:
        disk = "Not available"
    else:
        disk = f"{_usage_percent(used, total):.0f}% used ({used:.1f}G of {total:.1f}G)"
    memory = get_memory_summary()
    if memory is None:
        mem = "Not available"
    else:
        used, total = memory
        mem = f"{used:.1f}G used of {total:.1f}G total ({_usage_percent(used, total):.0f}%)"
    lines = [
        f"Hostname: {system['hostname']}",
        f"OS: {system['os']}",
        f"Kernel: {system['kernel']}",
        f"Uptime: {system['uptime']}",
        f"Users: {users['total']} total ({users['regular']} regular, {users['system']} system)",
        f"Groups: {users['groups']}",
        f"Disk Usage: {disk}",
        f"Memory Usage: {mem}",
    ]
    return "\n".join(lines)


def format_account_details(username: str, settings: Settings) -> str:
    entry = find_account(username, settings.passwd_path)
    if entry is None:
        raise ValidationError(f"User '{username}' does not exist.")
    primary, secondary = account_groups(username)
    try:
        status, last_change = password_status(username)
        account_status = "Locked" if is_locked_status(status) else "Active"
    except CommandError:
        account_status, last_change = "Unknown", "unknown"
    admin = any(name in ADMIN_GROUPS for name in [primary] + secondary)
    lines = [
        f"Username: {username}",
        f"User ID: {entry['uid']}",
        f"Full Name: {entry['comment']}",
        f"Primary Group: {primary} ({entry['gid']})",
        f"Secondary Groups: {' '.join(secondary)}",
        f"Home Directory: {entry['home']}",
        f"Shell: {entry['shell']}",
        f"Account Status: {account_status}",
        f"Last Password Change: {last_change}",
        f"Administrator: {'Yes' if admin else 'No'}",
    ]
    return "\n".join(lines)


def create_account(args: argparse.Namespace) -> None:
    command = ["useradd"]
    if args.create_home:
        command.append("-m")
    command.extend(["-c", args.full_name, args.username])
    run_command(command)
    logger.info("Created user %s", args.username)
    print(f"User '{args.username}' has been created.")


def set_password(args: argparse.Namespace) -> None:
    # chpasswd reads the secret from stdin so it never shows up in the process list.
    run_command(["chpasswd"], input_text=f"{args.username}:{args.password}")
    logger.info("Password updated for %s", args.username)
    print(f"Password for '{args.username}' has been updated.")


def grant_admin(args: argparse.Namespace) -> None:
    group = find_admin_group()
    if group is None:
        raise ValidationError(
            f"No administrator group found (tried {', '.join(ADMIN_GROUPS)})."
        )
    run_command(["usermod", "-aG", group, args.username])
    logger.info("Added %s to administrator group %s", args.username, group)
    print(f"User '{args.username}' has been added to administrator group '{group}'.")


def set_full_name(args: argparse.Namespace) -> None:
    run_command(["usermod", "-c", args.full_name, args.username])
    logger.info("Full name updated for %s", args.username)
    print(f"Full name for '{args.username}' has been updated.")


def add_to_groups(args: argparse.Namespace) -> None:
    run_command(["usermod", "-aG", ",".join(args.groups), args.username])
    logger.info("Added %s to groups %s", args.username, ",".join(args.groups))
    print(f"User '{args.username}' has been added to group(s) '{', '.join(args.groups)}'.")


def remove_from_group(args: argparse.Namespace) -> None:
    run_command(["gpasswd", "-d", args.username, args.group])
    logger.info("Removed %s from group %s", args.username, args.group)
    print(f"User '{args.username}' has been removed from group '{args.group}'.")


def set_shell(args: argparse.Namespace) -> None:
    run_command(["usermod", "-s", args.shell, args.username])
    logger.info("Login shell for %s set to %s", args.username, args.shell)
    print(f"Login shell for '{args.username}' has been updated to '{args.shell}'.")


def set_lock_state(args: argparse.Namespace) -> None:
    flag = "-L" if args.action == "lock" else "-U"
    run_command(["usermod", flag, args.username])
    logger.info("Account %s %sed", args.username, args.action)
    print(f"Account for '{args.username}' has been {args.action}ed.")


def delete_account(args: argparse.Namespace) -> None:
    if args.username in current_login_names():
        raise ValidationError("Cannot delete the currently logged-in user.")
    command = ["userdel"]
    if args.remove_home:
        command.append("-r")
    command.append(args.username)
    run_command(command)
    logger.info("Deleted user %s (remove home: %s)", args.username, args.remove_home)
    print(f"User '{args.username}' has been deleted successfully.")


def create_group(args: argparse.Namespace) -> None:
    run_command(["groupadd", args.groupname])
    logger.info("Created group %s", args.groupname)
    print(f"Group '{args.groupname}' has been created successfully.")


def delete_group(args: argparse.Namespace) -> None:
    run_command(["groupdel", args.groupname])
    logger.info("Deleted group %s", args.groupname)
    print(f"Group '{args.groupname}' has been deleted successfully.")


def run_action(handler, **kwargs) -> tuple[bool, str]:
    """Execute a handler and capture stdout/stderr for display inside the TUI."""
    buffer_out = io.StringIO()
    buffer_err = io.StringIO()

    try:
        with redirect_stdout(buffer_out), redirect_stderr(buffer_err):
            handler(argparse.Namespace(**kwargs))
    except ValidationError as exc:
        return False, str(exc)
    except CommandError as exc:
        return False, exc.stderr or str(exc)
    except Exception as exc:
        logger.exception("%s failed", getattr(handler, "__name__", handler))
        stderr_text = buffer_err.getvalue().strip()
        payload = "\n".join(filter(None, [stderr_text, f"Error: {exc}"]))
        return False, payload

    stdout_text = buffer_out.getvalue().strip()
    stderr_text = buffer_err.getvalue().strip()
    combined = "\n".join(filter(None, [stdout_text, stderr_text]))
    return True, combined or "(no output)"


def check_preconditions(commands: Iterable[str] = REQUIRED_COMMANDS) -> None:
    if curses is None:
        raise PreconditionError(
            "The curses module is not available. Install a Python build with curses support."
        )
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise PreconditionError("Interactive mode requires running inside a terminal.")
    if os.geteuid() != 0:
        raise PreconditionError("This tool requires root privileges. Please run with sudo or as root.")
    missing = [command for command in commands if shutil.which(command) is None]
    if missing:
        raise PreconditionError(f"Required commands not found: {', '.join(missing)}")


class LumsTUI:
    CANCEL_TOKEN = ":b"
    BACK_KEYS = (ord("q"), ord("Q"), 27)
    TITLE = "Linux User Management"
    DESCRIPTIONS = {
        "Add User": ["Create a new account with a full name, optional", "home directory and administrator rights."],
        "Modify User": ["Change password, full name, groups, shell or", "lock state of an existing account."],
        "Delete User": ["Remove a regular account and optionally its", "home directory and mail spool."],
        "Manage Groups": ["Create, delete and list groups, and show", "who belongs to them."],
        "List Users": ["Show all, regular or system accounts."],
        "System Statistics": ["Host, OS, account totals, disk and memory usage."],
        "Help": ["Overview of the available functions."],
        "Exit": ["Close the application."],
    }

    def __init__(self, stdscr: Any, settings: Settings) -> None:
        self.stdscr = stdscr
        self.settings = settings
        curses.curs_set(0)
        curses.noecho()
        curses.cbreak()
        self.stdscr.keypad(True)
        self.has_color = False
        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(1, curses.COLOR_CYAN, -1)
            curses.init_pair(2, curses.COLOR_YELLOW, -1)
            curses.init_pair(3, curses.COLOR_GREEN, -1)
            curses.init_pair(4, curses.COLOR_RED, -1)
            self.has_color = True

    # -- dispatch ---------------------------------------------------------

    def get_operations(self) -> List[Tuple[str, Optional[Callable[[], None]]]]:
        return [
            ("Add User", self.add_user_flow),
            ("Modify User", self.modify_user_flow),
            ("Delete User", self.delete_user_flow),
            ("Manage Groups", self.manage_groups_flow),
            ("List Users", self.list_users_flow),
            ("System Statistics", self.system_stats_flow),
            ("Help", self.help_flow),
            ("Exit", None),
        ]

    def run(self) -> None:
        operations = self.get_operations()
        active = 0
        while True:
            self.render_layout(operations, active)
            key = self.stdscr.getch()
            if key in self.BACK_KEYS:
                return
            if ord("1") <= key < ord("1") + len(operations):
                active = key - ord("1")
            elif key not in (10, 13, curses.KEY_RIGHT, ord("l")):
                active = self._move_cursor(key, active, len(operations))
                continue
            handler = operations[active][1]
            if handler is None:
                return
            self.dispatch(handler)

    def dispatch(self, handler: Callable[[], None]) -> None:
        """Run one menu action; its failures are reported, never propagated to the menu loop."""
        try:
            handler()
        except (LumsError, OSError) as exc:
            logger.warning("%s aborted: %s", getattr(handler, "__name__", handler), exc)
            self.show_error(str(exc))

    def menu_loop(self, title: str, options: List[Tuple[str, Optional[Callable[[], None]]]]) -> None:
        labels = [label for label, _ in options]
        index = 0
        while True:
            choice = self.select_option(title, labels, footer="Enter=select · q=back", initial=index, exit_with_q=True)
            if choice is None or options[choice][1] is None:
                return
            index = choice
            self.dispatch(options[choice][1])

    def execute(
        self,
        handler,
        *,
        output_title: Optional[str] = None,
        failure_message: Optional[str] = None,
        **kwargs,
    ) -> bool:
        success, output = run_action(handler, **kwargs)
        if success:
            self.show_message(output_title or "Success", output)
        else:
            self.show_error("\n\n".join(filter(None, [failure_message, output])))
        return success

    # -- layout -----------------------------------------------------------

    def render_layout(self, operations: List[Tuple[str, Optional[Callable[[], None]]]], active: int) -> None:
        self.stdscr.clear()
        height, width = self.stdscr.getmaxyx()
        if not self._has_min_space(height, width):
            self._show_resize_warning(height, width)
            return
        sidebar_width = max(24, min(30, width // 3))
        left = 1
        right = sidebar_width - 1
        top = 1
        bottom = top + 2
        inner = max(0, right - left - 1)
        if inner > 0:
            self.stdscr.hline(top, left + 1, curses.ACS_HLINE, inner)
            self.stdscr.hline(bottom, left + 1, curses.ACS_HLINE, inner)
            self.stdscr.vline(top + 1, left, curses.ACS_VLINE, bottom - top - 1)
            self.stdscr.vline(top + 1, right, curses.ACS_VLINE, bottom - top - 1)
            self.stdscr.addch(top, left, curses.ACS_ULCORNER)
            self.stdscr.addch(top, right, curses.ACS_URCORNER)
            self.stdscr.addch(bottom, left, curses.ACS_LLCORNER)
            self.stdscr.addch(bottom, right, curses.ACS_LRCORNER)
            title_x = left + 1 + max(0, (inner - len(self.TITLE)) // 2)
            self._safe_addstr(top + 1, title_x, self.TITLE[:inner], curses.A_BOLD | self._color(1))
        start_y = bottom + 2
        for idx, (label, _) in enumerate(operations):
            attr = curses.A_REVERSE if idx == active else curses.A_NORMAL
            text = f"{idx + 1}. {label}"
            self._safe_addstr(start_y + idx, 2, text.ljust(sidebar_width - 4)[: sidebar_width - 4], attr)
        for y in range(1, height - 1):
            try:
                self.stdscr.addch(y, sidebar_width, curses.ACS_VLINE)
            except curses.error:
                pass
        content_x = sidebar_width + 2
        content_width = width - content_x - 3
        self.draw_view_content(operations[active][0], content_x, content_width)
        self._show_hint("↑/↓ or 1-8 · Enter=open · q=exit")
        self.stdscr.refresh()

    def draw_view_content(self, label: str, start_x: int, width: int) -> None:
        y = self._draw_card(2, start_x, width, label, self.DESCRIPTIONS.get(label, []))
        try:
            stats = get_user_stats(self.settings)
        except OSError:
            return
        lines = [
            f"Host     : {platform.node() or 'unknown'}",
            f"Users    : {stats['total']} ({stats['regular']} regular, {stats['system']} system)",
            f"Groups   : {stats['groups']}",
        ]
        self._draw_card(y + 2, start_x, width, "Overview", lines)

    def _draw_card(self, y: int, x: int, width: int, title: str, lines: List[str]) -> int:
        width = max(24, width)
        top = "╭" + "─" * (width - 2) + "╮"
        bottom = "╰" + "─" * (width - 2) + "╯"
        self._safe_addstr(y, x, top)
        title_text = f" {title.upper()} "
        title_line = "│" + title_text[: width - 2].ljust(width - 2) + "│"
        self._safe_addstr(y + 1, x, title_line, curses.A_BOLD)
        for idx, line in enumerate(lines, start=2):
            self._safe_addstr(y + idx, x, "│" + line[: width - 2].ljust(width - 2) + "│")
        self._safe_addstr(y + len(lines) + 2, x, bottom)
        return y + len(lines) + 2

    # -- dialog primitives ------------------------------------------------

    def select_option(
        self,
        title: str,
        options: List[str],
        footer: str = "",
        initial: int = 0,
        exit_with_q: bool = False,
    ) -> Optional[int]:
        if not options:
            return None
        window = self._open_list_window(title, options, footer)
        index = max(0, min(initial, len(options) - 1))
        while True:
            key = self._draw_list(window, title, options, index, footer)
            if key in (10, 13):
                self._show_hint("")
                return index
            if key in self.BACK_KEYS:
                if exit_with_q:
                    self._show_hint("")
                    return None
                continue
            index = self._move_cursor(key, index, len(options))

    def select_many(self, title: str, options: List[str], footer: str = "") -> Optional[List[int]]:
        """Checklist: Space toggles an entry, Enter confirms, q cancels."""
        if not options:
            return None
        footer = footer or "Space=toggle · Enter=confirm · q=cancel"
        chosen: Set[int] = set()
        window = self._open_list_window(title, [f"[x] {option}" for option in options], footer)
        index = 0
        while True:
            labels = [f"[{'x' if pos in chosen else ' '}] {option}" for pos, option in enumerate(options)]
            key = self._draw_list(window, title, labels, index, footer)
            if key == ord(" "):
                chosen ^= {index}
            elif key in (10, 13):
                self._show_hint("")
                return sorted(chosen)
            elif key in self.BACK_KEYS:
                self._show_hint("")
                return None
            else:
                index = self._move_cursor(key, index, len(options))

    def _open_list_window(self, title: str, labels: List[str], footer: str) -> Any:
        height, width = self.stdscr.getmaxyx()
        win_height = min(len(labels) + 6, height - 2)
        win_width = min(max(len(title) + 6, len(footer) + 4, *(len(label) + 6 for label in labels)), width - 4)
        window = curses.newwin(
            win_height,
            win_width,
            max(1, (height - win_height) // 2),
            max(2, (width - win_width) // 2),
        )
        window.keypad(True)
        return window

    def _draw_list(self, window: Any, title: str, labels: List[str], index: int, footer: str) -> int:
        """Draw one frame of a list dialog and return the next key."""
        win_height, win_width = window.getmaxyx()
        window.clear()
        self._box_border(window)
        window.addstr(1, 2, title[: win_width - 4], curses.A_BOLD)
        visible = win_height - 4
        offset = max(0, min(index - visible + 1, len(labels) - visible))
        for row, label in enumerate(labels[offset : offset + visible]):
            attr = curses.A_REVERSE if offset + row == index else curses.A_NORMAL
            window.addstr(3 + row, 2, label[: win_width - 4], attr)
        self._show_hint(footer)
        self.stdscr.refresh()
        window.refresh()
        return window.getch()

    def _move_cursor(self, key: int, index: int, count: int) -> int:
        if key in (curses.KEY_UP, ord("k")):
            return (index - 1) % count
        if key in (curses.KEY_DOWN, ord("j")):
            return (index + 1) % count
        return index

    def prompt_text(
        self,
        title: str,
        default: Optional[str] = None,
        allow_empty: bool = False,
        secret: bool = False,
        allow_cancel: bool = False,
    ) -> Optional[str]:
        """
        Single-line input. Cancelling returns None: typing ':b' in plain
        prompts, Esc in secret ones so that any typed secret is accepted.
        """
        while True:
            self.stdscr.clear()
            height, width = self.stdscr.getmaxyx()
            self._safe_addstr(1, 2, title, curses.A_BOLD)
            if default is not None:
                self._safe_addstr(3, 2, f"Default: {default}")
            if allow_cancel:
                how = "Press Esc" if secret else f"Type '{self.CANCEL_TOKEN}'"
                self._safe_addstr(4, 2, f"{how} to cancel.")
            if secret:
                self._safe_addstr(5 if allow_cancel else 4, 2, "Input is hidden; type and press Enter.")
            input_y = height // 2
            prompt_label = "> "
            self._safe_addstr(input_y, 2, prompt_label)
            self.stdscr.refresh()
            if secret:
                value = self._read_secret(input_y, 2 + len(prompt_label), width - 4, allow_cancel)
                if value is None:
                    return None
            else:
                curses.echo()
                try:
                    raw = self.stdscr.getstr(input_y, 2 + len(prompt_label), width - 6)
                finally:
                    curses.noecho()
                value = self._decode_input(raw)
                if allow_cancel and value.lower() == self.CANCEL_TOKEN:
                    return None

            if not value and default is not None:
                return default
            if value or allow_empty:
                return value
            self.show_status("Input is required. Press any key to continue.")

    @staticmethod
    def _decode_input(raw: Optional[bytes]) -> str:
        try:
            return raw.decode("utf-8").strip() if raw else ""
        except UnicodeDecodeError as exc:
            raise ValidationError("Input must be valid UTF-8.") from exc

    def prompt_bool(self, title: str, default: bool = False, allow_cancel: bool = False) -> Optional[bool]:
        initial = 0 if default else 1
        opt = self.select_option(
            title,
            ["Yes", "No"],
            footer="Enter to confirm, q to cancel.",
            initial=initial,
            exit_with_q=allow_cancel,
        )
        if opt is None:
            if allow_cancel:
                return None
            return default
        return opt == 0

    def prompt_password(self, prompt: str) -> Optional[str]:
        """Ask for a new secret twice; None when cancelled or a short one is declined."""
        while True:
            password = self.prompt_text(prompt, secret=True, allow_cancel=True)
            if password is None:
                return None
            confirm = self.prompt_text("Confirm password", secret=True, allow_cancel=True)
            if confirm is None:
                return None
            if password != confirm:
                self.show_status("Passwords do not match. Press any key to try again.")
                continue
            break
        if is_weak_password(password):
            use_anyway = self.prompt_bool(
                f"Password is less than {MIN_PASSWORD_LENGTH} characters. Use anyway?",
                default=False,
                allow_cancel=True,
            )
            if not use_anyway:
                return None
        return password

    def show_message(self, title: str, content: str) -> None:
        self._show_popup(title, content, color=3)

    def show_error(self, content: str) -> None:
        self._show_popup("Error", content, color=4)

    def show_text(self, title: str, content: str) -> None:
        """Scrollable full-screen viewer for listings that may not fit a popup."""
        lines = content.splitlines() or ["(no output)"]
        y_offset = 0
        while True:
            self.stdscr.clear()
            height, width = self.stdscr.getmaxyx()
            self._safe_addstr(1, 2, title, curses.A_BOLD | self._color(1))
            visible = max(1, height - 5)
            for idx in range(visible):
                line_idx = y_offset + idx
                if line_idx >= len(lines):
                    break
                self._safe_addstr(3 + idx, 2, lines[line_idx][: width - 4])
            self._show_hint("Up/Down=scroll | PgUp/PgDn=page | Enter/q=back")
            self.stdscr.refresh()
            key = self.stdscr.getch()
            if key in (ord("q"), ord("Q"), 27, curses.KEY_ENTER, 10, 13):
                break
            if key == curses.KEY_DOWN and y_offset < max(len(lines) - visible, 0):
                y_offset += 1
            elif key == curses.KEY_UP and y_offset > 0:
                y_offset -= 1
            elif key == curses.KEY_NPAGE:
                y_offset = min(y_offset + visible, max(len(lines) - visible, 0))
            elif key == curses.KEY_PPAGE:
                y_offset = max(y_offset - visible, 0)
        self._show_hint("")

    def show_status(self, message: str) -> None:
        self._show_hint(message)
        self.stdscr.refresh()
        self.stdscr.getch()
        self._show_hint("")

    def _show_popup(self, title: str, content: str, color: int) -> None:
        height, width = self.stdscr.getmaxyx()
        wrap_width = max(20, min(70, width - 10))
        lines: List[str] = []
        for raw in content.splitlines() or ["(no output)"]:
            lines.extend(textwrap.wrap(raw, wrap_width) or [""])
        max_line = max(len(line) for line in lines)
        win_height = min(len(lines) + 6, height - 2)
        win_width = min(max(max_line + 6, len(title) + 6, 20), width - 4)
        start_y = max(1, (height - win_height) // 2)
        start_x = max(2, (width - win_width) // 2)
        window = curses.newwin(win_height, win_width, start_y, start_x)
        window.keypad(True)
        while True:
            window.clear()
            self._box_border(window)
            window.addstr(1, 2, title[: win_width - 4], curses.A_BOLD | self._color(color))
            visible = win_height - 6
            for idx in range(min(visible, len(lines))):
                window.addstr(3 + idx, 2, lines[idx][: win_width - 4])
            button = "[ OK ]"
            btn_x = max(2, (win_width - len(button)) // 2)
            window.addstr(win_height - 2, btn_x, button, curses.A_REVERSE)
            window.refresh()
            key = window.getch()
            if key in (curses.KEY_ENTER, 10, 13, ord(" "), ord("q"), ord("Q"), 27):
                break

    def _read_secret(self, y: int, x: int, width: int, allow_cancel: bool = False) -> Optional[str]:
        """Masked input read key by key; Esc returns None when cancelling is allowed."""
        typed: List[str] = []
        while True:
            self._render_input(y, x, "*" * len(typed), width)
            key = self.stdscr.getch()
            if key in (10, 13):
                return "".join(typed)
            if key == 27 and allow_cancel:
                return None
            if key in (curses.KEY_BACKSPACE, 127, 8):
                del typed[-1:]
            elif 32 <= key <= 126 and len(typed) < width - 1:
                typed.append(chr(key))

    def _render_input(self, y: int, x: int, text: str, width: int) -> None:
        self.stdscr.move(y, x)
        self.stdscr.clrtoeol()
        self.stdscr.addstr(y, x, text[:width])
        self.stdscr.refresh()

    def _color(self, idx: int) -> int:
        return curses.color_pair(idx) if self.has_color else curses.A_NORMAL

    def _safe_addstr(self, y: int, x: int, text: str, attr: int = 0) -> None:
        height, width = self.stdscr.getmaxyx()
        if y < 0 or y >= height or x >= width:
            return
        available = width - x
        if available <= 0:
            return
        try:
            self.stdscr.addstr(y, x, text[:available], attr)
        except curses.error:
            pass

    def _show_hint(self, text: str) -> None:
        """Replace the bottom status line; an empty text only clears it."""
        height, width = self.stdscr.getmaxyx()
        row = max(0, height - 1)
        try:
            self.stdscr.move(row, 1)
            self.stdscr.clrtoeol()
        except curses.error:
            pass
        if text:
            self._safe_addstr(row, 2, text[: max(0, width - 4)], self._color(2))

    def _box_border(self, window: Any) -> None:
        window.border(
            curses.ACS_VLINE,
            curses.ACS_VLINE,
            curses.ACS_HLINE,
            curses.ACS_HLINE,
            curses.ACS_ULCORNER,
            curses.ACS_URCORNER,
            curses.ACS_LLCORNER,
            curses.ACS_LRCORNER,
        )

    def _has_min_space(self, height: int, width: int) -> bool:
        return height >= 18 and width >= 60

    def _show_resize_warning(self, height: int, width: int) -> None:
        self.stdscr.clear()
        msg = "Terminal too small. Increase size to at least 60x18."
        y = max(0, height // 2)
        x = max(0, (width - len(msg)) // 2)
        self._safe_addstr(y, x, msg, curses.A_BOLD | self._color(4))
        self.stdscr.refresh()

    # -- add user ---------------------------------------------------------

    def _collect_new_account(self) -> Optional[NewAccountForm]:
        form = NewAccountForm()
        username = self.prompt_text("Add User: enter username", allow_empty=True, allow_cancel=True)
        if username is None:
            return None
        try:
            form.username = validate_name(username, "Username")
        except ValidationError as exc:
            self.show_error(str(exc))
            return None
        if user_exists(form.username):
            self.show_error(f"User '{form.username}' already exists.")
            return None
        name = self.prompt_text("Add User: enter full name", allow_empty=True, allow_cancel=True)
        if name is None:
            return None
        form.full_name = name
        admin = self.prompt_bool("Should this user be an administrator (sudo)?", allow_cancel=True)
        if admin is None:
            return None
        form.admin = admin
        create_home = self.prompt_bool("Create home directory for this user?", allow_cancel=True)
        if create_home is None:
            return None
        form.create_home = create_home
        return form

    def _rollback_account(self, username: str) -> None:
        logger.warning("Rolling back creation of user %s", username)
        run_command(["userdel", "-r", username], check=False)

    def add_user_flow(self) -> None:
        form = self._collect_new_account()
        if form is None:
            return
        with ExitStack() as rollback:
            success, output = run_action(
                create_account,
                username=form.username,
                full_name=form.full_name,
                create_home=form.create_home,
            )
            if not success:
                self.show_error(f"Failed to create user.\n\n{output}")
                return
            # From here on, leaving the block without pop_all() removes the account again.
            rollback.callback(self._rollback_account, form.username)

            form.password = self.prompt_password(f"Enter password for {form.username}")
            if form.password is None:
                rollback.close()
                self.show_error("User creation canceled. User has been removed.")
                return
            success, output = run_action(set_password, username=form.username, password=form.password)
            if not success:
                rollback.close()
                self.show_error(f"Failed to set password. User has been removed.\n\n{output}")
                return
            rollback.pop_all()

        if form.admin:
            success, output = run_action(grant_admin, username=form.username)
            if not success:
                self.show_error(f"Could not add user to an administrator group.\n\n{output}")
        self.show_message("Success", f"User '{form.username}' has been created successfully.")

    # -- modify user ------------------------------------------------------

    def modify_user_flow(self) -> None:
        entries = sorted(read_passwd_entries(self.settings.passwd_path), key=lambda e: e["username"])
        options = [f"{entry['username']:<20} {full_name(entry)}".rstrip() for entry in entries]
        choice = self.select_option("Select user to modify", options, footer="Enter=select · q=back", exit_with_q=True)
        if choice is None:
            return
        username = entries[choice]["username"]
        actions: List[Tuple[str, Optional[Callable[[str], None]]]] = [
            ("Change password", self._change_password_for_user),
            ("Change user's full name", self._change_full_name),
            ("Add to group", self._add_to_groups),
            ("Remove from group", self._remove_from_group),
            ("Change login shell", self._change_shell),
            ("Lock/unlock account", self._toggle_lock),
            ("Show user information", self._show_user_details),
            ("Return to main menu", None),
        ]
        labels = [label for label, _ in actions]
        index = 0
        while True:
            if find_account(username, self.settings.passwd_path) is None:
                self.show_error(f"User '{username}' no longer exists.")
                return
            choice = self.select_option(
                f"Modify User: {username}",
                labels,
                footer="Enter=select · q=back",
                initial=index,
                exit_with_q=True,
            )
            if choice is None:
                return
            action = actions[choice][1]
            if action is None:
                return
            index = choice
            self.dispatch(lambda: action(username))

    def _change_password_for_user(self, username: str) -> None:
        password = self.prompt_password(f"Enter new password for {username}")
        if password is None:
            return
        self.execute(
            set_password,
            failure_message="Failed to change password.",
            username=username,
            password=password,
        )

    def _change_full_name(self, username: str) -> None:
        entry = find_account(username, self.settings.passwd_path)
        current = full_name(entry) if entry else ""
        name = self.prompt_text(
            f"Enter new full name for {username}",
            default=current,
            allow_empty=True,
            allow_cancel=True,
        )
        if name is None:
            return
        self.execute(
            set_full_name,
            failure_message="Failed to change full name.",
            username=username,
            full_name=name,
        )

    def _add_to_groups(self, username: str) -> None:
        primary, secondary = account_groups(username)
        current = {primary, *secondary}
        groups = sorted(
            group["name"]
            for group in read_group_entries(self.settings.group_path)
            if group["name"] not in current
        )
        if not groups:
            self.show_error(f"User '{username}' is already a member of every group.")
            return
        chosen = self.select_many(f"Add {username} to groups", groups)
        if not chosen:
            return
        self.execute(
            add_to_groups,
            failure_message="Failed to add user to group.",
            username=username,
            groups=[groups[idx] for idx in chosen],
        )

    def _remove_from_group(self, username: str) -> None:
        _, secondary = account_groups(username)
        if not secondary:
            self.show_error("User is not a member of any secondary groups.")
            return
        groups = sorted(secondary)
        choice = self.select_option("Remove from group", groups, footer="Enter=select · q=back", exit_with_q=True)
        if choice is None:
            return
        self.execute(
            remove_from_group,
            failure_message="Failed to remove user from group.",
            username=username,
            group=groups[choice],
        )

    def _change_shell(self, username: str) -> None:
        shells = read_shells(self.settings.shells_path)
        if not shells:
            self.show_error(f"No login shells listed in {self.settings.shells_path}.")
            return
        entry = find_account(username, self.settings.passwd_path)
        initial = shells.index(entry["shell"]) if entry and entry["shell"] in shells else 0
        choice = self.select_option(
            "Select login shell",
            shells,
            footer="Enter=select · q=back",
            initial=initial,
            exit_with_q=True,
        )
        if choice is None:
            return
        self.execute(
            set_shell,
            failure_message="Failed to change shell.",
            username=username,
            shell=shells[choice],
        )

    def _toggle_lock(self, username: str) -> None:
        status, _ = password_status(username)
        if is_locked_status(status):
            question, action = f"Account for '{username}' is locked. Unlock it?", "unlock"
        else:
            question, action = f"Account for '{username}' is unlocked. Lock it?", "lock"
        if not self.prompt_bool(question, default=False, allow_cancel=True):
            return
        self.execute(
            set_lock_state,
            failure_message=f"Failed to {action} account.",
            username=username,
            action=action,
        )

    def _show_user_details(self, username: str) -> None:
        self.show_message(f"User Information: {username}", format_account_details(username, self.settings))

    # -- delete user ------------------------------------------------------

    def delete_user_flow(self) -> None:
        candidates = deletable_accounts(self.settings)
        if not candidates:
            self.show_error("No regular users available for deletion.")
            return
        options = [f"{entry['username']:<20} {full_name(entry)}".rstrip() for entry in candidates]
        choice = self.select_option("Select user to delete", options, footer="Enter=select · q=back", exit_with_q=True)
        if choice is None:
            return
        username = candidates[choice]["username"]
        if username in current_login_names():
            self.show_error("Cannot delete the currently logged-in user.")
            return
        confirm = self.prompt_bool(
            f"Are you sure you want to delete user '{username}'?",
            default=False,
            allow_cancel=True,
        )
        if not confirm:
            return
        remove_home = self.prompt_bool(
            f"Delete home directory and mail spool of '{username}' as well?",
            default=False,
            allow_cancel=True,
        )
        if remove_home is None:
            return
        self.execute(
            delete_account,
            failure_message="Failed to delete user. The user might be currently logged in or running processes.",
            username=username,
            remove_home=remove_home,
        )

    # -- groups -----------------------------------------------------------

    def manage_groups_flow(self) -> None:
        self.menu_loop(
            "Group Management",
            [
                ("Create new group", self.create_group_flow),
                ("Delete group", self.delete_group_flow),
                ("List groups", self.list_groups_flow),
                ("Show group members", self.group_members_flow),
                ("Return to main menu", None),
            ],
        )

    def create_group_flow(self) -> None:
        groupname = self.prompt_text("Create Group: enter group name", allow_empty=True, allow_cancel=True)
        if groupname is None:
            return
        try:
            validate_name(groupname, "Group name")
        except ValidationError as exc:
            self.show_error(str(exc))
            return
        if group_exists(groupname):
            self.show_error(f"Group '{groupname}' already exists.")
            return
        self.execute(create_group, failure_message="Failed to create group.", groupname=groupname)

    def delete_group_flow(self) -> None:
        groups = deletable_groups(self.settings)
        if not groups:
            self.show_error("No non-system groups found.")
            return
        options = [f"{group['name']} (GID: {group['gid']})" for group in groups]
        choice = self.select_option("Select group to delete", options, footer="Enter=select · q=back", exit_with_q=True)
        if choice is None:
            return
        group = groups[choice]
        owners = primary_group_users(group["gid"], self.settings.passwd_path)
        if owners:
            self.show_error(
                f"Failed to delete group. '{group['name']}' is the primary group of: {', '.join(owners)}."
            )
            return
        confirm = self.prompt_bool(
            f"Are you sure you want to delete group '{group['name']}'?",
            default=False,
            allow_cancel=True,
        )
        if not confirm:
            return
        self.execute(
            delete_group,
            failure_message="Failed to delete group. The group might be a primary group for some users.",
            groupname=group["name"],
        )

    def list_groups_flow(self) -> None:
        groups = sorted(read_group_entries(self.settings.group_path), key=lambda g: g["name"])
        lines = [f"{group['name']} (GID: {group['gid']})" for group in groups]
        self.show_text("Group List", "\n".join(lines) or "(no groups)")

    def group_members_flow(self) -> None:
        names = sorted(group["name"] for group in read_group_entries(self.settings.group_path))
        choice = self.select_option("Select group", names, footer="Enter=select · q=back", exit_with_q=True)
        if choice is None:
            return
        name = names[choice]
        gid, members = group_members(name, self.settings.group_path, self.settings.passwd_path)
        if members:
            message = f"Group '{name}' (GID: {gid}) members:\n\n{' '.join(members)}"
        else:
            message = f"Group '{name}' (GID: {gid}) has no members."
        self.show_message("Group Members", message)

    # -- listings ---------------------------------------------------------

    def list_users_flow(self) -> None:
        uid_min = self.settings.uid_min
        views = [
            ("All users", "all", "All Users"),
            (f"Regular users (UID >= {uid_min})", "regular", "Regular Users"),
            (f"System users (UID < {uid_min})", "system", "System Users"),
        ]
        options = [label for label, _, _ in views] + ["Return to main menu"]
        choice = self.select_option("Choose users to list", options, footer="Enter=select · q=back", exit_with_q=True)
        if choice is None or choice == len(views):
            return
        _, kind, title = views[choice]
        entries = filter_accounts(read_passwd_entries(self.settings.passwd_path), kind, uid_min)
        self.show_text(title, format_account_listing(entries))

    def system_stats_flow(self) -> None:
        self.show_message("System Statistics", format_system_stats(self.settings))

    def help_flow(self) -> None:
        self.show_text("Help", HELP_TEXT)


def interactive_main(settings: Settings) -> int:
    try:
        curses.wrapper(lambda stdscr: LumsTUI(stdscr, settings).run())
    except curses.error as exc:
        print(f"Failed to start interactive interface: {exc}", file=sys.stderr)
        return 1
    print("Thank you for using Linux User Management System.")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lums",
        description="Interactive Linux user and group manager (requires root).",
    )
    parser.add_argument(
        "--uid-min",
        type=int,
        default=None,
        help="Lowest UID counted as a regular account (default: UID_MIN from /etc/login.defs, else 1000).",
    )
    parser.add_argument(
        "--gid-min",
        type=int,
        default=None,
        help="Lowest GID counted as a non-system group (default: GID_MIN from /etc/login.defs, else 1000).",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Append a log of executed actions to this file.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level for --log-file (default: INFO).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = load_settings(args)
    setup_logging(settings.log_file, settings.log_level)

    try:
        check_preconditions()
    except PreconditionError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    logger.info("Starting lums %s (uid_min=%s, gid_min=%s)", __version__, settings.uid_min, settings.gid_min)
    try:
        return interactive_main(settings)
    except Exception as exc:
        logger.exception("Unexpected error")
        print(f"Error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
