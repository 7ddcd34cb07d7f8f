"""
Pytest configuration and shared fixtures.

`FakeSystem` stands in for the account-management binaries: it keeps users
and groups in memory, answers the commands lums issues and rewrites
passwd/group files in a temporary directory after every call, so the live
readers see the same state the commands produced.
"""

import subprocess
from collections import deque
from pathlib import Path
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

import lums


class FakeSystem:
    """In-memory account database answering lums' external commands."""

    def __init__(self, root: Path):
        self.passwd_path = root / "passwd"
        self.group_path = root / "group"
        self.shells_path = root / "shells"
        self.os_release_path = root / "os-release"
        self.users: Dict[str, Dict[str, Any]] = {}
        self.groups: Dict[str, Dict[str, Any]] = {}
        self.passwords: Dict[str, str] = {}
        self.locked: set = set()
        self.homes: set = set()
        self.calls: List[List[str]] = []
        self.fail: Dict[str, int] = {}

        self.add_group("root", 0)
        self.add_group("daemon", 1)
        self.add_group("sudo", 27, ["admin"])
        self.add_group("users", 100, ["bob"])
        self.add_group("admin", 1000)
        self.add_group("bob", 1001)
        self.add_group("developers", 1002)
        self.add_group("nogroup", 65534)
        self.add_user("root", 0, 0, "root", "/root")
        self.add_user("daemon", 1, 1, "daemon", "/usr/sbin", "/usr/sbin/nologin")
        self.add_user("admin", 1000, 1000, "Admin User,,,", "/home/admin")
        self.add_user("bob", 1001, 1001, "Bob Builder,,,", "/home/bob")
        self.add_user("nobody", 65534, 65534, "nobody", "/nonexistent", "/usr/sbin/nologin")
        self.passwords["admin"] = "hunter2hunter2"
        self.passwords["bob"] = "correcthorse"

        self.shells_path.write_text("# /etc/shells: valid login shells\n/bin/sh\n/bin/bash\n\n/usr/bin/zsh\n")
        self.os_release_path.write_text('NAME="Debian GNU/Linux"\nPRETTY_NAME="Debian GNU/Linux 12 (bookworm)"\n')
        self.write()

    def add_group(self, name: str, gid: int, members: Optional[List[str]] = None) -> None:
        self.groups[name] = {"gid": gid, "members": list(members or [])}

    def add_user(self, name, uid, gid, comment="", home=None, shell="/bin/bash") -> None:
        self.users[name] = {
            "uid": uid,
            "gid": gid,
            "comment": comment,
            "home": home or f"/home/{name}",
            "shell": shell,
        }

    def write(self) -> None:
        self.passwd_path.write_text(
            "".join(
                f"{name}:x:{u['uid']}:{u['gid']}:{u['comment']}:{u['home']}:{u['shell']}\n"
                for name, u in self.users.items()
            )
        )
        self.group_path.write_text(
            "".join(
                f"{name}:x:{g['gid']}:{','.join(g['members'])}\n"
                for name, g in self.groups.items()
            )
        )

    def commands(self, name: str) -> List[List[str]]:
        return [call for call in self.calls if call[0] == name]

    def __call__(self, command, check=True, capture_output=True, input_text=None):
        self.calls.append(list(command))
        name = command[0]
        if name in self.fail:
            code, out, err = self.fail[name], "", f"{name}: forced failure"
        else:
            handler = getattr(self, f"_{name}")
            code, out, err = handler(list(command[1:]), input_text)
        self.write()
        if check and code != 0:
            raise lums.CommandError(command, code, err)
        return subprocess.CompletedProcess(command, code, out, err)

    # -- helpers ----------------------------------------------------------

    def _next_id(self, values) -> int:
        regular = [value for value in values if 1000 <= value < 65534]
        return max(regular, default=999) + 1

    def _group_name(self, gid: int) -> str:
        for name, group in self.groups.items():
            if group["gid"] == gid:
                return name
        return str(gid)

    # -- commands ---------------------------------------------------------

    def _id(self, args, _input):
        if args[0] in ("-gn", "-Gn"):
            user = self.users.get(args[1])
            if user is None:
                return 1, "", f"id: '{args[1]}': no such user"
            primary = self._group_name(user["gid"])
            if args[0] == "-gn":
                return 0, f"{primary}\n", ""
            extra = [name for name, g in self.groups.items() if args[1] in g["members"] and name != primary]
            return 0, " ".join([primary] + extra) + "\n", ""
        if args[0] in self.users:
            return 0, f"uid={self.users[args[0]]['uid']}({args[0]})\n", ""
        return 1, "", f"id: '{args[0]}': no such user"

    def _getent(self, args, _input):
        if args[0] == "group" and args[1] in self.groups:
            group = self.groups[args[1]]
            return 0, f"{args[1]}:x:{group['gid']}:{','.join(group['members'])}\n", ""
        return 2, "", ""

    def _useradd(self, args, _input):
        name = args[-1]
        if name in self.users:
            return 9, "", f"useradd: user '{name}' already exists"
        if name in self.groups:
            return 9, "", f"useradd: group {name} exists"
        comment = args[args.index("-c") + 1] if "-c" in args else ""
        uid = self._next_id(u["uid"] for u in self.users.values())
        gid = self._next_id(g["gid"] for g in self.groups.values())
        self.add_group(name, gid)
        self.add_user(name, uid, gid, comment)
        if "-m" in args:
            self.homes.add(f"/home/{name}")
        return 0, "", ""

    def _userdel(self, args, _input):
        name = args[-1]
        user = self.users.pop(name, None)
        if user is None:
            return 6, "", f"userdel: user '{name}' does not exist"
        for group in self.groups.values():
            if name in group["members"]:
                group["members"].remove(name)
        own = self.groups.get(name)
        if own and own["gid"] == user["gid"] and not any(u["gid"] == own["gid"] for u in self.users.values()):
            del self.groups[name]
        self.passwords.pop(name, None)
        self.locked.discard(name)
        if "-r" in args:
            self.homes.discard(user["home"])
        return 0, "", ""

    def _usermod(self, args, _input):
        name = args[-1]
        user = self.users.get(name)
        if user is None:
            return 6, "", f"usermod: user '{name}' does not exist"
        flag = args[0]
        if flag == "-c":
            user["comment"] = args[1]
        elif flag == "-s":
            user["shell"] = args[1]
        elif flag == "-aG":
            names = args[1].split(",")
            missing = [group for group in names if group not in self.groups]
            if missing:
                return 6, "", f"usermod: group '{missing[0]}' does not exist"
            for group in names:
                if name not in self.groups[group]["members"]:
                    self.groups[group]["members"].append(name)
        elif flag == "-L":
            self.locked.add(name)
        elif flag == "-U":
            self.locked.discard(name)
        return 0, "", ""

    def _chpasswd(self, _args, input_text):
        user, _, password = input_text.rstrip("\n").partition(":")
        if user not in self.users:
            return 1, "", f"chpasswd: line 1: user '{user}' does not exist"
        self.passwords[user] = password
        return 0, "", ""

    def _groupadd(self, args, _input):
        name = args[-1]
        if name in self.groups:
            return 9, "", f"groupadd: group '{name}' already exists"
        self.add_group(name, self._next_id(g["gid"] for g in self.groups.values()))
        return 0, "", ""

    def _groupdel(self, args, _input):
        name = args[-1]
        group = self.groups.get(name)
        if group is None:
            return 6, "", f"groupdel: group '{name}' does not exist"
        for user_name, user in self.users.items():
            if user["gid"] == group["gid"]:
                return 8, "", f"groupdel: cannot remove the primary group of user '{user_name}'"
        del self.groups[name]
        return 0, "", ""

    def _gpasswd(self, args, _input):
        _, user, group = args
        members = self.groups.get(group, {}).get("members", [])
        if user not in members:
            return 3, "", f"gpasswd: user '{user}' is not a member of '{group}'"
        members.remove(user)
        return 0, "", ""

    def _passwd(self, args, _input):
        name = args[-1]
        if name not in self.users:
            return 1, "", f"passwd: user '{name}' does not exist"
        if name in self.locked:
            status = "L"
        elif name in self.passwords:
            status = "P"
        else:
            status = "NP"
        return 0, f"{name} {status} 2026-10-01 0 99999 7 -1\n", ""


class ScriptedTUI(lums.LumsTUI):
    """LumsTUI driven by a queue of canned answers instead of a curses screen.

    Answers for select prompts may be an index or an option label; labels
    also match on the first word of an option (e.g. a username).
    """

    def __init__(self, settings, answers):
        self.settings = settings
        self.has_color = False
        self.answers = deque(answers)
        self.prompts: List[str] = []
        self.menus: List[tuple] = []
        self.messages: List[tuple] = []
        self.statuses: List[str] = []

    def _next(self, title):
        self.prompts.append(title)
        if not self.answers:
            raise AssertionError(f"No scripted answer for prompt: {title}")
        return self.answers.popleft()

    def _index_of(self, answer, options):
        if answer is None or isinstance(answer, int):
            return answer
        if answer in options:
            return options.index(answer)
        for idx, option in enumerate(options):
            if option.split()[0] == answer:
                return idx
        raise AssertionError(f"{answer!r} is not among {options}")

    def prompt_text(self, title, default=None, allow_empty=False, secret=False, allow_cancel=False):
        answer = self._next(title)
        if answer == "" and default is not None:
            return default
        return answer

    def prompt_bool(self, title, default=False, allow_cancel=False):
        return self._next(title)

    def select_option(self, title, options, footer="", initial=0, exit_with_q=False):
        self.menus.append((title, list(options)))
        return self._index_of(self._next(title), options)

    def select_many(self, title, options, footer=""):
        self.menus.append((title, list(options)))
        answer = self._next(title)
        if answer is None:
            return None
        return sorted(self._index_of(label, options) for label in answer)

    def show_message(self, title, content):
        self.messages.append(("message", title, content))

    def show_error(self, content):
        self.messages.append(("error", "Error", content))

    def show_text(self, title, content):
        self.messages.append(("text", title, content))

    def show_status(self, message):
        self.statuses.append(message)

    @property
    def errors(self) -> List[str]:
        return [content for kind, _, content in self.messages if kind == "error"]

    @property
    def last_message(self):
        return self.messages[-1]


@pytest.fixture
def fake_system(tmp_path, monkeypatch) -> FakeSystem:
    """Fake account database wired into lums.run_command; 'admin' runs the tool."""
    system = FakeSystem(tmp_path)
    monkeypatch.setattr(lums, "run_command", system)
    monkeypatch.setattr(lums, "current_login_names", lambda: {"root", "admin"})
    return system


@pytest.fixture
def settings(fake_system) -> lums.Settings:
    return lums.Settings(
        passwd_path=fake_system.passwd_path,
        group_path=fake_system.group_path,
        shells_path=fake_system.shells_path,
        os_release_path=fake_system.os_release_path,
    )


@pytest.fixture
def make_tui(settings):
    """Build a ScriptedTUI answering prompts in the given order."""

    def factory(*answers) -> ScriptedTUI:
        return ScriptedTUI(settings, answers)

    return factory


class FakeWindow:
    """Curses window stand-in: drawing is ignored, input comes from a shared script."""

    def __init__(self, keys: deque, lines: deque, height: int = 24, width: int = 80):
        self.keys = keys
        self.lines = lines
        self.height = height
        self.width = width

    def press(self, *keys) -> "FakeWindow":
        """Queue keys; one-character strings are converted with ord()."""
        self.keys.extend(ord(key) if isinstance(key, str) else key for key in keys)
        return self

    def type_line(self, *lines: bytes) -> "FakeWindow":
        self.lines.extend(lines)
        return self

    def getmaxyx(self):
        return self.height, self.width

    def getch(self) -> int:
        if not self.keys:
            raise AssertionError("No scripted key left")
        return self.keys.popleft()

    def getstr(self, *_args) -> bytes:
        if not self.lines:
            raise AssertionError("No scripted line left")
        return self.lines.popleft()

    def __getattr__(self, _name):
        return lambda *args, **kwargs: None


class _CursesError(Exception):
    pass


def fake_curses_module(screen: FakeWindow) -> SimpleNamespace:
    """The parts of the curses module lums touches, without a terminal."""
    return SimpleNamespace(
        error=_CursesError,
        KEY_UP=259,
        KEY_DOWN=258,
        KEY_RIGHT=261,
        KEY_BACKSPACE=263,
        KEY_ENTER=343,
        KEY_NPAGE=338,
        KEY_PPAGE=339,
        A_BOLD=1 << 21,
        A_NORMAL=0,
        A_REVERSE=1 << 18,
        ACS_HLINE=0,
        ACS_VLINE=0,
        ACS_ULCORNER=0,
        ACS_URCORNER=0,
        ACS_LLCORNER=0,
        ACS_LRCORNER=0,
        COLOR_CYAN=6,
        COLOR_YELLOW=3,
        COLOR_GREEN=2,
        COLOR_RED=1,
        has_colors=lambda: False,
        color_pair=lambda _idx: 0,
        curs_set=lambda _visibility: None,
        echo=lambda: None,
        noecho=lambda: None,
        cbreak=lambda: None,
        newwin=lambda height, width, _y, _x: FakeWindow(screen.keys, screen.lines, height, width),
    )


@pytest.fixture
def screen(monkeypatch) -> FakeWindow:
    """A scripted 80x24 screen with lums.curses pointed at a fake module."""
    stdscr = FakeWindow(deque(), deque())
    monkeypatch.setattr(lums, "curses", fake_curses_module(stdscr))
    return stdscr


@pytest.fixture
def screen_tui(screen, settings) -> lums.LumsTUI:
    """The real LumsTUI drawing on the scripted screen."""
    return lums.LumsTUI(screen, settings)
