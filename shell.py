# shell.py
#
# Terminal panel command interpreter. Reads and navigates the fake
# filesystem, raises the trace level, asks the window manager to open
# panels, and writes everything it does into the session transcript.

import itertools
import random
import time
from dataclasses import dataclass, field
from enum import Enum

from alert import MAX_TRACE
from fake_filesystem import VfsError
from window_manager import AppId

HOME_PATH = "/home/ghost"
IDENTITY = "ghost@dubai-grid-v8"

SCAN_DELAY = 1.0
CAMERA_DELAY = 1.5
WIFI_DELAY = 1.2
CRACK_DELAY = 2.0

EXPLOIT_TRACE = 25
CRACK_TRACE = 15
CRACK_FAIL_TRACE = 20
CRACK_SUCCESS_RATE = 0.7

BOOT_LINES = (
    "GHOST_OS v8.0-KERNEL_INIT",
    'Secure Uplink Established. Type "help" to begin operations.',
)

HELP_LINES = (
    "  crack [TARGET] [TYPE]   Initiate breach sequence (e.g., crack NBD_VAULT BANK)",
    "  scan                    Global SIGINT discovery",
    "  camera                  Hijack CCTV uplink",
    "  wifi                    Start WiFi sniffer",
    "  exploit                 Deploy payload against the core grid",
    "  ls [dir]                List directory contents",
    "  cd [dir]                Change directory",
    "  cat [file]              Read file content",
    "  pwd                     Print working directory",
    "  mkdir [dir]             Create directory",
    "  touch [file]            Create empty file",
    "  echo [text]             Print text",
    "  history                 Show command history",
    "  clear                   Clear terminal history",
    "  whoami                  Display current user info",
    "  help                    Show this listing",
)

# target substring -> (file name, content, kind); first match wins
LOOT_TABLE = (
    ("NBD", "NBD_Ledger_2026.xlsx", "ACCOUNT #99283: $42,000,000 (FROZEN)", "text"),
    ("BURJ", "Floor_154_Schematics.dwg", "[ENCRYPTED BLUEPRINT DATA]", "binary"),
    ("PALM", "VIP_Resident_List.csv", "Villa 42: Sheikh M. // Villa 09: CEO Emaar", "text"),
)
DEFAULT_LOOT = ("User_Logs.txt", 'SMS: "Meet me at the Marina at 0200"', "text")


class LineKind(Enum):
    INPUT = "input"
    OUTPUT = "output"
    ERROR = "error"
    SUCCESS = "success"
    WARNING = "warning"
    INFO = "info"


class UnknownCommand(Exception):
    pass


@dataclass(frozen=True)
class TranscriptLine:
    id: int
    kind: LineKind
    text: str
    timestamp: float


@dataclass(frozen=True)
class LootFile:
    name: str
    content: str
    kind: str


class Transcript:
    def __init__(self, clock=time.time):
        self.clock = clock
        self.lines = []
        # ids keep counting across clear() so they stay unique
        self._ids = itertools.count(1)

    def append(self, text, kind=LineKind.OUTPUT):
        line = TranscriptLine(next(self._ids), kind, text, self.clock())
        self.lines.append(line)
        return line

    # All lines land together or not at all.
    def extend(self, entries):
        now = self.clock()
        new = [TranscriptLine(next(self._ids), kind, text, now) for text, kind in entries]
        self.lines.extend(new)
        return new

    def clear(self):
        self.lines = []

    def texts(self):
        return [line.text for line in self.lines]

    def __iter__(self):
        return iter(self.lines)

    def __len__(self):
        return len(self.lines)


@dataclass
class ShellSession:
    current_path: str = HOME_PATH
    transcript: Transcript = field(default_factory=Transcript)
    history: list = field(default_factory=list)
    hacked_files: list = field(default_factory=list)


class CommandShell:
    def __init__(self, vfs, session, alert, windows, queue, rng=None):
        self.vfs = vfs
        self.session = session
        self.alert = alert
        self.windows = windows
        self.queue = queue
        self.rng = rng or random.Random()

        self.commands = {
            "help": self._help,
            "ls": self._ls,
            "cd": self._cd,
            "cat": self._cat,
            "pwd": self._pwd,
            "mkdir": self._mkdir,
            "touch": self._touch,
            "echo": self._echo,
            "history": self._history,
            "clear": self._clear,
            "scan": self._scan,
            "camera": self._camera,
            "wifi": self._wifi,
            "exploit": self._exploit,
            "crack": self._crack,
            "whoami": self._whoami,
        }

    @property
    def transcript(self):
        return self.session.transcript

    def log(self, text, kind=LineKind.OUTPUT):
        return self.transcript.append(text, kind)

    def boot(self):
        self.transcript.extend((text, LineKind.OUTPUT) for text in BOOT_LINES)

    def execute(self, raw_line):
        """Run one line of input.

        Blank input is ignored without echo. Anything else is echoed as
        ``<cwd> $ <line>`` and dispatched; filesystem and dispatch errors
        end up as a single error line in the transcript.
        """
        line = raw_line.strip()
        if not line:
            return

        self.log(f"{self.session.current_path} $ {line}", LineKind.INPUT)
        self.session.history.append(line)

        cmd, *args = line.split()
        try:
            handler = self.commands.get(cmd.lower())
            if handler is None:
                raise UnknownCommand(f"sh: command not found: {cmd}")
            handler(args)
        except (VfsError, UnknownCommand) as exc:
            self.log(str(exc), LineKind.ERROR)

    # Built-in commands

    def _help(self, args):
        self.transcript.extend(
            [("AVAILABLE PROTOCOLS:", LineKind.INFO)]
            + [(text, LineKind.OUTPUT) for text in HELP_LINES]
        )

    def _ls(self, args):
        path = self.session.current_path
        if args:
            path = self.vfs.resolve(args[0], path)
            if not self.vfs.is_directory(path):
                self.log(f"ls: {args[0]}: No such directory", LineKind.ERROR)
                return
        self.log("  ".join(self.vfs.list_children(path)))

    def _cd(self, args):
        target = args[0] if args else HOME_PATH
        self.session.current_path = self.vfs.change_directory(target, self.session.current_path)

    def _cat(self, args):
        if not args:
            self.log("cat: missing operand", LineKind.ERROR)
            return
        self.log(self.vfs.read_file(args[0], self.session.current_path))

    def _pwd(self, args):
        self.log(self.session.current_path)

    def _mkdir(self, args):
        if not args:
            self.log("mkdir: missing operand", LineKind.ERROR)
            return
        self.vfs.mkdir(args[0], self.session.current_path)

    def _touch(self, args):
        if not args:
            self.log("touch: missing file operand", LineKind.ERROR)
            return
        self.vfs.touch(args[0], self.session.current_path)

    def _echo(self, args):
        self.log(" ".join(args))

    def _history(self, args):
        self.log("\n".join(f"{i + 1}  {c}" for i, c in enumerate(self.session.history)))

    def _clear(self, args):
        self.transcript.clear()

    def _whoami(self, args):
        self.log(IDENTITY)

    def _scan(self, args):
        self.log("INITIALIZING GLOBAL SIGINT...", LineKind.WARNING)

        def done():
            self.transcript.extend([
                ("FOUND: DUBAI_MALL_GUEST (Open)", LineKind.SUCCESS),
                ("FOUND: NBD_SECURE_NET (WPA3)", LineKind.ERROR),
                ("FOUND: PALM_RES_09 (Weak)", LineKind.WARNING),
                ("SIGINT SWEEP COMPLETE. 3 NETWORKS MAPPED.", LineKind.SUCCESS),
            ])
            self.windows.open(AppId.NETWORK)

        self.queue.schedule(SCAN_DELAY, done, label="scan")

    def _camera(self, args):
        self.log("BYPASSING CCTV AUTHENTICATION...", LineKind.WARNING)

        def done():
            self.log("[SUCCESS] GOD-EYE FEED HIJACKED", LineKind.SUCCESS)
            self.windows.open(AppId.CAMERA)

        self.queue.schedule(CAMERA_DELAY, done, label="camera")

    def _wifi(self, args):
        self.log("PUTTING WLAN0 INTO MONITOR MODE...", LineKind.WARNING)

        def done():
            self.log("[SUCCESS] SNIFFER ATTACHED TO WLAN0MON", LineKind.SUCCESS)
            self.windows.open(AppId.WIFI)

        self.queue.schedule(WIFI_DELAY, done, label="wifi")

    def _exploit(self, args):
        level = self.alert.increment(EXPLOIT_TRACE)
        self.transcript.extend([
            ("[!] EXPLOIT DEPLOYED. INTRUSION DETECTION SYSTEMS ALERTED.", LineKind.ERROR),
            (f"TRACE LEVEL: {level}%", LineKind.WARNING),
        ])

    def _crack(self, args):
        if not args:
            self.log("Usage: crack [TARGET_ID] [TYPE]", LineKind.ERROR)
            return

        target = args[0]
        kind = args[1] if len(args) > 1 else "UNKNOWN"
        self.alert.increment(CRACK_TRACE)
        self.transcript.extend([
            (f"[+] TARGET ACQUIRED: {target}", LineKind.WARNING),
            (f"[+] INJECTING PAYLOAD ({kind})...", LineKind.WARNING),
        ])

        def done():
            if self.rng.random() < CRACK_SUCCESS_RATE:
                loot = loot_for(target)
                self.session.hacked_files.append(loot)
                self.transcript.extend([
                    (f"[SUCCESS] ROOT ACCESS GRANTED to {target}", LineKind.SUCCESS),
                    ("[DATA] Downloading secure files...", LineKind.INFO),
                    (f"-> {loot.name} saved to {HOME_PATH}", LineKind.SUCCESS),
                ])
            else:
                level = self.alert.increment(CRACK_FAIL_TRACE)
                self.log("[FAILURE] FIREWALL DETECTED. TRACE INCREASED.", LineKind.ERROR)
                if level >= MAX_TRACE:
                    self.log("[!] TRACE COMPLETE. PHYSICAL LOCATION COMPROMISED.", LineKind.ERROR)

        self.queue.schedule(CRACK_DELAY, done, label=f"crack {target}")


def loot_for(target):
    for marker, name, content, kind in LOOT_TABLE:
        if marker in target:
            return LootFile(name, content, kind)
    return LootFile(*DEFAULT_LOOT)
