# =========================
# Sovereign Desktop
# =========================
# Text-mode front end for the simulated operator desktop. Wires the fake
# filesystem, the command shell, the trace level and the window manager
# into one application context, records what the operator does as JSON
# lines, and runs an interactive loop on stdin.
#
# Everything here is simulated: no real host, network or device is touched.
# =========================

import json
import os
import threading
import time

from alert import AlertState
from fake_filesystem import NoSuchFile, VirtualFileSystem
from profiles import classify
from scheduler import EventQueue
from shell import CommandShell, LineKind, ShellSession
from window_manager import AppId, ResizeHandle, UnknownWindowId, WindowManager

# Log file where operator activity is stored
LOG_FILE = "logs/desktop.log"

BREACH_DELAY = 2.5
PUMP_INTERVAL = 0.05
TRACE_BAR_WIDTH = 20
TRANSCRIPT_TAIL = 12

LOCKDOWN_BANNER = (
    "!" * 60,
    "   PHYSICAL LOCATION COMPROMISED",
    "   Automatic Lockdown Engaged // Sending Alert to Authorities",
    "   REBOOT REQUIRED",
    "!" * 60,
)

KIND_PREFIX = {
    LineKind.INPUT: "",
    LineKind.OUTPUT: "",
    LineKind.ERROR: "[ERR] ",
    LineKind.SUCCESS: "[OK] ",
    LineKind.WARNING: "[!!] ",
    LineKind.INFO: "[ii] ",
}


# Writes operator activity as JSON (one object per line)
def log_event(data, path=LOG_FILE):
    if path is None:
        return
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "a") as f:
        f.write(json.dumps(data) + "\n")


# One of each piece of state, shared by reference. Every mutation from
# outside goes through a method here so it happens under the lock.
class Desktop:
    def __init__(self, log_path=LOG_FILE, clock=time.monotonic, rng=None, writable_fs=False):
        self.lock = threading.RLock()
        self.log_path = log_path
        self.vfs = VirtualFileSystem(writable=writable_fs)
        self.session = ShellSession()
        self.alert = AlertState()
        self.windows = WindowManager()
        self.queue = EventQueue(clock=clock)
        self.shell = CommandShell(self.vfs, self.session, self.alert,
                                  self.windows, self.queue, rng=rng)
        self.cracked_satellites = []

    def submit(self, line):
        with self.lock:
            if not line.strip():
                return
            self.shell.execute(line)
            log_event({
                "event": "command",
                "timestamp": time.time(),
                "cwd": self.session.current_path,
                "command": line.strip(),
                "trace_level": self.alert.trace_level,
            }, self.log_path)

    def pump(self, now=None):
        with self.lock:
            return self.queue.run_due(now)

    # Panel-facing window calls

    def open_window(self, window_id):
        with self.lock:
            return self.windows.open(window_id)

    def close_window(self, window_id):
        with self.lock:
            return self.windows.close(window_id)

    def focus_window(self, window_id):
        with self.lock:
            return self.windows.focus(window_id)

    def update_window(self, window_id, changes):
        with self.lock:
            return self.windows.update_window(window_id, changes)

    # Title-bar drag to an absolute position
    def move_window(self, window_id, x, y):
        with self.lock:
            window = self.windows.get(window_id)
            drag = self.windows.begin_drag(window.id, window.x, window.y)
            drag.move(x, y)
            drag.release()
            return window

    # South-east handle drag to an absolute size
    def resize_window(self, window_id, width, height):
        with self.lock:
            window = self.windows.get(window_id)
            corner_x, corner_y = window.x + window.width, window.y + window.height
            resize = self.windows.begin_resize(window.id, ResizeHandle.SOUTHEAST, corner_x, corner_y)
            resize.move(corner_x + width - window.width, corner_y + height - window.height)
            resize.release()
            return window

    def summary(self):
        with self.lock:
            return {
                "event": "session",
                "timestamp": time.time(),
                "commands": list(self.session.history),
                "profile": classify(self.session.history, self.alert.trace_level),
                "trace_level": self.alert.trace_level,
                "hacked_files": [f.name for f in self.session.hacked_files],
            }

    def close_session(self):
        summary = self.summary()
        log_event(summary, self.log_path)
        return summary


# Tactical map panel hooks: a satellite breach retitles and force-opens the
# terminal, then reports the downlink once the breach delay elapses.
def breach_satellite(desktop, sat_id, target):
    with desktop.lock:
        if sat_id in desktop.cracked_satellites:
            return False

        desktop.windows.update_window(AppId.TERMINAL, {
            "is_open": True,
            "title": f"BREACHING_SATELLITE // {sat_id}",
        })
        desktop.windows.open(AppId.TERMINAL)
        desktop.shell.log(f"[!] SIGNAL CAPTURED. INJECTING QUANTUM PAYLOAD INTO {sat_id}...",
                          LineKind.WARNING)

        def done():
            desktop.cracked_satellites.append(sat_id)
            desktop.shell.log(f"[SUCCESS] DOWNLINK ESTABLISHED. DESCENDING TO {target}...",
                              LineKind.SUCCESS)

        desktop.queue.schedule(BREACH_DELAY, done, label=f"breach {sat_id}")
        return True


def inspect_target(desktop, target_id):
    with desktop.lock:
        desktop.windows.update_window(AppId.TERMINAL, {"is_open": True})
        desktop.windows.open(AppId.TERMINAL)
        desktop.shell.log(f"[SIGINT] TARGET_LOCKED: {target_id}", LineKind.INFO)
        if "FLOOR_154" in target_id:
            desktop.shell.log("[CRITICAL] ACCESSING SECURITY ENCLAVE", LineKind.ERROR)


# Panel renderers, one per application id

def format_line(line):
    return KIND_PREFIX[line.kind] + line.text


def render_terminal(desktop, window):
    return [format_line(line) for line in desktop.session.transcript.lines[-TRANSCRIPT_TAIL:]]


def render_camera(desktop, window):
    return ["CAM-01 LOBBY      [LIVE]", "CAM-02 VAULT_154  [LIVE]", "CAM-03 HELIPAD    [NO SIGNAL]"]


def render_wifi(desktop, window):
    return ["wlan0mon: channel hopping 1-13", "captured handshakes: 0"]


def render_network(desktop, window):
    try:
        hosts = desktop.vfs.read_file("/etc/hosts", "/")
    except NoSuchFile:
        return ["no host table"]
    return [f"node {line}" for line in hosts.splitlines()]


def render_cracker(desktop, window):
    loot = desktop.session.hacked_files
    if not loot:
        return ["no active brute-force jobs"]
    return [f"{f.name} ({f.kind})" for f in loot]


def render_map(desktop, window):
    cracked = ", ".join(desktop.cracked_satellites) or "none"
    return [f"satellites under control: {cracked}"]


PANEL_RENDERERS = {
    AppId.TERMINAL: render_terminal,
    AppId.CAMERA: render_camera,
    AppId.WIFI: render_wifi,
    AppId.NETWORK: render_network,
    AppId.CRACKER: render_cracker,
    AppId.MAP: render_map,
}


def trace_bar(alert):
    filled = alert.trace_level * TRACE_BAR_WIDTH // 100
    label = "CRITICAL TRACE DETECTED" if alert.critical else "Trace Detection"
    return f"{label} [{'#' * filled}{'.' * (TRACE_BAR_WIDTH - filled)}] {alert.trace_level}%"


def render(desktop):
    with desktop.lock:
        if desktop.alert.compromised:
            return "\n".join(LOCKDOWN_BANNER)

        out = []
        for window in desktop.windows.stacking_order():
            marker = "*" if desktop.windows.active_window is window.id else " "
            out.append(f"[{marker}] {window.title} <{window.id.value}> z={window.z_index} "
                       f"{window.width}x{window.height}@{window.x},{window.y}")
            out.extend("    " + text for text in PANEL_RENDERERS[window.id](desktop, window))
        out.append(trace_bar(desktop.alert))
        return "\n".join(out)


# Prints transcript lines the operator has not seen yet
class TranscriptPrinter:
    def __init__(self, desktop, write=print):
        self.desktop = desktop
        self.write = write
        self.last_id = 0

    def flush(self):
        with self.desktop.lock:
            for line in self.desktop.session.transcript:
                if line.id > self.last_id and line.kind is not LineKind.INPUT:
                    self.write(format_line(line))
                self.last_id = max(self.last_id, line.id)


# Fires due shell timers while the main thread waits on input()
class TimerPump(threading.Thread):
    def __init__(self, desktop, printer, interval=PUMP_INTERVAL):
        super().__init__(daemon=True)
        self.desktop = desktop
        self.printer = printer
        self.interval = interval
        self.stopped = threading.Event()

    def run(self):
        while not self.stopped.wait(self.interval):
            if self.desktop.pump():
                self.printer.flush()

    def stop(self):
        self.stopped.set()


# `:verb args` lines drive the window manager directly
def handle_gesture(desktop, line):
    parts = line.split()
    if not parts:
        return "usage: :windows | :open ID | :close ID | :focus ID | :move ID X Y | :resize ID W H"

    verb, args = parts[0].lower(), parts[1:]
    try:
        if verb == "windows":
            return render(desktop)
        if verb in ("open", "close", "focus") and len(args) == 1:
            action = {"open": desktop.open_window,
                      "close": desktop.close_window,
                      "focus": desktop.focus_window}[verb]
            window = action(args[0])
            return f"[+] {verb} {window.id.value}"
        if verb == "move" and len(args) == 3:
            window = desktop.move_window(args[0], int(args[1]), int(args[2]))
            return f"[+] {window.id.value} at {window.x},{window.y}"
        if verb == "resize" and len(args) == 3:
            window = desktop.resize_window(args[0], int(args[1]), int(args[2]))
            return f"[+] {window.id.value} is {window.width}x{window.height}"
        if verb == "breach" and len(args) == 2:
            if breach_satellite(desktop, args[0], args[1]):
                return f"[+] breaching {args[0]}"
            return f"[+] {args[0]} already under control"
        if verb == "inspect" and len(args) == 1:
            inspect_target(desktop, args[0])
            return f"[+] inspecting {args[0]}"
    except UnknownWindowId as exc:
        return f"[!] {exc}"
    except ValueError as exc:
        return f"[!] bad gesture: {exc}"
    return f"[!] unknown gesture: {line}"


def start_desktop(log_path=LOG_FILE):
    desktop = Desktop(log_path=log_path)
    desktop.shell.boot()
    printer = TranscriptPrinter(desktop)
    pump = TimerPump(desktop, printer)
    pump.start()

    print("[+] Sovereign desktop online. ':windows' shows the layout, 'exit' leaves.")

    try:
        while not desktop.alert.compromised:
            printer.flush()
            try:
                line = input(f"{desktop.session.current_path} $ ")
            except EOFError:
                break

            if line.strip() in ("exit", "logout"):
                break
            if line.startswith(":"):
                print(handle_gesture(desktop, line[1:]))
                continue

            desktop.submit(line)
            if not desktop.session.transcript.lines:
                # `clear`
                print("\033[2J\033[H", end="")

        printer.flush()
        if desktop.alert.compromised:
            print(render(desktop))
    finally:
        pump.stop()
        pump.join()
        summary = desktop.close_session()
        print(f"[+] session closed ({summary['profile']})")


def main():
    start_desktop()


if __name__ == "__main__":
    main()
