# window_manager.py
#
# Fixed registry of the six desktop windows: open state, geometry and
# stacking order. Windows are never created or destroyed after startup.

from enum import Enum

MIN_WIDTH = 400
MIN_HEIGHT = 300


class AppId(str, Enum):
    TERMINAL = "terminal"
    CAMERA = "camera"
    WIFI = "wifi"
    NETWORK = "network"
    CRACKER = "cracker"
    MAP = "map"


class UnknownWindowId(LookupError):
    pass


# id -> (title, is_open, z_index, width, height, x, y)
DEFAULT_WINDOWS = {
    AppId.TERMINAL: ("root@sovereign:~", True, 10, 700, 450, 50, 50),
    AppId.CAMERA: ("GOD-EYE // CCTV_FEED", True, 11, 800, 500, 100, 100),
    AppId.WIFI: ("WIFI_SNIFFER v2.1", False, 1, 600, 400, 150, 150),
    AppId.NETWORK: ("LOCAL_NETWORK_MAP", False, 1, 600, 400, 200, 200),
    AppId.CRACKER: ("HYDRA_FORCE // BRUTE", False, 1, 500, 450, 250, 250),
    AppId.MAP: ("TACTICAL_MAP // CORE_GRID", False, 1, 900, 600, 50, 50),
}
DEFAULT_ACTIVE = AppId.CAMERA

GEOMETRY_FIELDS = ("x", "y", "width", "height")
META_FIELDS = ("title", "is_open")


def app_id(value):
    if isinstance(value, AppId):
        return value
    try:
        return AppId(value)
    except ValueError:
        raise UnknownWindowId(f"unknown window id: {value!r}") from None


class WindowInstance:
    def __init__(self, id, title, is_open, z_index, width, height, x, y):
        self.id = id
        self.title = title
        self.is_open = is_open
        self.z_index = z_index
        self.width = width
        self.height = height
        self.x = x
        self.y = y

    def as_dict(self):
        return {
            "id": self.id.value,
            "title": self.title,
            "is_open": self.is_open,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "z_index": self.z_index,
        }

    def __repr__(self):
        state = "open" if self.is_open else "closed"
        return f"WindowInstance({self.id.value}, {state}, z={self.z_index})"


class WindowManager:
    def __init__(self, defaults=None):
        defaults = DEFAULT_WINDOWS if defaults is None else defaults
        self.windows = {
            wid: WindowInstance(wid, *defaults[wid]) for wid in AppId
        }
        self.active_window = DEFAULT_ACTIVE

    def get(self, window_id):
        return self.windows[app_id(window_id)]

    def _raise(self, window):
        # max is over every window, open or not, so z only ever grows
        window.z_index = max(w.z_index for w in self.windows.values()) + 1
        self.active_window = window.id

    def open(self, window_id):
        window = self.get(window_id)
        window.is_open = True
        self._raise(window)
        return window

    # Leaves z_index and active_window alone.
    def close(self, window_id):
        window = self.get(window_id)
        window.is_open = False
        return window

    def focus(self, window_id):
        window = self.get(window_id)
        self._raise(window)
        return window

    def update_geometry(self, window_id, x=None, y=None, width=None, height=None):
        window = self.get(window_id)
        if x is not None:
            window.x = x
        if y is not None:
            window.y = y
        if width is not None:
            window.width = max(MIN_WIDTH, width)
        if height is not None:
            window.height = max(MIN_HEIGHT, height)
        return window

    def update_meta(self, window_id, title=None, is_open=None):
        window = self.get(window_id)
        if title is not None:
            window.title = title
        if is_open is True and not window.is_open:
            self.open(window.id)
        elif is_open is False:
            self.close(window.id)
        return window

    def update_window(self, window_id, changes):
        """Apply a partial update coming from a panel.

        Geometry keys go through the size floor, ``title``/``is_open`` go
        through the open/close path so reopening also raises the window.
        """
        unknown = set(changes) - set(GEOMETRY_FIELDS) - set(META_FIELDS)
        if unknown:
            raise ValueError(f"unknown window fields: {', '.join(sorted(unknown))}")

        window = self.get(window_id)
        geometry = {k: v for k, v in changes.items() if k in GEOMETRY_FIELDS}
        meta = {k: v for k, v in changes.items() if k in META_FIELDS}
        if geometry:
            self.update_geometry(window.id, **geometry)
        if meta:
            self.update_meta(window.id, **meta)
        return window

    def stacking_order(self):
        # bottom to top
        return sorted((w for w in self.windows.values() if w.is_open),
                      key=lambda w: w.z_index)

    def top_window(self):
        order = self.stacking_order()
        return order[-1] if order else None

    def begin_drag(self, window_id, pointer_x, pointer_y):
        return DragSession(self, window_id, pointer_x, pointer_y)

    def begin_resize(self, window_id, handle, pointer_x, pointer_y):
        return ResizeSession(self, window_id, handle, pointer_x, pointer_y)


class ResizeHandle(Enum):
    EAST = "e"
    SOUTH = "s"
    SOUTHEAST = "se"


class _Gesture:
    def __init__(self, manager, window_id):
        self.manager = manager
        self.window = manager.focus(window_id)
        self.active = True

    def _check(self):
        if not self.active:
            raise RuntimeError(f"gesture on {self.window.id.value} already released")

    def release(self):
        self.active = False


class DragSession(_Gesture):
    def __init__(self, manager, window_id, pointer_x, pointer_y):
        super().__init__(manager, window_id)
        self.offset_x = pointer_x - self.window.x
        self.offset_y = pointer_y - self.window.y

    def move(self, pointer_x, pointer_y):
        self._check()
        return self.manager.update_geometry(self.window.id,
                                            x=pointer_x - self.offset_x,
                                            y=pointer_y - self.offset_y)


class ResizeSession(_Gesture):
    def __init__(self, manager, window_id, handle, pointer_x, pointer_y):
        # checked before focus: a bad handle must not touch the stack
        self.handle = ResizeHandle(handle)
        super().__init__(manager, window_id)
        self.start_width = self.window.width
        self.start_height = self.window.height
        self.start_x = pointer_x
        self.start_y = pointer_y

    def move(self, pointer_x, pointer_y):
        self._check()
        width = height = None
        if self.handle in (ResizeHandle.EAST, ResizeHandle.SOUTHEAST):
            width = self.start_width + (pointer_x - self.start_x)
        if self.handle in (ResizeHandle.SOUTH, ResizeHandle.SOUTHEAST):
            height = self.start_height + (pointer_y - self.start_y)
        return self.manager.update_geometry(self.window.id, width=width, height=height)
