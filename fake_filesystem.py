# fake_filesystem.py
#
# In-memory filesystem for the desktop shell. The tree is a flat lookup
# table keyed by absolute path; a directory's `children` list is only used
# for listing and never to validate intermediate path segments.

import copy
from enum import Enum


class NodeKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"


class VfsError(Exception):
    pass


class NotADirectory(VfsError):
    pass


# nothing at all exists at the key
class NoSuchDirectory(NotADirectory):
    pass


class NoSuchFile(VfsError):
    pass


class FileExists(VfsError):
    pass


class FileSystemNode:
    def __init__(self, name, kind, content=None, children=None,
                 permissions=None, owner="root"):
        if kind is NodeKind.FILE and children is not None:
            raise ValueError(f"file node {name!r} cannot have children")
        if kind is NodeKind.DIRECTORY and content is not None:
            raise ValueError(f"directory node {name!r} cannot have content")

        self.name = name
        self.kind = kind
        self.content = content
        self.children = list(children or []) if kind is NodeKind.DIRECTORY else None
        if permissions is None:
            permissions = "drwxr-xr-x" if kind is NodeKind.DIRECTORY else "-rw-r--r--"
        self.permissions = permissions
        self.owner = owner

    @property
    def is_directory(self):
        return self.kind is NodeKind.DIRECTORY

    def __repr__(self):
        return f"FileSystemNode({self.name!r}, {self.kind.value})"


def _dir(name, children, owner="root", permissions="drwxr-xr-x"):
    return FileSystemNode(name, NodeKind.DIRECTORY, children=children,
                          permissions=permissions, owner=owner)


def _file(name, content, owner="root", permissions="-rw-r--r--"):
    return FileSystemNode(name, NodeKind.FILE, content=content,
                          permissions=permissions, owner=owner)


ROOT = "/"

# Seeded directory structure
SEED_NODES = {
    "/": _dir("/", ["bin", "etc", "home", "logs", "sys", "mnt", "opt"]),

    "/bin": _dir("bin", ["nmap", "ssh", "aircrack", "hydra", "decrypt", "ghost-protocol"]),
    "/bin/nmap": _file("nmap", "BINARY_DATA_ENCRYPTED", permissions="-rwxr-xr-x"),
    "/bin/ssh": _file("ssh", "BINARY_DATA_ENCRYPTED", permissions="-rwxr-xr-x"),
    "/bin/aircrack": _file("aircrack", "BINARY_DATA_ENCRYPTED", permissions="-rwxr-xr-x"),
    "/bin/hydra": _file("hydra", "BINARY_DATA_ENCRYPTED", permissions="-rwxr-xr-x"),
    "/bin/decrypt": _file("decrypt", "BINARY_DATA_ENCRYPTED", permissions="-rwxr-xr-x"),
    "/bin/ghost-protocol": _file("ghost-protocol", "v4.2.0 SOURCE_CODE: ENCRYPTED",
                                 permissions="-rwxr-xr-x"),

    "/etc": _dir("etc", ["hosts", "shadow", "config", "motd", "networks"]),
    "/etc/hosts": _file("hosts", "127.0.0.1 localhost\n"
                                 "192.168.1.1 gateway\n"
                                 "10.0.0.5 target-mainframe\n"
                                 "10.0.8.44 makkah-uplink\n"
                                 "10.10.1.1 burj-khalifa-core"),
    "/etc/shadow": _file("shadow", "root:$6$v.P/Gj8$m7...:18234:0:99999:7:::",
                         permissions="-rw-------"),
    "/etc/config": _file("config", "UPLINK=sat-link\nCIPHER=aes-256-gcm\nTRACE_GUARD=on"),
    "/etc/motd": _file("motd", "WARNING: Unauthorized access to this system is strictly prohibited."),
    "/etc/networks": _file("networks", "default 0.0.0.0\nloopback 127.0.0.0\ncore-grid 10.10.0.0"),

    "/home": _dir("home", ["ghost", "admin"]),
    "/home/ghost": _dir("ghost", ["notes.txt", "targets.json", "exploit_db"], owner="ghost"),
    "/home/ghost/notes.txt": _file("notes.txt", "Target confirmed: Burj Khalifa Zone 154.\n"
                                                "Encryption level: Sovereign.\n"
                                                "Status: Pending...\n"
                                                "Note: Check the 154th floor for the physical vault uplink.",
                                   owner="ghost"),
    "/home/ghost/targets.json": _file("targets.json",
                                      '[{"id": "DXB-01", "ip": "10.10.1.1", "priority": "CRITICAL"}]',
                                      owner="ghost"),
    "/home/ghost/exploit_db": _dir("exploit_db", ["cve-2026-0154.txt"], owner="ghost"),
    "/home/ghost/exploit_db/cve-2026-0154.txt": _file("cve-2026-0154.txt",
                                                      "Vault uplink firmware: unauthenticated RCE (unpatched)",
                                                      owner="ghost"),
    "/home/admin": _dir("admin", ["todo.txt"], owner="admin", permissions="drwx------"),
    "/home/admin/todo.txt": _file("todo.txt", "TODO: rotate SSH keys", owner="admin",
                                  permissions="-rw-------"),

    "/logs": _dir("logs", ["auth.log", "syslog", "trace.log"]),
    "/logs/auth.log": _file("auth.log", "sshd[1337]: Accepted password for ghost from 10.0.8.44"),
    "/logs/syslog": _file("syslog", "kernel: sat-link0: link up"),
    "/logs/trace.log": _file("trace.log", "trace: no active trace"),

    "/sys": _dir("sys", ["kernel", "network", "power"]),
    "/sys/kernel": _dir("kernel", []),
    "/sys/network": _dir("network", []),
    "/sys/power": _dir("power", []),

    "/mnt": _dir("mnt", []),
    "/opt": _dir("opt", []),
}


class VirtualFileSystem:
    def __init__(self, nodes=None, writable=False):
        self.nodes = copy.deepcopy(SEED_NODES if nodes is None else nodes)
        if ROOT not in self.nodes or not self.nodes[ROOT].is_directory:
            raise ValueError("filesystem needs a root directory")
        # mkdir/touch stay accepted-but-inert unless writable
        self.writable = writable

    # Join a relative name onto cwd. Absolute input is returned untouched.
    def resolve(self, path, cwd):
        if path.startswith("/"):
            return path
        base = "" if cwd == ROOT else cwd
        return f"{base}/{path}"

    def get(self, path):
        return self.nodes.get(path)

    def is_directory(self, path):
        node = self.nodes.get(path)
        return node is not None and node.is_directory

    def change_directory(self, path, cwd):
        if path == "..":
            if cwd == ROOT:
                return ROOT
            parts = [p for p in cwd.split("/") if p]
            parts.pop()
            return "/" + "/".join(parts)

        if path == ROOT:
            return ROOT

        target = self.resolve(path, cwd)
        node = self.nodes.get(target)
        if node is None:
            raise NoSuchDirectory(f"cd: {path}: No such directory")
        if not node.is_directory:
            raise NotADirectory(f"cd: {path}: Not a directory")
        return target

    def read_file(self, path, cwd):
        node = self.nodes.get(self.resolve(path, cwd))
        if node is None or node.is_directory:
            raise NoSuchFile(f"cat: {path}: No such file")
        return node.content or ""

    def list_children(self, path):
        node = self.nodes.get(path)
        if node is None or not node.is_directory:
            return []
        return list(node.children)

    def mkdir(self, name, cwd):
        return self._create("mkdir", name, cwd, NodeKind.DIRECTORY)

    def touch(self, name, cwd, content=""):
        return self._create("touch", name, cwd, NodeKind.FILE, content)

    def _create(self, command, name, cwd, kind, content=None):
        target = self.resolve(name, cwd)
        if not self.writable:
            return target

        existing = self.nodes.get(target)
        if existing is not None:
            # touch on an existing node is a no-op, mkdir is not
            if kind is NodeKind.FILE:
                return target
            raise FileExists(f"{command}: {name}: File exists")

        parent_path, _, base = target.rpartition("/")
        parent_path = parent_path or ROOT
        parent = self.nodes.get(parent_path)
        if parent is None or not parent.is_directory or not base:
            raise NoSuchDirectory(f"{command}: {name}: No such directory")

        if kind is NodeKind.DIRECTORY:
            node = FileSystemNode(base, kind, children=[], owner="ghost")
        else:
            node = FileSystemNode(base, kind, content=content, owner="ghost")
        self.nodes[target] = node
        parent.children.append(base)
        return target

    # Listed children that have no node of their own
    def dangling_children(self):
        missing = []
        for path, node in self.nodes.items():
            if not node.is_directory:
                continue
            for child in node.children:
                child_path = self.resolve(child, path)
                if child_path not in self.nodes:
                    missing.append(child_path)
        return missing
