import pytest

from fake_filesystem import (
    SEED_NODES,
    FileExists,
    FileSystemNode,
    NodeKind,
    NoSuchDirectory,
    NoSuchFile,
    NotADirectory,
    VirtualFileSystem,
)


@pytest.fixture
def vfs():
    return VirtualFileSystem()


@pytest.mark.parametrize("path, cwd, expected", [
    ("/etc/hosts", "/home/ghost", "/etc/hosts"),
    ("notes.txt", "/home/ghost", "/home/ghost/notes.txt"),
    ("etc", "/", "/etc"),
    ("a/b/c", "/", "/a/b/c"),
])
def test_resolve(vfs, path, cwd, expected):
    assert vfs.resolve(path, cwd) == expected


@pytest.mark.parametrize("path, cwd", [
    ("notes.txt", "/home/ghost"),
    ("etc", "/"),
    ("/logs/syslog", "/sys"),
    ("does/not/exist", "/home"),
])
def test_resolve_is_idempotent_from_root(vfs, path, cwd):
    once = vfs.resolve(path, cwd)
    assert vfs.resolve(once, "/") == once


def test_resolve_does_not_check_intermediate_segments(vfs):
    assert vfs.resolve("/nowhere/at/all", "/etc") == "/nowhere/at/all"


def test_cd_dotdot_at_root_is_noop(vfs):
    assert vfs.change_directory("..", "/") == "/"


def test_cd_dotdot_pops_one_segment(vfs):
    assert vfs.change_directory("..", "/home/ghost") == "/home"
    assert vfs.change_directory("..", "/home") == "/"


def test_cd_slash_jumps_to_root(vfs):
    assert vfs.change_directory("/", "/home/ghost/exploit_db") == "/"


def test_cd_into_file_is_not_a_directory(vfs):
    with pytest.raises(NotADirectory) as exc:
        vfs.change_directory("shadow", "/etc")
    assert not isinstance(exc.value, NoSuchDirectory)
    assert str(exc.value) == "cd: shadow: Not a directory"


def test_cd_missing_is_no_such_directory(vfs):
    with pytest.raises(NoSuchDirectory) as exc:
        vfs.change_directory("vault", "/home")
    assert str(exc.value) == "cd: vault: No such directory"


def test_read_file_relative(vfs):
    assert vfs.read_file("notes.txt", "/home/ghost") == SEED_NODES["/home/ghost/notes.txt"].content


def test_read_file_on_directory_fails(vfs):
    with pytest.raises(NoSuchFile) as exc:
        vfs.read_file("exploit_db", "/home/ghost")
    assert str(exc.value) == "cat: exploit_db: No such file"


def test_list_children_keeps_insertion_order(vfs):
    assert vfs.list_children("/") == ["bin", "etc", "home", "logs", "sys", "mnt", "opt"]
    assert vfs.list_children("/mnt") == []
    assert vfs.list_children("/etc/hosts") == []
    assert vfs.list_children("/missing") == []


def test_seed_has_no_dangling_children(vfs):
    assert vfs.dangling_children() == []


def test_listing_is_independent_of_node_table():
    nodes = {
        "/": FileSystemNode("/", NodeKind.DIRECTORY, children=["ghost-dir"]),
    }
    vfs = VirtualFileSystem(nodes)
    assert vfs.list_children("/") == ["ghost-dir"]
    assert vfs.dangling_children() == ["/ghost-dir"]


def test_instances_do_not_share_seed(vfs):
    vfs.nodes["/home/ghost"].children.append("extra")
    assert "extra" not in VirtualFileSystem().list_children("/home/ghost")


def test_node_kind_invariants():
    with pytest.raises(ValueError):
        FileSystemNode("f", NodeKind.FILE, children=["x"])
    with pytest.raises(ValueError):
        FileSystemNode("d", NodeKind.DIRECTORY, content="x")


def test_requires_root_directory():
    with pytest.raises(ValueError):
        VirtualFileSystem({"/": FileSystemNode("/", NodeKind.FILE, content="")})


def test_mkdir_and_touch_are_inert_by_default(vfs):
    before = dict(vfs.nodes)
    assert vfs.mkdir("loot", "/home/ghost") == "/home/ghost/loot"
    assert vfs.touch("drop.txt", "/home/ghost") == "/home/ghost/drop.txt"
    assert vfs.nodes == before
    assert "loot" not in vfs.list_children("/home/ghost")


def test_writable_mkdir_registers_child():
    vfs = VirtualFileSystem(writable=True)
    vfs.mkdir("loot", "/home/ghost")
    assert vfs.is_directory("/home/ghost/loot")
    assert vfs.list_children("/home/ghost")[-1] == "loot"
    assert vfs.change_directory("loot", "/home/ghost") == "/home/ghost/loot"


def test_writable_touch_creates_readable_file():
    vfs = VirtualFileSystem(writable=True)
    vfs.touch("drop.txt", "/mnt")
    assert vfs.read_file("/mnt/drop.txt", "/") == ""
    # touching again leaves it alone
    vfs.touch("/mnt/drop.txt", "/")
    assert vfs.list_children("/mnt") == ["drop.txt"]


def test_writable_mkdir_errors():
    vfs = VirtualFileSystem(writable=True)
    with pytest.raises(FileExists):
        vfs.mkdir("etc", "/")
    with pytest.raises(NoSuchDirectory):
        vfs.mkdir("/nowhere/loot", "/")
    with pytest.raises(NoSuchDirectory):
        vfs.touch("hosts/x", "/etc")


def test_node_fields_match_data_model(vfs):
    assert set(vars(vfs.get("/home/ghost"))) == {
        "name", "kind", "content", "children", "permissions", "owner",
    }
