import procs
from conftest import write


def make_proc(base, pid, comm):
    write(str(base / str(pid) / "comm"), comm + "\n")


def test_load_process_names(tmp_path):
    path = write(str(tmp_path / "daftar_hitam.conf"), "steam\n\n  wine64-preloader \nobs\n")
    assert procs.load_process_names(path) == ["steam", "wine64-preloader", "obs"]


def test_load_process_names_missing_file(tmp_path):
    assert procs.load_process_names(str(tmp_path / "missing.conf")) is None


def test_load_process_names_is_capped(tmp_path):
    path = write(str(tmp_path / "many.conf"), "".join(f"p{i}\n" for i in range(150)))
    assert len(procs.load_process_names(path)) == procs.MAX_PROCESSES


def test_find_running_process_matches_whole_names(tmp_path):
    make_proc(tmp_path, 1, "systemd")
    make_proc(tmp_path, 4242, "steam")
    (tmp_path / "self").mkdir()
    (tmp_path / "77").mkdir()
    assert procs.find_running_process(["steam"], str(tmp_path)) == "steam"
    assert procs.find_running_process(["ste"], str(tmp_path)) is None


def test_unlistable_proc_means_nothing_running(tmp_path):
    assert procs.get_running_commands(str(tmp_path / "absent")) == set()
    assert procs.find_running_process(["steam"], str(tmp_path / "absent")) is None


def test_find_running_process(tmp_path):
    make_proc(tmp_path, 1, "systemd")
    make_proc(tmp_path, 200, "obs")
    assert procs.find_running_process(["steam", "obs"], str(tmp_path)) == "obs"
    assert procs.find_running_process(["steam"], str(tmp_path)) is None
    assert procs.find_running_process([], str(tmp_path)) is None
