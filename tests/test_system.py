import pytest

from xconcur.system import in_container


def test_missing_file_means_not_in_container(tmp_path):
    assert in_container(tmp_path / "absent") is False


def test_plain_host_cgroup(tmp_path):
    path = tmp_path / "cgroup"
    path.write_text("0::/user.slice/user-1000.slice/session-1.scope\n")
    assert in_container(path) is False


@pytest.mark.parametrize(
    "line",
    [
        "12:cpu:/docker/abcdef\n",
        "0::/kubepods/besteffort/pod1234\n",
        "0::/system.slice/containerd.service\n",
    ],
)
def test_container_markers(tmp_path, line):
    path = tmp_path / "cgroup"
    path.write_text(line)
    assert in_container(str(path)) is True


def test_directory_is_not_readable(tmp_path):
    assert in_container(tmp_path) is False