"""Facts about the environment the process runs in."""

from __future__ import annotations

from pathlib import Path

SELF_CGROUP_PATH = "/proc/self/cgroup"

_CONTAINER_MARKERS = (b"docker", b"kubepods", b"containerd")


def in_container(cgroup_path: str | Path = SELF_CGROUP_PATH) -> bool:
    """Return True if the cgroup file names a container runtime.

    An unreadable or missing file means the process is not in a container.
    """
    try:
        content = Path(cgroup_path).read_bytes()
    except OSError:
        return False
    return any(marker in content for marker in _CONTAINER_MARKERS)