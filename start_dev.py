"""Convenience launcher for the ccache exporter development server.

Usage:
    Windows: python start_dev.py [CCACHE_DIR]
    Linux:   python3 start_dev.py [CCACHE_DIR]

Press Ctrl+C to stop. The script detects a backend virtual environment
and uses it to run Uvicorn with --reload. Run from the repository root.
Without an argument the ccache directory falls back to $CCACHE_DIR,
then ~/.cache/ccache.
"""

from __future__ import annotations

import os
import signal
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
BACKEND_DIR = ROOT_DIR / "backend"

BACKEND_VENV = BACKEND_DIR / (
    ".venv\\Scripts\\python.exe" if os.name == "nt" else ".venv/bin/python"
)

DEFAULT_CCACHE_DIR = Path.home() / ".cache" / "ccache"
PORT = 9508

# ANSI colors (disabled on Windows without VT support)
if os.name == "nt":
    os.system("")  # enable VT100 on Windows 10+

CYAN = "\033[36m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"


def log(level: str, msg: str) -> None:
    colors = {"info": CYAN, "start": GREEN, "stop": YELLOW, "error": RED}
    color = colors.get(level, "")
    print(f"{color}[{level}]{RESET} {msg}")


def resolve_backend_python() -> str:
    """Find the best Python interpreter for the backend."""
    if BACKEND_VENV.exists():
        return str(BACKEND_VENV)

    if os.name != "nt":
        python3_path = BACKEND_DIR / ".venv" / "bin" / "python3"
        if python3_path.exists():
            return str(python3_path)

    log("info", "No venv found — using system Python")
    return sys.executable


def check_dependencies(python: str) -> bool:
    """Verify critical packages are importable."""
    result = subprocess.run(
        [python, "-c", "import fastapi; import uvicorn; import prometheus_client"],
        capture_output=True,
        text=True,
    )
    if result.returncode != 0:
        log("error", "Missing dependencies. Run:")
        log("error", f"  cd {ROOT_DIR} && pip install -e '.[dev]'")
        return False
    return True


def resolve_ccache_dir(argv: list[str]) -> Path:
    if argv:
        return Path(argv[0]).expanduser().resolve()
    env = os.environ.get("CCACHE_DIR")
    if env:
        return Path(env).expanduser()
    return DEFAULT_CCACHE_DIR


def stop_process(proc: subprocess.Popen) -> None:
    if proc.poll() is not None:
        return
    log("stop", "exporter")
    try:
        if os.name == "nt":
            proc.send_signal(signal.CTRL_BREAK_EVENT)
        else:
            try:
                os.killpg(os.getpgid(proc.pid), signal.SIGTERM)
            except ProcessLookupError:
                pass
        proc.wait(timeout=10)
    except subprocess.TimeoutExpired:
        proc.kill()


def main() -> int:
    backend_python = resolve_backend_python()
    ccache_dir = resolve_ccache_dir(sys.argv[1:])

    log("info", f"Python: {backend_python}")
    log("info", f"ccache: {ccache_dir}")

    if not check_dependencies(backend_python):
        return 1
    if not ccache_dir.is_dir():
        log("error", f"ccache directory not found: {ccache_dir}")
        return 1

    os.environ["CCACHE_EXPORTER_CCACHE_DIR"] = str(ccache_dir)
    os.environ.setdefault("CCACHE_EXPORTER_DEBUG", "true")
    os.environ.setdefault("CCACHE_EXPORTER_LOG_LEVEL", "DEBUG")

    cmd = [
        backend_python,
        "-m",
        "uvicorn",
        "ccache_exporter.main:app",
        "--reload",
        "--host",
        "127.0.0.1",
        "--port",
        str(PORT),
    ]
    log("start", f"exporter: {' '.join(cmd)}")
    if os.name == "nt":
        proc = subprocess.Popen(
            cmd, cwd=BACKEND_DIR, creationflags=subprocess.CREATE_NEW_PROCESS_GROUP
        )
    else:
        proc = subprocess.Popen(cmd, cwd=BACKEND_DIR, start_new_session=True)

    log("info", "")
    log("info", f"  Metrics: http://localhost:{PORT}/metrics")
    log("info", f"  Stats:   http://localhost:{PORT}/api/stats")
    log("info", f"  Docs:    http://localhost:{PORT}/docs")
    log("info", "")
    log("info", "Press Ctrl+C to stop")

    try:
        while True:
            retcode = proc.poll()
            if retcode is not None:
                log("info", f"exporter exited with code {retcode}")
                return retcode
            time.sleep(0.5)
    except KeyboardInterrupt:
        print()
        log("info", "Ctrl+C received, shutting down...")
        return 0
    finally:
        stop_process(proc)


if __name__ == "__main__":
    raise SystemExit(main())
