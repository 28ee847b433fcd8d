import subprocess
import sys
from importlib.metadata import entry_points, files, version


def assert_distribution_files() -> None:
    dist_files = files("progress-logger")
    if dist_files is None:
        raise AssertionError(
            "Could not read installed distribution files for progress-logger"
        )

    available = {str(path) for path in dist_files}
    required = {
        "progress_logger/__init__.py",
        "progress_logger/cli.py",
        "progress_logger/intercept.py",
        "progress_logger/logger.py",
        "progress_logger/scheduler.py",
        "progress_logger/py.typed",
    }
    missing = sorted(required - available)
    if missing:
        raise AssertionError(f"Installed distribution is missing files: {missing}")


def assert_console_script() -> None:
    scripts = {ep.name: ep.value for ep in entry_points(group="console_scripts")}
    if scripts.get("progress-logger") != "progress_logger.cli:main":
        raise AssertionError(
            "Console script 'progress-logger' is missing or points to wrong entry point"
        )


def assert_imports() -> None:
    import progress_logger
    from progress_logger import cli, eta, exceptions, frames, intercept, scheduler

    _ = cli
    _ = eta
    _ = exceptions
    _ = frames
    _ = intercept
    _ = scheduler

    installed_version = version("progress-logger")
    if progress_logger.__version__ != installed_version:
        raise AssertionError(
            f"progress_logger.__version__ ({progress_logger.__version__}) "
            f"!= metadata version ({installed_version})"
        )


def assert_cli_help() -> None:
    result = subprocess.run(
        [sys.executable, "-m", "progress_logger", "-h"],
        check=False,
        capture_output=True,
        text=True,
    )

    if result.returncode != 0:
        raise AssertionError(
            "`python -m progress_logger -h` failed: "
            f"exit={result.returncode}, stderr={result.stderr.strip()}"
        )

    help_text = result.stdout.lower()
    if "usage:" not in help_text:
        raise AssertionError("CLI help output did not contain a usage section")


def main() -> None:
    assert_distribution_files()
    assert_console_script()
    assert_imports()
    assert_cli_help()
    print("smoke test passed")


if __name__ == "__main__":
    main()
