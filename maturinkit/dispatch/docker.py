"""
Docker invocation for isolated builds.

The workspace is mounted at the same path inside the container so paths in
the user's arguments stay valid. Secrets and build flags are forwarded by
name only; docker reads their values from our environment.
"""

import logging
from pathlib import Path
from typing import List, Optional

from maturinkit.core import reporting
from maturinkit.core.exceptions import ProcessError
from maturinkit.core.process import ProcessRunner
from maturinkit.cross.containers import ContainerImage

logger = logging.getLogger(__name__)

DOCKER = "docker"

DOCKER_ENV_VARS = (
    "DEBIAN_FRONTEND=noninteractive",
    "RUSTFLAGS",
    "RUST_BACKTRACE",
    "MATURIN_PASSWORD",
    "MATURIN_PYPI_TOKEN",
    "ARCHFLAGS",
    "PYO3_CROSS",
    "PYO3_CROSS_LIB_DIR",
    "PYO3_CROSS_PYTHON_VERSION",
    "_PYTHON_SYSCONFIGDATA_NAME",
)


def pull_image(image: ContainerImage, runner: Optional[ProcessRunner] = None) -> None:
    """
    Pull a container image.

    Raises:
        ProcessError: If docker pull exits nonzero
    """
    runner = runner or ProcessRunner()
    with reporting.group("Pull Docker image"):
        logger.info(f"Using {image.reference} Docker image")
        result = runner.run(DOCKER, ["pull", image.reference])
        if not result.success:
            raise ProcessError(
                f"maturin: 'docker pull' returned {result.exit_code}",
                result.exit_code,
            )


def docker_run_args(
    image: ContainerImage, workspace: Path, script_path: Path
) -> List[str]:
    """
    Arguments for 'docker run' executing script_path inside image.

    Example:
        >>> docker_run_args(ContainerImage("quay.io/pypa/manylinux2014_x86_64"),
        ...                 Path("/src"), Path("/src/run-maturin-action.sh"))[:4]
        ['run', '--rm', '--workdir', '/src']
    """
    args = ["run", "--rm", "--workdir", str(workspace)]
    for name in DOCKER_ENV_VARS:
        args.extend(["-e", name])
    args.extend(["-v", f"{workspace}:{workspace}"])
    if image.entrypoint:
        args.extend(["--entrypoint", image.entrypoint])
    args.extend([image.reference, str(script_path)])
    return args


def run_script(
    image: ContainerImage,
    workspace: Path,
    script_path: Path,
    runner: Optional[ProcessRunner] = None,
) -> int:
    """
    Run a build script in a fresh container.

    Returns:
        Exit code of the container
    """
    runner = runner or ProcessRunner()
    return runner.run(DOCKER, docker_run_args(image, workspace, script_path)).exit_code
