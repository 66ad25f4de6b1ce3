"""
Build dispatch: decide where maturin runs and run it.

A run moves through these stages:

1. Parse the ``args`` input and put the subcommand in front.
2. For build/publish, resolve the Rust target and decide whether to build
   in a manylinux container, appending --manylinux/--target as needed.
3. Either install the target and maturin on the host and run maturin
   directly, or generate a bootstrap script and run it under docker.
4. Map the exit code to success or BuildFailedError.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, MutableMapping, Optional

import requests

from maturinkit.config.inputs import ActionInputs
from maturinkit.core import reporting
from maturinkit.core.directory import get_workspace_dir
from maturinkit.core.environment import (
    UNIVERSAL2_ENV,
    ExecutionEnvironment,
    add_tool_cache_pythons_to_path,
)
from maturinkit.core.exceptions import BuildFailedError
from maturinkit.core.filesystem import atomic_write, make_executable
from maturinkit.core.platform import PlatformInfo, detect_platform
from maturinkit.core.process import ProcessRunner
from maturinkit.cross.containers import (
    AUTO_TIER,
    DISABLED,
    ContainerImage,
    normalize_tier,
    resolve_image,
    select_container,
)
from maturinkit.cross.targets import resolve_target
from maturinkit.dispatch import docker
from maturinkit.dispatch.args import tokenize
from maturinkit.dispatch.script import ContainerScript, build_container_script
from maturinkit.toolchain.maturin import MaturinInstaller
from maturinkit.toolchain.rust import RustTargetInstaller
from maturinkit.toolchain.version import resolve_version

logger = logging.getLogger(__name__)

# Only these subcommands accept --manylinux and --target
BUILD_COMMANDS = ("build", "publish")
UNIVERSAL2_FLAG = "--universal2"
UNIVERSAL2_TARGETS = ("x86_64-apple-darwin", "aarch64-apple-darwin")
SCRIPT_NAME = "run-maturin-action.sh"


def use_container(command: str, host_os: str, tier: str, container: str) -> bool:
    """
    Whether a build should run inside a manylinux container.

    Args:
        command: maturin subcommand
        host_os: Host OS ('linux', 'macos', 'windows')
        tier: Normalized compatibility tier
        container: Container input ('off' disables isolation)
    """
    return (
        command in BUILD_COMMANDS
        and host_os == "linux"
        and tier != ""
        and tier != DISABLED
        and container != DISABLED
    )


@dataclass
class BuildPlan:
    """
    Decisions made before anything runs.

    Attributes:
        command: maturin subcommand
        args: Full maturin argument list, subcommand first
        target: Resolved Rust target triple ('' for host)
        tier: Normalized manylinux tier ('' when not requested)
        containerized: Build in a container instead of on the host
    """

    command: str
    args: List[str] = field(default_factory=list)
    target: str = ""
    tier: str = ""
    containerized: bool = False


class Dispatcher:
    """
    Run one maturin invocation described by ActionInputs.

    Example:
        >>> inputs = ActionInputs(command="build", manylinux="2014")
        >>> Dispatcher(inputs).run()
    """

    def __init__(
        self,
        inputs: ActionInputs,
        platform: Optional[PlatformInfo] = None,
        runner: Optional[ProcessRunner] = None,
        environ: Optional[MutableMapping[str, str]] = None,
        workspace: Optional[Path] = None,
        tools_dir: Optional[Path] = None,
        session: Optional[requests.Session] = None,
    ):
        self.inputs = inputs
        self.platform = platform or detect_platform()
        self.runner = runner or ProcessRunner()
        self.environ = os.environ if environ is None else environ
        self.workspace = (
            Path(workspace) if workspace else get_workspace_dir(self.environ)
        )
        self.tools_dir = tools_dir
        self.session = session
        self.rust = RustTargetInstaller(self.runner)

    # ------------------------------------------------------------------
    # Planning
    # ------------------------------------------------------------------

    def plan(self) -> BuildPlan:
        """Build the maturin argument list and choose the execution mode."""
        command = self.inputs.command
        plan = BuildPlan(command=command, args=[command, *tokenize(self.inputs.args)])

        if command not in BUILD_COMMANDS:
            return plan

        tier = normalize_tier(self.inputs.manylinux)
        if tier and self.platform.is_linux:
            plan.tier = tier
            if tier != AUTO_TIER:
                # Use lowest compatible manylinux version
                plan.args.extend(["--manylinux", tier])
            plan.containerized = use_container(
                command, self.platform.os, tier, self.inputs.container
            )

        plan.target = resolve_target(self.inputs.target, self.platform.os)
        if plan.target:
            plan.args.extend(["--target", plan.target])
        return plan

    def resolve_tag(self) -> str:
        return resolve_version(self.inputs.maturin_version, session=self.session)

    def container_image(self, plan: BuildPlan, tag: str) -> ContainerImage:
        container = select_container(
            plan.target,
            plan.tier,
            override=self.inputs.container,
            host_arch=self.platform.arch,
        )
        return resolve_image(container, tag)

    def container_script(self, plan: BuildPlan, tag: str) -> ContainerScript:
        return build_container_script(
            tag,
            plan.args,
            self.platform,
            target=plan.target,
            rust_toolchain=self.inputs.rust_toolchain,
            extra_build_command=self.inputs.extra_build_command,
        )

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    def run(self) -> None:
        """
        Execute the build.

        Raises:
            BuildFailedError: If maturin exits nonzero
            MaturinKitError: For any other fatal setup failure
        """
        plan = self.plan()
        logger.debug(f"Build plan: {plan}")

        if plan.command in BUILD_COMMANDS and not plan.containerized:
            with reporting.group("Install Rust target"):
                if self.inputs.rust_toolchain:
                    self.rust.set_override(self.inputs.rust_toolchain)
                self.rust.ensure(plan.target, self.inputs.rust_toolchain)

        tag = self.resolve_tag()

        if plan.containerized:
            exit_code = self.run_in_container(plan, tag)
        else:
            exit_code = self.run_on_host(plan, tag)

        if exit_code != 0:
            raise BuildFailedError(exit_code)

    def run_on_host(self, plan: BuildPlan, tag: str) -> int:
        if self.platform.is_macos and not self.environ.get("pythonLocation"):
            add_tool_cache_pythons_to_path(self.platform.arch, self.environ)

        with reporting.group("Install maturin"):
            logger.info(f"Installing 'maturin' from tag '{tag}'")
            installer = MaturinInstaller(
                tag, self.tools_dir, self.platform, self.environ
            )
            maturin = str(installer.ensure())
            self.runner.run(maturin, ["--version"], check=True)

        env = ExecutionEnvironment.from_ambient(self.environ)
        if UNIVERSAL2_FLAG in plan.args and self.platform.is_macos:
            with reporting.group("Prepare macOS universal2 build environment"):
                for target in UNIVERSAL2_TARGETS:
                    self.rust.ensure(target, self.inputs.rust_toolchain)
                env = env.with_overrides(UNIVERSAL2_ENV)

        return self.runner.run(maturin, plan.args, env=env).exit_code

    def write_script(self, script: ContainerScript) -> Path:
        """Persist the container script into the shared workspace."""
        content = script.render()
        logger.info(content)
        script_path = self.workspace / SCRIPT_NAME
        atomic_write(script_path, content)
        make_executable(script_path)
        return script_path

    def run_in_container(self, plan: BuildPlan, tag: str) -> int:
        image = self.container_image(plan, tag)
        docker.pull_image(image, self.runner)

        script_path = self.write_script(self.container_script(plan, tag))
        return docker.run_script(image, self.workspace, script_path, self.runner)
