"""
Build command construction.

Finds the workspace or project in the target directory and turns a
RunRequest into the argument list (and shell-invocable string) for the
build tool.
"""

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from ..models.config import WrapperConfig
from ..models.request import Operation, RunRequest
from ..validation import NoDescriptorFound

logger = logging.getLogger(__name__)

WORKSPACE_SUFFIX = ".xcworkspace"
PROJECT_SUFFIX = ".xcodeproj"


@dataclass(frozen=True)
class BuildDescriptor:
    """A discovered workspace or project bundle."""

    # "workspace" or "project"
    kind: str
    # Bundle name, relative to the target directory.
    name: str

    @property
    def selector(self) -> str:
        return f"-{self.kind}"


@dataclass(frozen=True)
class BuildCommand:
    """The fully formed build-tool invocation."""

    argv: List[str]
    command_line: str
    working_dir: Path
    descriptor: BuildDescriptor
    archive_path: Optional[Path] = None


def find_build_descriptor(target_dir: Path) -> BuildDescriptor:
    """
    Locate the build descriptor in ``target_dir``.

    A workspace wins over a project. When several bundles of the same kind
    exist the alphabetically first one is used.

    Raises:
        NoDescriptorFound: If the directory is missing or holds neither kind
    """
    target_dir = Path(target_dir)
    if not target_dir.is_dir():
        raise NoDescriptorFound(target_dir)

    entries = sorted(entry.name for entry in target_dir.iterdir())
    workspaces = [name for name in entries if name.endswith(WORKSPACE_SUFFIX)]
    projects = [name for name in entries if name.endswith(PROJECT_SUFFIX)]

    for kind, candidates in (("workspace", workspaces), ("project", projects)):
        if not candidates:
            continue
        if len(candidates) > 1:
            logger.warning(f"Found {len(candidates)} {kind}s in {target_dir}, using {candidates[0]}")
        logger.debug(f"Using {kind} {candidates[0]}")
        return BuildDescriptor(kind=kind, name=candidates[0])

    raise NoDescriptorFound(target_dir)


def resolve_archive_path(target_dir: Path, archive_path: Path) -> Path:
    """Make the archive path absolute, relative paths being taken from the target directory."""
    archive_path = Path(archive_path).expanduser()
    if not archive_path.is_absolute():
        archive_path = Path(target_dir).resolve() / archive_path
    return archive_path.resolve()


def join_command_line(argv: List[str]) -> str:
    """Quote an argument list into a single shell-invocable string."""
    if os.name == "nt":
        return subprocess.list2cmdline(argv)
    return shlex.join(argv)


def build_command(request: RunRequest, config: WrapperConfig) -> BuildCommand:
    """
    Construct the build-tool invocation for ``request``.

    Args:
        request: The resolved run request
        config: Wrapper configuration (tool name, simulator platform)

    Returns:
        The BuildCommand to supervise

    Raises:
        NoDescriptorFound: If the target directory holds no workspace or project
    """
    working_dir = Path(request.target_dir).resolve()
    descriptor = find_build_descriptor(working_dir)

    argv = [
        config.build_tool,
        descriptor.selector, descriptor.name,
        "-scheme", request.scheme,
    ]
    if request.operation.uses_destination:
        argv += ["-destination", f"platform={config.simulator_platform},name={request.device}"]
    argv.append("-skipMacroValidation")

    archive_path = None
    if request.operation is Operation.ARCHIVE:
        archive_path = resolve_archive_path(working_dir, request.archive_path)
        argv += ["-archivePath", str(archive_path), Operation.ARCHIVE.value]
    else:
        argv.append(request.operation.value)

    return BuildCommand(
        argv=argv,
        command_line=join_command_line(argv),
        working_dir=working_dir,
        descriptor=descriptor,
        archive_path=archive_path,
    )
