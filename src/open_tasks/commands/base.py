"""Shared helpers for command implementations."""

from pathlib import Path
from typing import List, Optional, Union

from ..errors import ReferenceNotFoundError
from ..integrations import ProcessRunner
from ..workflow import IFlow, IRefDecorator, StringRef, TokenDecorator


async def require_content(
    context: IFlow, ref: StringRef, kind: str = "Reference"
) -> str:
    """Fetch a reference's content, turning a soft miss into an error."""
    content = await context.get(ref)
    if content is None:
        raise ReferenceNotFoundError(ref.label, kind=kind)
    return content


async def resolve_text(
    context: IFlow, source: Union[str, StringRef], kind: str = "Reference"
) -> str:
    """Literal strings pass through; references are looked up."""
    if isinstance(source, StringRef):
        return await require_content(context, source, kind=kind)
    return source


def token_decorators(token: Optional[str]) -> List[IRefDecorator]:
    return [TokenDecorator(token)] if token else []


def resolve_path(file_name: Union[str, Path], cwd: Path) -> Path:
    """Resolve ``file_name`` relative to the flow's working directory."""
    path = Path(file_name).expanduser()
    return path if path.is_absolute() else Path(cwd) / path


def select_runner(runner: Optional[ProcessRunner], dry_run: bool) -> ProcessRunner:
    """The injected runner, unless a dry run asks for one that would execute."""
    if dry_run and (runner is None or not runner.dry_run):
        return ProcessRunner(dry_run=True)
    return runner or ProcessRunner()
