"""The ``create`` workflow: scaffold a new Butano project."""

from __future__ import annotations

import os
from pathlib import Path

from loguru import logger
from rich.console import Console

from .butano import ensure_butano
from .config import DEFAULT_BUTANO_REPO, DEFAULT_TEMPLATE_TOKEN, CreateOptions, RunContext
from .deps import handle_dependencies
from .errors import TemplateNotFoundError
from .git import maybe_init_git
from .models import CreateResult, DependencyStatus, format_butano_status, format_dependency_status
from .paths import (
    absolute_path,
    bundled_example_template,
    default_butano_dir,
    ensure_empty_target,
    expand_home,
    has_unsafe_path_characters,
    normalize_relative_path,
    resolve_butano_common_dir,
    resolve_butano_lib_dir,
)
from .prompts import PromptSession, resolve_text
from .rendering import Progress, boxed, progress_line
from .rom import resolve_rom_metadata
from .template import (
    MakefileOptions,
    copy_template,
    overlay_template,
    remove_git_dir,
    rename_paths_with_token,
    replace_token_in_text_files,
    to_project_id,
    to_rom_code,
    to_rom_title,
    write_makefile,
)

DEFAULT_PROJECT_NAME = "my-gba-game"
UNSAFE_PATH_WARNING = (
    "Project path contains spaces or special characters.\n"
    "Butano recommends avoiding them."
)


def _absolute(path: str, context: RunContext) -> Path:
    return absolute_path(path, context.cwd, context.home)


def _overlay_bundled_example(target_dir: Path) -> bool:
    example = bundled_example_template()
    if not example.is_dir():
        return False
    overlay_template(example, target_dir)
    return True


def run_create(options: CreateOptions, context: RunContext, console: Console) -> CreateResult:
    """Create a project as described by ``options``.

    Any :class:`~init_gba.errors.InitGbaError` aborts the run. Failures after
    the template copy starts can leave a partially populated target.
    """

    non_interactive = options.non_interactive or options.yes or not context.interactive
    prompts = PromptSession(non_interactive=non_interactive)

    try:
        default_name = context.cwd.name or DEFAULT_PROJECT_NAME
        project_name = resolve_text(options.name, prompts, "Name", default_name)
        project_id = to_project_id(project_name)

        default_dir = str(context.cwd / project_name)
        target_dir = _absolute(
            resolve_text(options.dir, prompts, "Project directory", default_dir), context
        )

        if has_unsafe_path_characters(str(target_dir)):
            if context.stdout_is_terminal:
                boxed(console, UNSAFE_PATH_WARNING, "Path warning")
            else:
                console.print(f"[yellow]![/yellow] {' '.join(UNSAFE_PATH_WARNING.splitlines())}")

        ensure_empty_target(target_dir, options.force, prompts)
        progress_line(console, "Project", project_name, Progress.SUCCESS)

        default_butano = expand_home(default_butano_dir(context.env, context.home), context.home)
        butano_dir = _absolute(
            resolve_text(options.butano_path, prompts, "Butano path", default_butano), context
        )

        butano_status = ensure_butano(
            butano_dir,
            options.butano_repo or DEFAULT_BUTANO_REPO,
            options.skip_update,
            prompts,
            console,
        )
        progress_line(console, "Butano", format_butano_status(butano_status), Progress.SUCCESS)

        dependency_status = None
        if not options.skip_deps:
            dependency_status = handle_dependencies(prompts, console, context.env)
            progress_line(
                console,
                "devkitPro",
                format_dependency_status(dependency_status),
                Progress.SUCCESS if dependency_status == DependencyStatus.DETECTED else Progress.SKIP,
            )

        if options.template_path:
            template_path = _absolute(options.template_path, context)
        else:
            template_path = butano_dir / "template"
        if not template_path.exists():
            raise TemplateNotFoundError(template_path)
        token = options.template_token or DEFAULT_TEMPLATE_TOKEN

        target_dir.mkdir(parents=True, exist_ok=True)
        copy_template(template_path, target_dir)
        if _overlay_bundled_example(target_dir):
            logger.debug("Applied bundled example sources")
        remove_git_dir(target_dir)
        progress_line(console, "Template", "copied", Progress.SUCCESS)

        renamed = rename_paths_with_token(target_dir, token, project_name)
        changed_files = replace_token_in_text_files(target_dir, token, project_name)
        logger.info("Renamed {} paths and updated {} files", renamed, changed_files)

        result = CreateResult(
            target_dir=target_dir,
            project_name=project_name,
            project_id=project_id,
            butano_status=butano_status,
            dependency_status=dependency_status,
            renamed_paths=renamed,
            changed_files=changed_files,
        )

        if not options.skip_makefile:
            lib_dir = resolve_butano_lib_dir(butano_dir)
            common_dir = resolve_butano_common_dir(lib_dir)
            common_relative = (
                normalize_relative_path(os.path.relpath(common_dir, target_dir))
                if common_dir is not None
                else None
            )
            rom_metadata = resolve_rom_metadata(
                to_rom_code(project_id),
                to_rom_title(project_id),
                options.rom_code,
                options.rom_title,
                non_interactive,
                prompts,
            )
            result.makefile = write_makefile(
                MakefileOptions(
                    butano_dir=lib_dir,
                    project_id=project_id,
                    target_dir=target_dir,
                    common_dir=common_relative or None,
                    rom_metadata=rom_metadata,
                )
            )
            progress_line(console, "Makefile", "written", Progress.SUCCESS)

        if not options.skip_git:
            result.git_initialized = maybe_init_git(target_dir, prompts, console)
            progress_line(
                console,
                "Git",
                "initialized" if result.git_initialized else "skipped",
                Progress.SUCCESS if result.git_initialized else Progress.SKIP,
            )

        _print_summary(console, result)
        return result
    finally:
        prompts.close()


def _print_summary(console: Console, result: CreateResult) -> None:
    console.print("[green]✔[/green] Done!")
    console.print(
        f"Project created at: {result.target_dir}", markup=False, highlight=False, soft_wrap=True
    )
    if result.changed_files > 0:
        console.print(f"Updated files: {result.changed_files}")
    console.print("")
    boxed(
        console,
        f"Project: {result.target_dir}\n\nNext steps:\ncd {result.target_dir}\nmake",
        "Summary",
    )


__all__ = ["run_create", "UNSAFE_PATH_WARNING"]
