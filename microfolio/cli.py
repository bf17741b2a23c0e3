"""Command-line interface for microfolio.

This module defines the CLI commands using Click framework.
It scaffolds new projects and hands the remaining commands over to the
project's package manager.

Commands:
- new: Create a new portfolio from the upstream template.
- dev: Start the development server.
- build: Build the site for production.
- preview: Preview the built site locally.
- optimize-images: Optimize images in the content folder.
- clean-images: Remove generated images.
- help: Show the usage text.
"""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import click

from . import __version__
from .config import env_flag, load_config
from .delegate import run_script
from .errors import MicrofolioError
from .project import create_project, find_build_output, is_project

HELP_TEXT = """\
microfolio - Static portfolio generator for creatives

Usage:
  microfolio new <project-name>     Create a new portfolio
  microfolio dev                    Start development server
  microfolio build                  Build site for production
  microfolio preview                Preview built site locally
  microfolio optimize-images        Optimize images in content
  microfolio clean-images           Remove generated images
  microfolio help                   Show this help

Examples:
  microfolio new my-portfolio       # Creates new project in ./my-portfolio
  cd my-portfolio && microfolio dev # Starts development server
  microfolio build && microfolio preview # Build and preview production site
"""

NEW_PROJECT_HINT = "Use 'microfolio new <name>' to create a new project"

# Delegated commands pass unknown options straight to the package manager.
_PASSTHROUGH = {"ignore_unknown_options": True}


class MicrofolioGroup(click.Group):
    """Click group with a fixed usage text.

    Unknown commands and Click usage errors (missing option values, stray
    arguments) exit with status 1 instead of Click's 2.
    """

    def get_help(self, ctx: click.Context) -> str:
        # Keeps the trailing newline, so the text ends with a blank line.
        return HELP_TEXT

    def make_context(self, info_name, args, parent=None, **extra):
        with _usage_errors_exit_one():
            return super().make_context(info_name, args, parent=parent, **extra)

    def invoke(self, ctx: click.Context):
        with _usage_errors_exit_one():
            return super().invoke(ctx)

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[str | None, click.Command | None, list[str]]:
        cmd_name = args[0] or "help"
        cmd = self.get_command(ctx, cmd_name)
        if cmd is None:
            click.echo(f"Unknown command: {cmd_name}")
            click.echo()
            click.echo(ctx.get_help())
            ctx.exit(1)
        return cmd_name, cmd, args[1:]


@contextmanager
def _usage_errors_exit_one() -> Iterator[None]:
    try:
        yield
    except click.UsageError as exc:
        exc.exit_code = 1
        raise


@click.group(
    cls=MicrofolioGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"], "ignore_unknown_options": True},
)
@click.version_option(version=__version__, prog_name="microfolio")
@click.pass_context
def cli(ctx: click.Context):
    """microfolio - Static portfolio generator for creatives."""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("help", add_help_option=False, context_settings=_PASSTHROUGH)
@click.argument("topics", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def help_command(ctx: click.Context, topics: tuple[str, ...]):
    """Show this help."""
    click.echo(ctx.find_root().get_help())


@cli.command()
@click.argument("name", required=False)
@click.option("--template", metavar="URL", help="Template repository to clone instead of the default.")
@click.option("--no-install", is_flag=True, help="Skip installing dependencies.")
@click.option("--no-git", is_flag=True, help="Do not initialize a git repository.")
def new(name: str | None, template: str | None, no_install: bool, no_git: bool):
    """Create a new portfolio."""
    if not name:
        raise MicrofolioError(
            "Please specify a project name",
            hint="Usage: microfolio new <project-name>",
        )
    config = load_config(Path.cwd())
    create_project(
        Path(name),
        config,
        template=template,
        install=not (no_install or env_flag("MICROFOLIO_SKIP_INSTALL")),
        git_init=not (no_git or env_flag("MICROFOLIO_SKIP_GIT_INIT")),
    )
    click.echo(click.style(f"✅ Project '{name}' created successfully!", fg="green"))
    click.echo()
    click.echo("Next steps:")
    click.echo(f"  cd {name}")
    click.echo("  microfolio dev")
    click.echo()


@cli.command(context_settings=_PASSTHROUGH)
@click.argument("script_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def dev(ctx: click.Context, script_args: tuple[str, ...]):
    """Start development server."""
    root, config = _load_project()
    click.echo("🚀 Starting development server...")
    click.echo(f"Your site will be available at {config['dev_url']}")
    click.echo("Press Ctrl+C to stop the server")
    click.echo()
    _delegate(ctx, "dev", script_args, root, config)


@cli.command(context_settings=_PASSTHROUGH)
@click.argument("script_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def build(ctx: click.Context, script_args: tuple[str, ...]):
    """Build site for production."""
    root, config = _load_project()
    click.echo("🏗️  Building site...")
    _delegate(ctx, "build", script_args, root, config)


@cli.command(context_settings=_PASSTHROUGH)
@click.argument("script_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def preview(ctx: click.Context, script_args: tuple[str, ...]):
    """Preview built site locally."""
    root, config = _load_project()
    if find_build_output(root, config["output_dirs"]) is None:
        raise MicrofolioError(
            "No built site found. Run 'microfolio build' first.",
            hint="\nQuick start:\n  microfolio build\n  microfolio preview",
        )
    click.echo("👀 Starting preview server for built site...")
    click.echo(f"Your production site will be available at {config['preview_url']}")
    click.echo("Press Ctrl+C to stop the server")
    click.echo()
    _delegate(ctx, "preview", script_args, root, config)


@cli.command("optimize-images", context_settings=_PASSTHROUGH)
@click.argument("script_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def optimize_images(ctx: click.Context, script_args: tuple[str, ...]):
    """Optimize images in content."""
    root, config = _load_project()
    click.echo("🖼️  Optimizing images...")
    _delegate(ctx, "optimize-images", script_args, root, config)


@cli.command("clean-images", context_settings=_PASSTHROUGH)
@click.argument("script_args", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def clean_images(ctx: click.Context, script_args: tuple[str, ...]):
    """Remove generated images."""
    root, config = _load_project()
    click.echo("🧹 Cleaning generated images...")
    _delegate(ctx, "clean-images", script_args, root, config)


def _load_project() -> tuple[Path, dict[str, Any]]:
    """Return the current directory and its config, or fail if it is not a project."""
    root = Path.cwd()
    config = load_config(root)
    if not is_project(root, config["marker_file"]):
        raise MicrofolioError("No microfolio project detected in this folder", hint=NEW_PROJECT_HINT)
    return root, config


def _delegate(
    ctx: click.Context,
    script: str,
    script_args: Sequence[str],
    root: Path,
    config: dict[str, Any],
) -> None:
    """Run the package-manager script and exit with its status."""
    ctx.exit(run_script(script, list(script_args), root, config["package_manager"]))


def main():
    """Entry point for the CLI application."""
    cli()
