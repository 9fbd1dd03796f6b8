"""Click base classes whose commands carry sample invocations.

``--help`` stays short; the samples are printed only on ``--examples``,
one shell line each, and the help epilog points at the flag.
"""

from __future__ import annotations

from typing import Any

import click


class ExamplesMixin:
    """Add an eager ``--examples`` flag to a Click command or group.

    Example text is given as one invocation per line; indentation and blank
    lines are ignored.
    """

    examples: tuple[str, ...] = ()
    params: list[click.Parameter]

    def _attach_examples(self, examples: str | None) -> None:
        lines = (examples or "").splitlines()
        self.examples = tuple(line.strip() for line in lines if line.strip())
        if self.examples:
            self.params.append(
                click.Option(
                    ["--examples"],
                    is_flag=True,
                    expose_value=False,
                    is_eager=True,
                    callback=self._show_examples,
                    help="Show usage examples.",
                )
            )

    def _show_examples(self, ctx: click.Context, _param: click.Parameter, value: bool) -> None:
        if not value or ctx.resilient_parsing:
            return
        click.echo(f"Examples for '{ctx.command_path}':\n")
        for line in self.examples:
            click.echo(f"  $ {line}")
        ctx.exit(0)

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        super().format_epilog(ctx, formatter)  # type: ignore[misc]
        if self.examples:
            formatter.write_paragraph()
            formatter.write_text(f"See '{ctx.command_path} --examples' for sample invocations.")


class DeployCommand(ExamplesMixin, click.Command):
    """A command that accepts ``examples=``."""

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)


class DeployGroup(ExamplesMixin, click.Group):
    """A group that accepts ``examples=``; its subcommands are DeployCommands."""

    command_class = DeployCommand

    def __init__(self, *args: Any, examples: str | None = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._attach_examples(examples)
