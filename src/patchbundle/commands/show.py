# -----------------------------------------------------------------------------
# /*
#  * Copyright (C) 2025 CodeStory
#  *
#  * This program is free software; you can redistribute it and/or modify
#  * it under the terms of the GNU General Public License as published by
#  * the Free Software Foundation; Version 2.
#  *
#  * This program is distributed in the hope that it will be useful,
#  * but WITHOUT ANY WARRANTY; without even the implied warranty of
#  * MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#  * GNU General Public License for more details.
#  *
#  * You should have received a copy of the GNU General Public License
#  * along with this program; if not, you can contact us at support@codestory.build
#  */
# -----------------------------------------------------------------------------

import typer
from rich.console import Console
from rich.table import Table

from patchbundle.commands.loading import load_bundle
from patchbundle.context import GlobalContext
from patchbundle.core.exceptions import handle_patchbundle_exception


@handle_patchbundle_exception
def main(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Archive bundle (or diff file) to list."),
    arcbundle: bool | None = typer.Option(
        None,
        "--arcbundle/--diff",
        help="Treat SOURCE as an archive bundle or as diff text. Guessed from the file name by default.",
    ),
) -> None:
    """List the changes in SOURCE."""
    global_context: GlobalContext = ctx.obj
    bundle = load_bundle(global_context, source, arcbundle)

    table = Table(title=str(source))
    table.add_column("Type")
    table.add_column("File type")
    table.add_column("Old path")
    table.add_column("Current path")
    table.add_column("Hunks", justify="right")
    table.add_column("+/-", justify="right")

    for change in bundle.changes:
        added = sum(hunk.add_lines for hunk in change.hunks)
        removed = sum(hunk.del_lines for hunk in change.hunks)
        table.add_row(
            change.change_type.name,
            change.file_type.name,
            change.old_path or "-",
            change.current_path or "-",
            str(len(change.hunks)),
            f"+{added}/-{removed}",
        )

    Console().print(table)
