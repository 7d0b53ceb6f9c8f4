"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdsite.cli.commands import build_cmd, search_cmd, serve_cmd, show_cmd, tree_cmd


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Markdown documentation site builder")

app.command(name="build")(build_cmd)
app.command(name="tree")(tree_cmd)
app.command(name="search")(search_cmd)
app.command(name="show")(show_cmd)
app.command(name="serve")(serve_cmd)
