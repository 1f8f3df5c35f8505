from hamalert_cli.ui.cli import run

run()
