"""Launch the Play Mode CLI from a source checkout.

Usage:
    python run_cli.py play sample_classes/core_blast.yaml
"""

import typer

import cli.cli

if __name__ == "__main__":
    playmode_app: typer.Typer = cli.cli.app
    playmode_app()
