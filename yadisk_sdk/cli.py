"""
Command-line interface for Yandex.Disk SDK.

This module provides a small CLI tool to inspect a Yandex.Disk account
from the command line.
"""

import sys
import json
import logging
from typing import Optional, Dict, Any

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .client import YandexDiskClient
from .config import ClientConfig
from .exceptions import APIError, YandexDiskError
from .models import ResourcesOptions
from .utils import format_file_size


# Initialize Rich console
console = Console()


class CLIContext:
    """CLI context object to share state between commands."""

    def __init__(self, token: Optional[str] = None, base_url: Optional[str] = None):
        self.token = token
        self.base_url = base_url
        self.client: Optional[YandexDiskClient] = None

    def get_client(self) -> YandexDiskClient:
        """Get authenticated client."""
        if self.client is None:
            kwargs: Dict[str, Any] = {}
            if self.base_url:
                kwargs["base_url"] = self.base_url
            config = ClientConfig.from_env(access_token=self.token, **kwargs)
            self.client = YandexDiskClient.from_config(config)

        return self.client


def fail(message: str):
    console.print(f"[red]❌ {escape(message)}[/red]")
    sys.exit(1)


@click.group()
@click.option('--token', help='OAuth access token (defaults to YANDEX_DISK_TOKEN env var)')
@click.option('--base-url', help='Yandex.Disk API base URL')
@click.option('--debug', is_flag=True, help='Enable debug logging')
@click.pass_context
def cli(ctx, token, base_url, debug):
    """Yandex.Disk CLI - inspect your Disk from the terminal."""
    ctx.obj = CLIContext(token=token, base_url=base_url)

    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(asctime)s %(name)s %(levelname)s %(message)s")
        console.print("[dim]Debug mode enabled[/dim]")


@cli.command()
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@click.pass_obj
def disk(obj: CLIContext, output_json):
    """Show quota usage and system folders."""
    try:
        disk_info = obj.get_client().get_disk()
    except (YandexDiskError, OSError) as e:
        fail(f"Failed to get disk info: {e}")

    if output_json:
        click.echo(json.dumps(disk_info.to_dict(), indent=2, ensure_ascii=False))
        return

    table = Table(title="Yandex.Disk")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Total space", format_file_size(disk_info.total_space))
    table.add_row("Used space", f"{format_file_size(disk_info.used_space)} ({disk_info.usage_percentage:.1f}%)")
    table.add_row("Free space", format_file_size(disk_info.free_space))
    table.add_row("Trash size", format_file_size(disk_info.trash_size))
    table.add_row("Applications folder", disk_info.system_folders.applications)
    table.add_row("Downloads folder", disk_info.system_folders.downloads)

    console.print(table)


@cli.command()
@click.argument('path', default='/')
@click.option('--limit', '-l', type=int, help='Maximum number of folder items to list')
@click.option('--offset', '-o', type=int, help='Number of folder items to skip')
@click.option('--sort', '-s', help='Sort key (name, path, created, modified, size; prefix "-" to reverse)')
@click.option('--json', 'output_json', is_flag=True, help='Output as JSON')
@click.pass_obj
def info(obj: CLIContext, path, limit, offset, sort, output_json):
    """Show metainformation about a file or folder."""
    options = ResourcesOptions(sort=sort, limit=limit, offset=offset)

    try:
        resource = obj.get_client().get_resource(path, options)
    except APIError as e:
        fail(str(e))
    except (YandexDiskError, OSError) as e:
        fail(f"Failed to get resource info: {e}")

    if output_json:
        click.echo(json.dumps(resource.to_dict(), indent=2, ensure_ascii=False))
        return

    table = Table(title=resource.path or path)
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Name", resource.name)
    table.add_row("Type", resource.type)
    if resource.is_file:
        table.add_row("Size", format_file_size(resource.size))
        table.add_row("MIME type", resource.mime_type or "")
        table.add_row("MD5", resource.md5 or "")
    if resource.created:
        table.add_row("Created", resource.created.isoformat())
    if resource.modified:
        table.add_row("Modified", resource.modified.isoformat())
    if resource.public_url:
        table.add_row("Public URL", resource.public_url)

    console.print(table)

    if resource.embedded is not None:
        listing = Table(title=f"Items {resource.embedded.offset + 1}-"
                              f"{resource.embedded.offset + len(resource.embedded.items)}"
                              f" of {resource.embedded.total}")
        listing.add_column("Name", style="cyan")
        listing.add_column("Type")
        listing.add_column("Size", justify="right")
        listing.add_column("Modified")

        for item in resource.embedded.items:
            listing.add_row(
                item.name,
                item.type,
                format_file_size(item.size) if item.is_file else "",
                item.modified.strftime("%Y-%m-%d %H:%M") if item.modified else "",
            )

        console.print(listing)


def main():
    cli()


if __name__ == '__main__':
    main()
