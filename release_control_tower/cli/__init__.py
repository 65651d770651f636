"""
Command Line Interface for Release Control Tower.
"""

import asyncio
from typing import Optional

import typer
import uvicorn
from rich import print as rprint
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from ..config import get_settings
from ..releases.enums import PLATFORMS
from ..tools.client import ReleaseAPIClient, ReleaseAPIError
from ..tools.integrity import SUPPORTED_ALGORITHMS, ArtifactError, hash_file, hash_url

app = typer.Typer(help="Release Control Tower - client update distribution and rollout control")
rollout_app = typer.Typer(help="Create releases and move them through their lifecycle")
app.add_typer(rollout_app, name="rollout")

console = Console()

STATUS_EMOJI = {
    "draft": "📝",
    "published": "🟢",
    "deprecated": "⏹️",
}


def _make_client(server: Optional[str] = None) -> ReleaseAPIClient:
    settings = get_settings()
    return ReleaseAPIClient(
        server or settings.release_api_url,
        api_token=settings.release_api_token,
        timeout=settings.release_api_timeout,
    )


def _run(coro):
    """Run a coroutine, turning tool errors into exit status 1."""
    try:
        return asyncio.run(coro)
    except (ReleaseAPIError, ArtifactError) as e:
        console.print(f"❌ Error: {e}", style="red")
        raise typer.Exit(code=1)


def _normalize_platform(platform: str) -> str:
    platform = platform.strip().lower()
    if platform not in PLATFORMS:
        console.print(f"❌ Platform must be one of: {', '.join(PLATFORMS)}", style="red")
        raise typer.Exit(code=1)
    return platform


def _format_size(size: int) -> str:
    return f"{size / 1024 / 1024:.2f} MB"


def _release_table(title: str, releases) -> Table:
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("ID", style="yellow")
    table.add_column("Platform", style="magenta")
    table.add_column("Version", style="green")
    table.add_column("Status")
    table.add_column("Force")
    table.add_column("Size", justify="right")
    table.add_column("Created")

    for release in releases:
        status = release["status"]
        table.add_row(
            str(release["id"]),
            release["platform"],
            release["version"],
            f"{STATUS_EMOJI.get(status, '❓')} {status.title()}",
            "yes" if release["is_force_update"] else "",
            _format_size(release["file_size"]) if release["file_size"] else "",
            release["created_at"],
        )
    return table


# =============================================================================
# Server
# =============================================================================


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, help="Host to bind the server to"),
    port: Optional[int] = typer.Option(None, help="Port to run the API server on"),
    reload: bool = typer.Option(False, help="Reload on code changes (development)"),
):
    """Start the release API server."""
    settings = get_settings()
    host = host or settings.api_host
    port = port or settings.api_port
    rprint(Panel.fit(f"🚀 Starting Release Control Tower on http://{host}:{port}", style="bold blue"))
    uvicorn.run(
        "release_control_tower.main:app",
        host=host,
        port=port,
        reload=reload,
        workers=1 if reload else settings.api_workers,
    )


@app.command()
def version():
    """Show version information."""
    from .. import __version__

    rprint(Panel.fit(f"Release Control Tower v{__version__}", style="bold green"))


# =============================================================================
# Rollout
# =============================================================================


@rollout_app.command("create")
def rollout_create(
    platform: str = typer.Option(..., help=f"Platform: {', '.join(PLATFORMS)}"),
    release_version: str = typer.Option(..., "--version", help="Version, e.g. 1.0.1"),
    code: Optional[str] = typer.Option(None, help="Version code shown to operators (defaults to the version)"),
    url: str = typer.Option(..., help="Download URL of the artifact"),
    notes: str = typer.Option("", help="Release notes"),
    size: int = typer.Option(0, help="File size in bytes"),
    md5: str = typer.Option("", help="MD5 of the artifact"),
    force: bool = typer.Option(False, help="Force clients to update"),
    publish: bool = typer.Option(False, help="Publish right after creating"),
    server: Optional[str] = typer.Option(None, help="API server URL"),
):
    """Create a release from a download URL and optionally publish it."""
    platform = _normalize_platform(platform)
    code = code or release_version

    rprint(Panel.fit("📦 Release rollout", style="bold blue"))
    console.print(f"Platform: {platform.upper()}")
    console.print(f"Version: {release_version} (code: {code})")
    console.print(f"Download URL: {url}")
    if notes:
        console.print(f"Notes: {notes}")
    if size > 0:
        console.print(f"Size: {_format_size(size)}")
    if md5:
        console.print(f"MD5: {md5}")
    if force:
        console.print("⚠️  Force update: yes", style="yellow")

    async def rollout() -> int:
        async with _make_client(server) as api:
            console.print("\n📝 [1/2] Creating release record...")
            release_id = await api.create_release(
                platform=platform,
                version=release_version,
                package_url=url,
                release_notes=notes,
                is_force_update=force,
                file_size=size,
                file_hash=md5,
            )
            console.print(f"✅ Release created (ID: {release_id})")

            if publish:
                console.print("\n🚀 [2/2] Publishing release...")
                await api.publish_release(release_id)
                console.print("✅ Release published")
            else:
                console.print("\n⏭️  [2/2] Skipping publish (use --publish to publish immediately)")
            return release_id

    release_id = _run(rollout())

    table = Table(title="Release summary", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("ID", str(release_id))
    table.add_row("Platform", platform.upper())
    table.add_row("Version", f"{release_version} (code: {code})")
    table.add_row("Download URL", url)
    table.add_row("Status", "published" if publish else "draft")
    console.print(table)
    if not publish:
        console.print("💡 The release is a draft; publish it with `rollout publish ID`.")


@rollout_app.command("publish")
def rollout_publish(
    release_id: int = typer.Argument(..., help="Release ID"),
    server: Optional[str] = typer.Option(None, help="API server URL"),
):
    """Publish a release (any status may be published again)."""

    async def go():
        async with _make_client(server) as api:
            await api.publish_release(release_id)

    _run(go())
    console.print(f"✅ Release {release_id} published")


@rollout_app.command("deprecate")
def rollout_deprecate(
    release_id: int = typer.Argument(..., help="Release ID"),
    server: Optional[str] = typer.Option(None, help="API server URL"),
):
    """Deprecate a release so clients no longer see it."""

    async def go():
        async with _make_client(server) as api:
            await api.deprecate_release(release_id)

    _run(go())
    console.print(f"✅ Release {release_id} deprecated")


@rollout_app.command("delete")
def rollout_delete(
    release_id: int = typer.Argument(..., help="Release ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    server: Optional[str] = typer.Option(None, help="API server URL"),
):
    """Permanently delete a release."""
    if not yes and not typer.confirm(f"Delete release {release_id}? This cannot be undone"):
        console.print("Aborted")
        raise typer.Exit(code=1)

    async def go():
        async with _make_client(server) as api:
            await api.delete_release(release_id)

    _run(go())
    console.print(f"✅ Release {release_id} deleted")


@rollout_app.command("list")
def rollout_list(
    platform: Optional[str] = typer.Option(None, help="Filter by platform"),
    page: int = typer.Option(1, help="Page number"),
    page_size: int = typer.Option(20, help="Releases per page"),
    server: Optional[str] = typer.Option(None, help="API server URL"),
):
    """List releases of every status, newest first."""
    if platform:
        platform = _normalize_platform(platform)

    async def go():
        async with _make_client(server) as api:
            return await api.list_releases(platform=platform, page=page, page_size=page_size)

    result = _run(go())
    if not result["versions"]:
        console.print("No releases found")
        return

    console.print(_release_table("Releases", result["versions"]))
    console.print(f"Page {result['page']} · {len(result['versions'])} of {result['total']} releases")


@rollout_app.command("latest")
def rollout_latest(
    platform: Optional[str] = typer.Option(None, help="Platform (all platforms when omitted)"),
    server: Optional[str] = typer.Option(None, help="API server URL"),
):
    """Show the latest published release per platform."""
    if platform:
        platform = _normalize_platform(platform)

    async def go():
        async with _make_client(server) as api:
            if platform:
                release = await api.latest_release(platform)
                return {platform: release} if release else {}
            return await api.latest_releases()

    latest = _run(go())
    if not latest:
        console.print("No published releases")
        return

    console.print(_release_table("Latest published releases", latest.values()))
    missing = [p for p in ([platform] if platform else PLATFORMS) if p not in latest]
    if missing:
        console.print(f"No published release for: {', '.join(missing)}")


@rollout_app.command("check")
def rollout_check(
    platform: str = typer.Option(..., help="Client platform"),
    current_version: str = typer.Option(..., help="Version the client runs"),
    server: Optional[str] = typer.Option(None, help="API server URL"),
):
    """Run the client update check for a platform and version."""
    platform = _normalize_platform(platform)

    async def go():
        async with _make_client(server) as api:
            return await api.check_update(platform, current_version)

    result = _run(go())
    if not result["has_update"]:
        console.print(f"✅ {current_version} is up to date on {platform}")
        return

    info = result["update_info"]
    style = "bold red" if info["force_update"] else "bold yellow"
    lines = [
        f"Version: {info['version']}",
        f"Download URL: {info['download_url'] or '(none)'}",
        f"Released: {info['release_date']}",
        f"Force update: {'yes' if info['force_update'] else 'no'}",
    ]
    if info["md5"]:
        lines.append(f"MD5: {info['md5']}")
    rprint(Panel("\n".join(lines), title="⬆️  Update available", style=style))


# =============================================================================
# Integrity
# =============================================================================


@app.command()
def integrity(
    file: Optional[str] = typer.Option(None, help="Local artifact path"),
    url: Optional[str] = typer.Option(None, help="Remote artifact URL"),
    algorithm: str = typer.Option("md5", help=f"Hash algorithm: {', '.join(SUPPORTED_ALGORITHMS)}"),
    update: bool = typer.Option(False, help="Store hash and size on the release"),
    release_id: Optional[int] = typer.Option(None, "--id", help="Release ID (required with --update)"),
    server: Optional[str] = typer.Option(None, help="API server URL"),
):
    """Compute an artifact's hash and size, optionally recording them on a release."""
    if bool(file) == bool(url):
        console.print("❌ Give exactly one of --file or --url", style="red")
        raise typer.Exit(code=1)
    if update and not release_id:
        console.print("❌ --update requires --id", style="red")
        raise typer.Exit(code=1)
    if update and algorithm != "md5":
        # Clients verify downloads against the stored hash as MD5.
        console.print("❌ --update stores an MD5 digest; use --algorithm md5", style="red")
        raise typer.Exit(code=1)

    rprint(Panel.fit("🔐 Artifact integrity", style="bold blue"))

    async def go():
        if file:
            console.print(f"📁 Local file: {file}")
            digest = hash_file(file, algorithm)
        else:
            console.print(f"🌐 Remote file: {url}")
            digest = await hash_url(url, algorithm)

        if update:
            async with _make_client(server) as api:
                await api.update_release(
                    release_id, file_hash=digest.hexdigest, file_size=digest.size
                )
        return digest

    digest = _run(go())

    console.print(f"📦 Size: {digest.size_mb:.2f} MB ({digest.size} bytes)")
    console.print(f"{digest.algorithm.upper()}: {digest.hexdigest}")
    if update:
        console.print(f"✅ Release {release_id} updated")
    else:
        console.print("💡 Use --update --id <release id> to store these values on a release")
    if digest.algorithm == "md5":
        console.print("Flags for `rollout create`:")
        console.print(f"  --size {digest.size} --md5 {digest.hexdigest}")


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
