"""
Thin async wrapper around the esbuild command line.
"""

from __future__ import annotations

import asyncio
import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from ..config import BuildConfig, get_settings
from ..errors import BundleError

logger = logging.getLogger(__name__)

DEFAULT_ESBUILD = "esbuild"
PRODUCTION_DEFINES: Dict[str, str] = {"process.env.NODE_ENV": '"production"'}
SCRIPT_LOADERS: Dict[str, str] = {".jsx": "jsx", ".js": "jsx"}
STYLE_LOADERS: Dict[str, str] = {".css": "css"}


@dataclass(frozen=True)
class BundleRequest:
    """
    One esbuild invocation.

    ``kind`` selects the option set: "script" bundles JSX as ESM for the
    configured target with the production define, "style" bundles CSS.
    """
    entry: Path
    kind: str
    target: Sequence[str] = ("es2020",)
    loaders: Dict[str, str] = field(default_factory=dict)
    defines: Dict[str, str] = field(default_factory=dict)

    def arguments(self) -> List[str]:
        args = [str(self.entry), "--bundle", "--minify", "--log-level=warning"]
        if self.kind == "script":
            args.extend(
                [
                    "--format=esm",
                    f"--target={','.join(self.target)}",
                    "--jsx=automatic",
                    "--jsx-import-source=react",
                ]
            )
        elif self.kind != "style":
            raise ValueError(f"Unknown bundle kind: {self.kind!r}")
        for ext, loader in sorted(self.loaders.items()):
            args.append(f"--loader:{ext}={loader}")
        for name, value in sorted(self.defines.items()):
            args.append(f"--define:{name}={value}")
        return args


@dataclass(frozen=True)
class BundleOutput:
    script: bytes
    stylesheet: bytes


def resolve_esbuild(config: BuildConfig) -> str:
    """
    Pick the esbuild executable: environment override, then config, then a
    project-local node_modules binary, then PATH.
    """
    override = get_settings().esbuild_binary or config.esbuild
    if override:
        return override
    local = config.root / "node_modules" / ".bin" / DEFAULT_ESBUILD
    if local.exists():
        return str(local)
    found = shutil.which(DEFAULT_ESBUILD)
    if found is None:
        raise BundleError(
            "esbuild executable not found; install it (npm install esbuild) or set TAROTBUILD_ESBUILD."
        )
    return found


async def bundle_entry(request: BundleRequest, *, executable: str, cwd: Optional[Path] = None) -> bytes:
    """
    Run esbuild for one entry point and return the bundled bytes from stdout.

    Raises:
        BundleError: If the process cannot start, exits non-zero, or writes nothing.
    """
    if not request.entry.exists():
        raise BundleError(f"Entry point not found: {request.entry}")

    args = request.arguments()
    logger.debug("Running %s %s", executable, " ".join(args))
    try:
        process = await asyncio.create_subprocess_exec(
            executable,
            *args,
            cwd=str(cwd) if cwd else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as exc:
        raise BundleError(f"Unable to start {executable}: {exc}") from exc

    stdout, stderr = await process.communicate()
    message = stderr.decode("utf-8", errors="replace").strip()
    if process.returncode != 0:
        raise BundleError(f"esbuild failed for {request.entry} (exit {process.returncode}): {message}")
    if message:
        logger.warning("esbuild: %s", message)
    if not stdout:
        raise BundleError(f"esbuild produced no output for {request.entry}")
    return stdout


async def bundle_assets(config: BuildConfig) -> BundleOutput:
    """
    Bundle the script entry, then the stylesheet entry.
    """
    executable = resolve_esbuild(config)
    script_request = BundleRequest(
        entry=config.resolve(config.entry_script),
        kind="script",
        target=tuple(config.target),
        loaders=dict(SCRIPT_LOADERS),
        defines=dict(PRODUCTION_DEFINES),
    )
    style_request = BundleRequest(
        entry=config.resolve(config.entry_stylesheet),
        kind="style",
        loaders=dict(STYLE_LOADERS),
    )
    logger.info("Bundling %s", script_request.entry)
    script = await bundle_entry(script_request, executable=executable, cwd=config.root)
    logger.info("Bundling %s", style_request.entry)
    stylesheet = await bundle_entry(style_request, executable=executable, cwd=config.root)
    return BundleOutput(script=script, stylesheet=stylesheet)
