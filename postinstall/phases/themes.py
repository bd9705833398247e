# fedora-postinstall/postinstall/phases/themes.py

from urllib.parse import quote

from postinstall import console_output as con
from postinstall import system_utils as util
from postinstall.config import USER_FONTS_REL_PATH
from postinstall.logger_utils import app_logger


def _install_git_theme(ctx, theme: dict) -> None:
    clone_dir = ctx.scratch_dir / theme["name"]
    con.print_sub_step(f"Installing {theme['name']}...")
    ctx.run(["git", "clone", "--depth=1", theme["url"], str(clone_dir)])
    ctx.run(["./install.sh"] + list(theme.get("install_args", [])), cwd=clone_dir)


def _install_fonts(ctx, base_url: str, fonts) -> None:
    fonts_dir = ctx.home / USER_FONTS_REL_PATH
    fetched = 0
    for font in fonts:
        dest = fonts_dir / font
        if dest.exists():
            app_logger.info(f"Font '{font}' already present.")
            continue
        if not ctx.dry_run:
            fonts_dir.mkdir(parents=True, exist_ok=True)
        ctx.download(base_url + quote(font), dest)
        fetched += 1
    if fetched:
        ctx.run(["fc-cache", "-f", str(fonts_dir)])
    else:
        con.print_info("All fonts are already installed.")


def run(ctx) -> None:
    """GTK/icon/cursor themes from git, MesloLGS NF fonts and desktop preferences."""
    cfg = ctx.section("themes")

    for theme in cfg.get("git_themes", []):
        _install_git_theme(ctx, theme)

    fonts = cfg.get("fonts", [])
    if fonts:
        con.print_sub_step("Installing fonts...")
        _install_fonts(ctx, cfg.get("font_base_url", ""), fonts)

    settings = cfg.get("gsettings", [])
    if settings:
        con.print_sub_step("Applying desktop settings...")
    for schema, key, value in settings:
        util.set_gsetting(schema, key, value, dry_run=ctx.dry_run, print_fn_info=con.print_info)
