# fedora-postinstall/postinstall/phases/zsh.py
"""
Zsh as the login shell, oh-my-zsh, the powerlevel10k theme and the two
zsh-users plugins, plus the .zshrc edits that tie them together.

The .zshrc edits are pure text transforms so rerunning the phase leaves
an already-configured file untouched.
"""

import getpass
import pwd
import re
import shutil
from pathlib import Path
from typing import Dict

from postinstall import console_output as con
from postinstall import system_utils as util
from postinstall.logger_utils import app_logger

MANAGED_BLOCK_START = "# >>> fedora-postinstall >>>"
MANAGED_BLOCK_END = "# <<< fedora-postinstall <<<"

DEFAULT_P10K_CONFIG = """\
# Generated by fedora-postinstall. Run `p10k configure` to customise.
'builtin' 'local' '-a' 'p10k_config_opts'
[[ ! -o 'aliases'         ]] || p10k_config_opts+=('aliases')
[[ ! -o 'sh_glob'         ]] || p10k_config_opts+=('sh_glob')
[[ ! -o 'no_brace_expand' ]] || p10k_config_opts+=('no_brace_expand')
'builtin' 'setopt' 'no_aliases' 'no_sh_glob' 'brace_expand'

() {
  emulate -L zsh -o extended_glob
  unset -m '(POWERLEVEL9K_*|DEFAULT_USER)~POWERLEVEL9K_GITSTATUS_DIR'
  typeset -g POWERLEVEL9K_LEFT_PROMPT_ELEMENTS=(dir vcs prompt_char)
  typeset -g POWERLEVEL9K_RIGHT_PROMPT_ELEMENTS=(status command_execution_time background_jobs time)
  typeset -g POWERLEVEL9K_MODE=nerdfont-complete
  typeset -g POWERLEVEL9K_PROMPT_ADD_NEWLINE=true
  typeset -g POWERLEVEL9K_INSTANT_PROMPT=verbose
}

(( ${#p10k_config_opts} )) && setopt ${p10k_config_opts[@]}
'builtin' 'unset' 'p10k_config_opts'
"""

_THEME_LINE = re.compile(r"^ZSH_THEME=.*$", re.MULTILINE)


def set_zsh_theme(text: str, theme: str) -> str:
    """Points ZSH_THEME at `theme`, adding the assignment if the file has none."""
    line = f'ZSH_THEME="{theme}"'
    if _THEME_LINE.search(text):
        return _THEME_LINE.sub(line, text, count=1)
    return f"{line}\n{text}"


def render_managed_block(plugin_names) -> str:
    lines = [MANAGED_BLOCK_START, 'export PATH="$HOME/.local/bin:$PATH"']
    for name in plugin_names:
        lines.append(f'source "${{ZSH_CUSTOM:-$HOME/.oh-my-zsh/custom}}/plugins/{name}/{name}.zsh"')
    lines.append("[[ ! -f ~/.p10k.zsh ]] || source ~/.p10k.zsh")
    lines.append(MANAGED_BLOCK_END)
    return "\n".join(lines)


def apply_managed_block(text: str, block: str) -> str:
    """Replaces the marked block in `text`, or appends it when absent."""
    start = text.find(MANAGED_BLOCK_START)
    end = text.find(MANAGED_BLOCK_END, start + 1) if start != -1 else -1
    if start != -1 and end != -1:
        return text[:start] + block + text[end + len(MANAGED_BLOCK_END):]
    if text and not text.endswith("\n"):
        text += "\n"
    return f"{text}\n{block}\n" if text else f"{block}\n"


def _set_login_shell(ctx) -> None:
    zsh_path = shutil.which("zsh") or "/usr/bin/zsh"
    user = getpass.getuser()
    try:
        current_shell = pwd.getpwnam(user).pw_shell
    except KeyError:
        current_shell = ""
    if current_shell == zsh_path:
        con.print_info(f"Login shell for '{user}' is already {zsh_path}.")
        return
    con.print_sub_step(f"Setting {zsh_path} as the login shell for '{user}'...")
    ctx.run(["sudo", "usermod", "-s", zsh_path, user])


def _install_oh_my_zsh(ctx, installer_url: str) -> Path:
    omz_dir = ctx.home / ".oh-my-zsh"
    if omz_dir.is_dir():
        con.print_info("oh-my-zsh is already installed.")
        return omz_dir
    con.print_sub_step("Installing oh-my-zsh...")
    script = ctx.download(installer_url, ctx.scratch_dir / "ohmyzsh-install.sh")
    ctx.run(["sh", str(script), "--unattended"], env_vars={"RUNZSH": "no", "CHSH": "no"})
    return omz_dir


def _clone_once(ctx, url: str, dest: Path) -> None:
    if dest.exists():
        app_logger.info(f"{dest} already exists, not cloning {url}.")
        return
    ctx.run(["git", "clone", "--depth=1", url, str(dest)])


def _update_zshrc(ctx, theme: str, plugin_names) -> None:
    zshrc = ctx.home / ".zshrc"
    original = zshrc.read_text(encoding="utf-8") if zshrc.is_file() else ""
    updated = apply_managed_block(set_zsh_theme(original, theme), render_managed_block(plugin_names))
    if updated == original:
        con.print_info(".zshrc is already up to date.")
        return
    con.print_sub_step("Updating ~/.zshrc...")
    ctx.write_file(zshrc, updated)


def run(ctx) -> None:
    cfg = ctx.section("zsh")
    plugin_repos: Dict[str, str] = cfg.get("plugin_repos", {})

    con.print_sub_step("Installing zsh...")
    util.install_dnf_packages(cfg.get("dnf_packages", []), dry_run=ctx.dry_run, print_fn_info=con.print_info)
    _set_login_shell(ctx)

    omz_dir = _install_oh_my_zsh(ctx, cfg["oh_my_zsh_installer"])
    custom_dir = omz_dir / "custom"

    theme_repo = cfg.get("theme_repo")
    if theme_repo:
        con.print_sub_step(f"Installing the {theme_repo['name']} theme...")
        _clone_once(ctx, theme_repo["url"], custom_dir / "themes" / theme_repo["name"])

    for name, url in plugin_repos.items():
        _clone_once(ctx, url, custom_dir / "plugins" / name)

    _update_zshrc(ctx, cfg.get("zsh_theme", "robbyrussell"), plugin_repos.keys())

    p10k = ctx.home / ".p10k.zsh"
    if not p10k.exists():
        ctx.write_file(p10k, DEFAULT_P10K_CONFIG)

    con.print_success("Zsh is configured. Open a new terminal to use it.")
