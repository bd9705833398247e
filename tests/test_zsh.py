# tests/test_zsh.py
import pytest

from postinstall.phases import zsh

BLOCK = zsh.render_managed_block(["zsh-autosuggestions"])


def test_set_theme_replaces_existing_line():
    text = 'export ZSH="$HOME/.oh-my-zsh"\nZSH_THEME="robbyrussell"\nplugins=(git)\n'
    result = zsh.set_zsh_theme(text, "powerlevel10k/powerlevel10k")
    assert 'ZSH_THEME="powerlevel10k/powerlevel10k"' in result
    assert "robbyrussell" not in result
    assert result.count("ZSH_THEME=") == 1


def test_set_theme_adds_missing_line():
    result = zsh.set_zsh_theme("plugins=(git)\n", "agnoster")
    assert result.startswith('ZSH_THEME="agnoster"\n')


def test_managed_block_is_appended_once():
    once = zsh.apply_managed_block("plugins=(git)", BLOCK)
    twice = zsh.apply_managed_block(once, BLOCK)
    assert once == twice
    assert once.startswith("plugins=(git)\n")
    assert once.count(zsh.MANAGED_BLOCK_START) == 1


def test_managed_block_is_replaced_in_place():
    old = f"a\n{zsh.MANAGED_BLOCK_START}\nold stuff\n{zsh.MANAGED_BLOCK_END}\nb\n"
    result = zsh.apply_managed_block(old, BLOCK)
    assert "old stuff" not in result
    assert result.startswith("a\n")
    assert result.endswith("\nb\n")


def test_block_sources_plugins_and_p10k():
    block = zsh.render_managed_block(["zsh-syntax-highlighting"])
    assert "plugins/zsh-syntax-highlighting/zsh-syntax-highlighting.zsh" in block
    assert "source ~/.p10k.zsh" in block


@pytest.fixture
def zsh_packages():
    return {
        "zsh": {
            "dnf_packages": ["zsh"],
            "oh_my_zsh_installer": "https://example.org/install.sh",
            "theme_repo": {"name": "powerlevel10k", "url": "https://example.org/p10k.git"},
            "plugin_repos": {"zsh-autosuggestions": "https://example.org/autosuggestions.git"},
            "zsh_theme": "powerlevel10k/powerlevel10k",
        }
    }


def test_rerun_skips_installed_parts(mocker, make_ctx, recorded_commands, zsh_packages):
    mocker.patch("postinstall.phases.zsh.shutil.which", return_value="/usr/bin/zsh")
    mocker.patch("postinstall.phases.zsh.getpass.getuser", return_value="tester")
    mocker.patch("postinstall.phases.zsh.pwd.getpwnam", return_value=mocker.Mock(pw_shell="/usr/bin/zsh"))
    ctx = make_ctx(packages=zsh_packages, session=mocker.Mock())
    custom = ctx.home / ".oh-my-zsh" / "custom"
    (custom / "themes" / "powerlevel10k").mkdir(parents=True)
    (custom / "plugins" / "zsh-autosuggestions").mkdir(parents=True)
    (ctx.home / ".p10k.zsh").write_text("# mine\n")
    zshrc = ctx.home / ".zshrc"
    zshrc.write_text(zsh.apply_managed_block(
        zsh.set_zsh_theme("", "powerlevel10k/powerlevel10k"),
        zsh.render_managed_block(["zsh-autosuggestions"]),
    ))
    before = zshrc.read_text()

    zsh.run(ctx)

    commands = [cmd for cmd, _ in recorded_commands]
    assert commands == [["sudo", "dnf", "install", "-y", "zsh"]]
    ctx.session.get.assert_not_called()
    assert zshrc.read_text() == before
    assert (ctx.home / ".p10k.zsh").read_text() == "# mine\n"


def test_fresh_install(mocker, make_ctx, recorded_commands, zsh_packages):
    mocker.patch("postinstall.phases.zsh.shutil.which", return_value="/usr/bin/zsh")
    mocker.patch("postinstall.phases.zsh.getpass.getuser", return_value="tester")
    mocker.patch("postinstall.phases.zsh.pwd.getpwnam", return_value=mocker.Mock(pw_shell="/bin/bash"))
    download = mocker.patch("postinstall.context.net_utils.download_file", side_effect=lambda s, url, dest: dest)
    ctx = make_ctx(packages=zsh_packages, session=mocker.Mock())

    zsh.run(ctx)

    commands = [cmd for cmd, _ in recorded_commands]
    installer = str(ctx.scratch_dir / "ohmyzsh-install.sh")
    custom = ctx.home / ".oh-my-zsh" / "custom"
    assert ["sudo", "usermod", "-s", "/usr/bin/zsh", "tester"] in commands
    assert ["sh", installer, "--unattended"] in commands
    assert ["git", "clone", "--depth=1", "https://example.org/p10k.git", str(custom / "themes" / "powerlevel10k")] in commands
    download.assert_called_once()
    sh_kwargs = next(kwargs for cmd, kwargs in recorded_commands if cmd[0] == "sh")
    assert sh_kwargs["env_vars"] == {"RUNZSH": "no", "CHSH": "no"}
    zshrc = (ctx.home / ".zshrc").read_text()
    assert 'ZSH_THEME="powerlevel10k/powerlevel10k"' in zshrc
    assert zsh.MANAGED_BLOCK_START in zshrc
    assert (ctx.home / ".p10k.zsh").is_file()
