"""Tests for the CLI dispatcher."""

from btrsnap import __version__
from btrsnap.cli.dispatcher import create_parser, format_environment, main


class TestCreateParser:
    """Tests for create_parser function."""

    def test_paths(self):
        """Test that every positional argument is a path."""
        args = create_parser({}).parse_args(["/a", "/b"])
        assert args.paths == ["/a", "/b"]

    def test_no_paths_parses(self):
        """Test that missing paths are left for main to report."""
        args = create_parser({}).parse_args([])
        assert args.paths == []

    def test_epilog_shows_environment(self):
        """Test that the help epilog lists current values."""
        epilog = create_parser({"TARSNAP_CACHE": "/srv/cache"}).epilog
        assert "TARSNAP_CACHE='/srv/cache'" in epilog


class TestFormatEnvironment:
    """Tests for format_environment function."""

    def test_all_variables(self):
        """Test that all recognized variables are shown."""
        text = format_environment({})
        for name in ("TARSNAP_OPTS", "TARSNAP_CACHE", "TARSNAP_KEY", "ALERT_RECIPIENTS"):
            assert name in text

    def test_empty_value_visible(self):
        """Test that an empty value is shown quoted."""
        assert "ALERT_RECIPIENTS=''" in format_environment({"ALERT_RECIPIENTS": ""})


class TestMain:
    """Tests for main function."""

    def test_no_arguments(self, runner, capsys):
        """Test that no paths prints usage and exits 1."""
        assert main([], runner=runner) == 1
        err = capsys.readouterr().err
        assert "usage:" in err
        assert runner.calls == []

    def test_help(self, env, runner, sleeper, capsys):
        """Test that --help shows usage with environment values and exits 0."""
        env.setenv("TARSNAP_KEY", "/etc/tarsnap/backup.key")

        assert main(["--help"], runner=runner, sleep=sleeper) == 0

        out = capsys.readouterr().out
        assert "usage:" in out
        assert "TARSNAP_KEY='/etc/tarsnap/backup.key'" in out
        assert runner.calls == []
        assert sleeper.calls == []

    def test_short_help(self, runner, capsys):
        """Test that -h behaves like --help."""
        assert main(["-h", "/data/a"], runner=runner) == 0
        assert runner.calls == []

    def test_version(self, runner, capsys):
        """Test that --version prints the version."""
        assert main(["--version"], runner=runner) == 0
        assert __version__ in capsys.readouterr().out

    def test_success(self, env, make_subvolume, runner, sleeper):
        """Test exit 0 when every path succeeded."""
        paths = [str(make_subvolume("alpha")), str(make_subvolume("beta"))]

        assert main(["--no-syslog", *paths], runner=runner, sleep=sleeper) == 0
        assert runner.kinds().count("archive") == 2

    def test_one_failure(self, env, make_subvolume, runner, sleeper):
        """Test exit 1 and a single alert when one archive fails."""
        alpha = make_subvolume("alpha")
        beta = make_subvolume("beta")
        runner.fail("archive", when=str(beta))

        code = main(["--no-syslog", str(alpha), str(beta)], runner=runner, sleep=sleeper)

        assert code == 1
        mails = runner.commands("mail")
        assert len(mails) == 1
        assert str(beta) in mails[0][2]
        assert runner.kinds().count("delete") == 2

    def test_config_error(self, env, make_subvolume, runner, sleeper):
        """Test that an unparsable environment exits 1 before any work."""
        env.setenv("TARSNAP_OPTS", "--exclude 'oops")

        code = main(["--no-syslog", str(make_subvolume())], runner=runner, sleep=sleeper)

        assert code == 1
        assert runner.calls == []

    def test_usage_error_exits_1(self, env, runner, sleeper, capsys):
        """Test that a path parsed as options is a usage error with status 1."""
        assert main(["--no-syslog", "-vol"], runner=runner, sleep=sleeper) == 1
        assert "usage:" in capsys.readouterr().err
        assert runner.calls == []

    def test_unknown_option_exits_1(self, runner, capsys):
        """Test that unknown options exit 1 instead of 2."""
        assert main(["--frobnicate", "/data/a"], runner=runner) == 1
        assert "--frobnicate" in capsys.readouterr().err

    def test_dash_path_after_separator(self, env, tmp_path, runner, sleeper):
        """Test that paths starting with '-' are backed up after '--'."""
        (tmp_path / "-vol").mkdir()
        env.chdir(tmp_path)

        assert main(["--no-syslog", "--", "-vol"], runner=runner, sleep=sleeper) == 0
        assert runner.kinds() == ["snapshot", "archive", "delete", "stats"]
        assert runner.commands("snapshot")[0][-2:] == ["-vol", "-vol/.btrsnap/snapshot"]

    def test_help_documents_separator(self, runner, capsys):
        """Test that the help text explains the '--' separator."""
        assert main(["--help"], runner=runner) == 0
        assert "btrsnap -- -vol" in capsys.readouterr().out
