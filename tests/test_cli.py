"""Tests for the command-line entry point (blueprinter.cli)."""

from __future__ import annotations

import pytest

from blueprinter.cli import build_parser, main, parse_extra_options, request_from_args
from blueprinter.config import CONFIG_FILENAME

pytestmark = pytest.mark.unit


def _output(console) -> str:
    return console.file.getvalue()


class TestParseExtraOptions:
    def test_flag(self):
        assert parse_extra_options(["--has-custom-command"]) == ({"has_custom_command": True}, [])

    def test_value(self):
        assert parse_extra_options(["--flavor=vanilla"]) == ({"flavor": "vanilla"}, [])

    def test_empty_value(self):
        assert parse_extra_options(["--flavor="]) == ({"flavor": ""}, [])

    def test_plain_tokens_are_positionals(self):
        options, positionals = parse_extra_options(["--foo", "bar:string", "baz:string"])
        assert options == {"foo": True}
        assert positionals == ["bar:string", "baz:string"]

    @pytest.mark.parametrize("token", ["-x", "--"])
    def test_rejects_non_options(self, token):
        with pytest.raises(ValueError, match="Unrecognised argument"):
            parse_extra_options([token])


class TestRequestFromArgs:
    def _parse(self, *argv: str):
        return build_parser().parse_known_args(list(argv))

    def test_basic(self):
        args, extras = self._parse("generate", "controller", "foo")
        request = request_from_args(args, extras)
        assert request.kind == "controller"
        assert request.name == "foo"
        assert request.options == {}
        assert request.args == []

    def test_flags_and_values(self):
        args, extras = self._parse(
            "g", "route", "foo", "--pod", "--dry-run", "--path=:foo_id/show", "--skip-tests"
        )
        request = request_from_args(args, extras)
        assert request.options == {
            "pod": True,
            "dry_run": True,
            "skip_tests": True,
            "path": ":foo_id/show",
        }

    def test_model_attributes(self):
        args, extras = self._parse("generate", "model", "foo", "firstName:string", "bars:has-many")
        assert request_from_args(args, extras).args == ["firstName:string", "bars:has-many"]

    def test_base_class(self):
        args, extras = self._parse("generate", "adapter", "foo", "--base-class=bar")
        assert request_from_args(args, extras).options == {"base_class": "bar"}

    def test_attributes_after_unknown_option(self):
        args, extras = self._parse("generate", "model", "foo", "--foo", "bar:string", "baz:string")
        request = request_from_args(args, extras)
        assert request.options == {"foo": True}
        assert request.args == ["bar:string", "baz:string"]

    def test_unknown_options_forwarded(self):
        args, extras = self._parse("generate", "customblue", "foo", "--custom-command")
        assert request_from_args(args, extras).options == {"custom_command": True}

    def test_pod_and_classic_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_known_args(["generate", "controller", "foo", "--pod", "--classic"])


class TestMain:
    def test_generate(self, project_dir, quiet_console):
        code = main(["-C", str(project_dir), "generate", "controller", "foo"], out=quiet_console)
        assert code == 0
        assert (project_dir / "app/controllers/foo.js").exists()
        output = _output(quiet_console)
        assert "create app/controllers/foo.js" in output
        assert "Wrote 2 file(s)" in output

    def test_dry_run(self, project_dir, quiet_console):
        code = main(
            ["-C", str(project_dir), "generate", "route", "foo", "--dry-run"], out=quiet_console
        )
        assert code == 0
        assert not (project_dir / "app/routes").exists()
        assert "Dry run" in _output(quiet_console)

    def test_rerun_is_nothing_to_do(self, project_dir, quiet_console):
        main(["-C", str(project_dir), "generate", "controller", "foo"], out=quiet_console)
        code = main(["-C", str(project_dir), "generate", "controller", "foo"], out=quiet_console)
        assert code == 0
        assert "Nothing to do" in _output(quiet_console)

    def test_destroy(self, project_dir, quiet_console):
        main(["-C", str(project_dir), "generate", "route", "foo"], out=quiet_console)
        code = main(["-C", str(project_dir), "d", "route", "foo"], out=quiet_console)
        assert code == 0
        assert not (project_dir / "app/routes/foo.js").exists()
        assert "Removed 3 file(s)" in _output(quiet_console)

    def test_unknown_blueprint(self, project_dir, quiet_console):
        code = main(["-C", str(project_dir), "generate", "nope", "foo"], out=quiet_console)
        assert code == 1
        assert "Unknown blueprint: nope" in _output(quiet_console)

    def test_self_extension(self, project_dir, quiet_console):
        code = main(
            ["-C", str(project_dir), "generate", "adapter", "foo", "--base-class=foo"],
            out=quiet_console,
        )
        assert code == 1
        assert "cannot extend from themself" in _output(quiet_console)

    def test_bad_extra_argument(self, project_dir, quiet_console):
        code = main(["-C", str(project_dir), "generate", "controller", "foo", "-x"], out=quiet_console)
        assert code == 2

    def test_model_attributes_after_unknown_option(self, project_dir, quiet_console):
        code = main(
            ["-C", str(project_dir), "generate", "model", "foo", "--foo", "bar:string", "baz:string"],
            out=quiet_console,
        )
        assert code == 0, _output(quiet_console)
        model = (project_dir / "app/models/foo.js").read_text(encoding="utf-8")
        assert "bar: DS.attr('string')" in model
        assert "baz: DS.attr('string')" in model

    def test_bad_config(self, project_dir, quiet_console):
        (project_dir / CONFIG_FILENAME).write_text("{not json", encoding="utf-8")
        code = main(["-C", str(project_dir), "list"], out=quiet_console)
        assert code == 1
        assert "Error" in _output(quiet_console)

    def test_list(self, project_dir, quiet_console):
        code = main(["-C", str(project_dir), "list"], out=quiet_console)
        assert code == 0
        output = _output(quiet_console)
        assert "adapter" in output
        assert "resource" in output
        assert "composite" in output
