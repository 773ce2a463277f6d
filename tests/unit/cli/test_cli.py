import textwrap

import pytest
from typer.testing import CliRunner

from varexport import exporter as exporter_module
from varexport.cli.constants import EXIT_ERROR, EXIT_NOT_FOUND
from varexport.cli.entrypoint import app
from varexport.cli.exceptions import CLIDumpError, describe_failure
from varexport.exceptions import UnsupportedMemberError, VariableAccessError

PLUGIN_SOURCE = textwrap.dedent(
    """
    from varexport import ManagedVariable, for_namespace, global_exporter

    payments = for_namespace("payments").include_in_global()
    payments.export_variable(ManagedVariable("pending", value=4, doc="Payments awaiting capture"))
    payments.export_variable(ManagedVariable("byRegion", value={"eu": 1, "us": 3}, expand=True))
    global_exporter().export_variable(ManagedVariable("build", value="1.2.3"))
    """
)

BROKEN_PLUGIN_SOURCE = textwrap.dedent(
    """
    from varexport import Variable, for_namespace

    class Exploding(Variable):
        def get_value(self):
            raise ValueError("sensor unplugged")

    for_namespace("broken").export_variable(Exploding("temperature"))
    """
)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def plugin(tmp_path, monkeypatch):
    """A module registering a few variables when imported, run from an empty directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("VAREXPORT_SETTINGS", raising=False)
    monkeypatch.setattr(exporter_module, "start_time", None)
    path = tmp_path / "plugin_vars.py"
    path.write_text(PLUGIN_SOURCE)
    return str(path)


@pytest.fixture
def broken_plugin(plugin, tmp_path):
    """A module registering a custom variable whose reads raise a non-varexport error."""
    path = tmp_path / "broken_vars.py"
    path.write_text(BROKEN_PLUGIN_SOURCE)
    return str(path)


class TestDump:
    def test_global_namespace(self, runner, plugin):
        result = runner.invoke(app, ["dump", "--import", plugin])
        assert result.exit_code == 0
        assert result.stdout == "build=1.2.3\npayments-byRegion\\#eu=1\npayments-byRegion\\#us=3\npayments-pending=4\n"

    def test_named_namespace_with_doc(self, runner, plugin):
        result = runner.invoke(app, ["dump", "-n", "payments", "--doc", "-i", plugin])
        assert result.exit_code == 0
        assert "# Payments awaiting capture\n" in result.stdout
        assert "pending=4\n" in result.stdout

    def test_json(self, runner, plugin):
        result = runner.invoke(app, ["dump", "-n", "payments", "--json", "-i", plugin])
        assert result.exit_code == 0
        assert result.stdout == "{byRegion#eu='1', byRegion#us='3', pending='4'}\n"

    def test_modules_from_settings_file(self, runner, plugin, tmp_path):
        settings_file = tmp_path / "cli-settings.yaml"
        settings_file.write_text("imported_modules:\n  - plugin_vars.py\n")
        result = runner.invoke(app, ["--settings", str(settings_file), "dump", "-n", "payments"])
        assert result.exit_code == 0
        assert "pending=4" in result.stdout

    def test_missing_settings_file(self, runner, plugin):
        result = runner.invoke(app, ["--settings", "missing.yaml", "dump"])
        assert result.exit_code == EXIT_ERROR

    def test_import_failure(self, runner, plugin):
        result = runner.invoke(app, ["dump", "-i", "no_such_module_for_varexport"])
        assert result.exit_code == EXIT_ERROR


class TestGet:
    def test_plain_variable(self, runner, plugin):
        result = runner.invoke(app, ["get", "build", "-i", plugin])
        assert result.exit_code == 0
        assert result.stdout == "1.2.3\n"

    def test_map_entry(self, runner, plugin):
        result = runner.invoke(app, ["get", "byRegion#us", "-n", "payments", "-i", plugin])
        assert result.exit_code == 0
        assert result.stdout == "3\n"

    def test_unknown_variable(self, runner, plugin):
        result = runner.invoke(app, ["get", "nope", "-i", plugin])
        assert result.exit_code == EXIT_NOT_FOUND


class TestNamespaces:
    def test_lists_namespaces(self, runner, plugin):
        result = runner.invoke(app, ["namespaces", "-i", plugin])
        assert result.exit_code == 0
        assert "(global)" in result.stdout
        assert "payments" in result.stdout

    def test_with_variables(self, runner, plugin):
        result = runner.invoke(app, ["namespaces", "--variables", "-i", plugin])
        assert result.exit_code == 0
        assert "Payments awaiting capture" in result.stdout
        assert "byRegion#eu" in result.stdout


class TestUnexpectedErrors:
    def test_dump_reports_failing_custom_variable(self, runner, broken_plugin):
        result = runner.invoke(app, ["dump", "-n", "broken", "-i", broken_plugin])
        assert result.exit_code == EXIT_ERROR
        assert not isinstance(result.exception, ValueError)

    def test_get_reports_failing_custom_variable(self, runner, broken_plugin):
        result = runner.invoke(app, ["get", "temperature", "-n", "broken", "-i", broken_plugin])
        assert result.exit_code == EXIT_ERROR
        assert not isinstance(result.exception, ValueError)

    def test_namespaces_reports_failing_custom_variable(self, runner, broken_plugin):
        result = runner.invoke(app, ["namespaces", "--variables", "-i", broken_plugin])
        assert result.exit_code == EXIT_ERROR
        assert not isinstance(result.exception, ValueError)


class TestErrorPanel:
    def test_variable_failure_names_variable_and_cause(self):
        def read_disk():
            raise OSError("disk gone")

        try:
            try:
                read_disk()
            except OSError as cause:
                raise VariableAccessError("failed to read value: disk gone", var_name="disk") from cause
        except VariableAccessError as e:
            lines = describe_failure(e)

        assert lines[0] == "VariableAccessError: Variable 'disk': failed to read value: disk gone"
        assert "Variable: [bold]disk[/]" in lines
        assert "Caused by OSError: disk gone" in lines
        assert lines[-1].startswith("Raised at ")
        assert lines[-1].endswith("in read_disk")

    def test_export_failure_names_member(self):
        error = UnsupportedMemberError(
            "type members are not supported by export", member_name="Nested", owner="Widget"
        )
        lines = describe_failure(error)
        assert "Member: [bold]Widget.Nested[/]" in lines
        assert not any(line.startswith("Raised at") for line in lines)

    def test_format_rich_has_no_full_traceback(self):
        try:
            raise KeyError("missing")
        except KeyError as e:
            error = CLIDumpError("Failed to dump namespace 'x'", hint="Check it.", original_exception=e)
        text = error.format_rich()
        assert "Traceback" not in text
        assert "[yellow]Hint:[/] Check it." in text
        assert "KeyError" in text
