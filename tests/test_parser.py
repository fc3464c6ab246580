from __future__ import annotations

from cliprobe.parser import HelpTextParser


COBRA_HELP = """\
kubectl controls the Kubernetes cluster manager.

Usage:
  kubectl [flags]
  kubectl [command]

Available Commands:
  get         Display one or many resources
  apply       Apply a configuration to a resource
  completion  Generate the autocompletion script

Flags:
  -h, --help                help for kubectl
      --kubeconfig string   Path to the kubeconfig file
  -n, --namespace string    If present, the namespace scope
"""


def test_commands_section_and_options():
    text = "Commands:\n  init   Initialize\n  build  Build\n\nOptions:\n  --verbose"
    parser = HelpTextParser()

    assert parser.parse_subcommands(text) == ["build", "init"]
    assert parser.parse_options(text) == ["--verbose"]


def test_available_commands_heading():
    parser = HelpTextParser()

    assert parser.parse_subcommands(COBRA_HELP) == ["apply", "completion", "get"]


def test_subcommands_heading_variants():
    parser = HelpTextParser()

    assert parser.parse_subcommands("Subcommands:\n  add  Add\n") == ["add"]
    assert parser.parse_subcommands("Subcommands\n  add  Add\n") == ["add"]
    assert parser.parse_subcommands("Command\n  run  Run\n") == ["run"]


def test_no_heading_yields_nothing():
    parser = HelpTextParser()
    text = "usage: tool [-h]\n\n  notacommand  text\n"

    assert parser.parse_subcommands(text) == []
    assert parser.parse_subcommands("") == []


def test_indented_heading_is_not_a_section():
    parser = HelpTextParser()

    assert parser.parse_subcommands("  Commands:\n  run  Run\n") == []


def test_blank_line_ends_section():
    parser = HelpTextParser()
    text = "Commands:\n  one  First\n\n  two  Not a command\n"

    assert parser.parse_subcommands(text) == ["one"]


def test_lines_not_starting_with_letter_are_skipped():
    parser = HelpTextParser()
    text = "Commands:\n  _private  Hidden\n  2fa  Numbers\n  -x  Flag\n  real  Kept\nfooter\n"

    assert parser.parse_subcommands(text) == ["real"]


def test_duplicates_are_removed_across_sections():
    parser = HelpTextParser()
    text = "Commands:\n  push  Push\n\nSubcommands:\n  push  Again\n  pull  Pull\n"

    assert parser.parse_subcommands(text) == ["pull", "push"]


def test_options_first_token_per_line():
    parser = HelpTextParser()

    assert parser.parse_options(COBRA_HELP) == ["--kubeconfig", "-h", "-n"]


def test_options_ignore_lines_not_starting_with_hyphen():
    parser = HelpTextParser()
    text = "Use --force to override\n  --dry-run   Only print\n-q  Quiet\n"

    assert parser.parse_options(text) == ["--dry-run", "-q"]


def test_option_context_returns_declaring_line():
    parser = HelpTextParser()
    text = "Options:\n  -o, --output [json|yaml]  Output format\n  --color [auto|never]  Color\n"

    assert parser.option_context(text, "--color") == "--color [auto|never]  Color"
    assert parser.option_context(text, "--output") == "-o, --output [json|yaml]  Output format"
    assert parser.option_context(text, "--missing") is None


def test_subcommand_descriptions():
    descriptions = HelpTextParser().parse_subcommand_descriptions(COBRA_HELP)

    assert descriptions == {
        "get": "Display one or many resources",
        "apply": "Apply a configuration to a resource",
        "completion": "Generate the autocompletion script",
    }


def test_subcommand_description_skips_argument_column():
    text = "Commands:\n  add [NAME]  Add a remote\n  list\n  show <ID>   Show one  (slow)\n"

    assert HelpTextParser().parse_subcommand_descriptions(text) == {
        "add": "Add a remote",
        "list": "",
        "show": "Show one  (slow)",
    }


def test_option_line_pairs_short_and_long_forms():
    parser = HelpTextParser()

    line = parser.parse_option_line("  -n, --namespace string    If present, the namespace scope")
    assert (line.short, line.long, line.description) == ("-n", "--namespace", "If present, the namespace scope")

    line = parser.parse_option_line("      --kubeconfig string   Path to the kubeconfig file")
    assert (line.short, line.long) == (None, "--kubeconfig")

    line = parser.parse_option_line("-f, --file some-file")
    assert (line.short, line.long, line.description) == ("-f", "--file", "")


def test_required_args_from_first_usage_line():
    parser = HelpTextParser()
    text = "usage: cp [OPTIONS] <SOURCE> <DEST>\nUsage: other <IGNORED>\n\n  --mode <m>  Mode\n"

    assert parser.parse_required_args(text) == ["SOURCE", "DEST"]
    assert parser.parse_required_args(COBRA_HELP) == []
    assert parser.parse_required_args("") == []
